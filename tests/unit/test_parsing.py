"""
Tests for model response normalization.
"""

import pytest

from sprint_coach.core.coaching.parsing import (
    ResponseNotJSON,
    ResponseSchemaMismatch,
    parse_model_json,
    strip_code_fences,
    validate_recommendation,
)


class TestStripCodeFences:
    """Fences the model adds despite instructions are removed."""

    def test_plain_json_is_untouched(self):
        assert strip_code_fences('{"Readiness":"high"}') == '{"Readiness":"high"}'

    def test_json_tagged_fence(self):
        text = '```json\n{"Readiness":"low"}\n```'
        assert strip_code_fences(text) == '{"Readiness":"low"}'

    def test_tag_is_case_insensitive(self):
        text = '```JSON\n{"Readiness":"low"}\n```'
        assert strip_code_fences(text) == '{"Readiness":"low"}'

    def test_untagged_fence(self):
        text = '```\n{"Readiness":"medium"}\n```'
        assert strip_code_fences(text) == '{"Readiness":"medium"}'

    def test_surrounding_whitespace(self):
        text = '  \n```json\n{"a": 1}\n```  \n'
        assert strip_code_fences(text) == '{"a": 1}'

    def test_only_outer_fences_are_removed(self):
        """Backticks inside the body belong to the content."""
        text = '```json\n{"Workout": ["``` not a fence"]}\n```'
        assert strip_code_fences(text) == '{"Workout": ["``` not a fence"]}'

    def test_plain_text_is_returned_trimmed(self):
        assert strip_code_fences("  I cannot help  ") == "I cannot help"


class TestParseModelJson:
    """Strict JSON parsing of the cleaned text."""

    def test_object(self):
        assert parse_model_json('{"Readiness":"high"}') == {"Readiness": "high"}

    def test_non_object_json_is_still_json(self):
        assert parse_model_json("[1, 2]") == [1, 2]

    def test_prose_is_rejected(self):
        with pytest.raises(ResponseNotJSON):
            parse_model_json("I cannot help")

    def test_truncated_json_is_rejected(self):
        with pytest.raises(ResponseNotJSON):
            parse_model_json('{"Readiness": "hi')

    def test_nan_is_rejected(self):
        with pytest.raises(ResponseNotJSON):
            parse_model_json('{"score": NaN}')


class TestValidateRecommendation:
    """The opt-in schema check."""

    def test_accepts_documented_shape(self, full_recommendation):
        recommendation = validate_recommendation(full_recommendation)
        assert recommendation.readiness == "medium"
        assert recommendation.recommended_session_type == "tempo"
        assert recommendation.warning is None

    def test_rejects_unknown_readiness(self, full_recommendation):
        full_recommendation["Readiness"] = "very high"
        with pytest.raises(ResponseSchemaMismatch):
            validate_recommendation(full_recommendation)

    def test_rejects_unknown_session_type(self, full_recommendation):
        full_recommendation["Recommended Session Type"] = "hill sprints"
        with pytest.raises(ResponseSchemaMismatch):
            validate_recommendation(full_recommendation)

    def test_rejects_missing_field(self, full_recommendation):
        del full_recommendation["Workout"]
        with pytest.raises(ResponseSchemaMismatch):
            validate_recommendation(full_recommendation)

    def test_rejects_renamed_field(self, full_recommendation):
        full_recommendation["readinessReason"] = full_recommendation.pop("Readiness Reason")
        with pytest.raises(ResponseSchemaMismatch):
            validate_recommendation(full_recommendation)

    def test_rejects_non_object(self):
        with pytest.raises(ResponseSchemaMismatch):
            validate_recommendation(["not", "an", "object"])
