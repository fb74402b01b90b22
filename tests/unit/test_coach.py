"""
Tests for the SprintCoach service.

The model client is a fake, so these run without network access and
can assert exactly how many times the model was called.
"""

import json

import pytest

from sprint_coach.core.coaching.coach import (
    NOT_JSON_MESSAGE,
    SCHEMA_MISMATCH_MESSAGE,
    SprintCoach,
    validate_sessions_payload,
)
from sprint_coach.core.coaching.errors import (
    ConfigurationError,
    EmptyModelResponseError,
    SessionValidationError,
)
from sprint_coach.core.coaching.models import RequestState

from conftest import FakeClientFactory, FakeModelClient


def _coach(client: FakeModelClient, api_key: str = "test-key", strict: bool = False):
    factory = FakeClientFactory(client)
    return SprintCoach(api_key=api_key, client_factory=factory, strict_schema=strict), factory


# ---------------------------------------------------------------------------
# Payload Validation Tests
# ---------------------------------------------------------------------------

class TestValidateSessionsPayload:
    """The request body must carry a non-empty list of session objects."""

    def test_returns_sessions(self, session_payloads):
        assert validate_sessions_payload({"sessions": session_payloads}) == session_payloads

    @pytest.mark.parametrize("body", [
        None,
        [],
        "sessions",
        {},
        {"sessions": []},
        {"sessions": "30m"},
        {"sessions": {"date": "1/1/2026"}},
        {"sessions": [1, 2]},
    ])
    def test_rejects_unusable_bodies(self, body):
        with pytest.raises(SessionValidationError, match="non-empty array"):
            validate_sessions_payload(body)


# ---------------------------------------------------------------------------
# Request Flow Tests
# ---------------------------------------------------------------------------

class TestSprintCoach:
    """One request: validate, check credential, call once, normalize."""

    async def test_plain_json_is_returned_verbatim(self, session_payloads):
        client = FakeModelClient(text='{"Readiness":"high"}')
        coach, _ = _coach(client)

        analysis = await coach.recommend({"sessions": session_payloads})

        assert analysis.state == RequestState.PARSED_JSON
        assert analysis.payload == {"Readiness": "high"}
        assert analysis.session_count == 6
        assert client.call_count == 1

    async def test_fenced_json_is_unwrapped(self, session_payloads):
        client = FakeModelClient(text='```json\n{"Readiness":"low"}\n```')
        coach, _ = _coach(client)

        analysis = await coach.recommend({"sessions": session_payloads})

        assert analysis.payload == {"Readiness": "low"}

    async def test_prose_becomes_parse_failure(self, session_payloads):
        client = FakeModelClient(text="I cannot help")
        coach, _ = _coach(client)

        analysis = await coach.recommend({"sessions": session_payloads})

        assert analysis.state == RequestState.PARSE_FAILED
        assert analysis.raw_text == "I cannot help"
        assert analysis.message == NOT_JSON_MESSAGE
        assert coach.state == RequestState.PARSE_FAILED

    async def test_schema_is_not_enforced_by_default(self, session_payloads):
        """Off-schema JSON passes through unless strict mode is on."""
        client = FakeModelClient(text='{"readiness": "sky high", "extra": 1}')
        coach, _ = _coach(client)

        analysis = await coach.recommend({"sessions": session_payloads})

        assert analysis.payload == {"readiness": "sky high", "extra": 1}

    async def test_empty_text_raises(self, session_payloads):
        client = FakeModelClient(text="   ", result_keys=["id", "content"])
        coach, _ = _coach(client)

        with pytest.raises(EmptyModelResponseError) as exc_info:
            await coach.recommend({"sessions": session_payloads})

        assert exc_info.value.result_keys == ["id", "content"]
        assert coach.state == RequestState.EMPTY_RESPONSE

    async def test_empty_sessions_never_reach_model(self):
        client = FakeModelClient(text='{"Readiness":"high"}')
        coach, factory = _coach(client)

        with pytest.raises(SessionValidationError):
            await coach.recommend({"sessions": []})

        assert client.call_count == 0
        assert factory.api_keys == []
        assert coach.state == RequestState.REJECTED

    async def test_missing_key_never_builds_client(self, session_payloads):
        client = FakeModelClient(text='{"Readiness":"high"}')
        coach, factory = _coach(client, api_key="")

        with pytest.raises(ConfigurationError, match="ENV NOT LOADED"):
            await coach.recommend({"sessions": session_payloads})

        assert client.call_count == 0
        assert factory.api_keys == []

    async def test_bad_input_wins_over_missing_key(self):
        """Validation runs first, so a bad body is a validation error even without a key."""
        client = FakeModelClient(text='{"Readiness":"high"}')
        coach, factory = _coach(client, api_key="")

        with pytest.raises(SessionValidationError):
            await coach.recommend({"sessions": []})

        assert coach.state == RequestState.REJECTED
        assert factory.api_keys == []

    async def test_model_errors_propagate(self, session_payloads):
        client = FakeModelClient(error=TimeoutError("model too slow"))
        coach, _ = _coach(client)

        with pytest.raises(TimeoutError):
            await coach.recommend({"sessions": session_payloads})

        assert coach.state == RequestState.MODEL_ERROR
        assert client.call_count == 1

    async def test_prompt_carries_recent_sessions_only(self, session_payloads):
        client = FakeModelClient(text='{"Readiness":"high"}')
        coach, factory = _coach(client)

        await coach.recommend({"sessions": session_payloads})

        prompt = client.prompts[0]
        assert session_payloads[3]["date"] in prompt
        assert session_payloads[4]["date"] not in prompt
        assert factory.api_keys == ["test-key"]


class TestStrictSchema:
    """Strict mode downgrades off-schema JSON to the parse-failure path."""

    async def test_valid_recommendation_passes(self, session_payloads, full_recommendation):
        client = FakeModelClient(text=json.dumps(full_recommendation))
        coach, _ = _coach(client, strict=True)

        analysis = await coach.recommend({"sessions": session_payloads})

        assert analysis.is_parsed
        assert analysis.payload == full_recommendation

    async def test_mismatch_is_downgraded(self, session_payloads):
        client = FakeModelClient(text='{"Readiness":"high"}')
        coach, _ = _coach(client, strict=True)

        analysis = await coach.recommend({"sessions": session_payloads})

        assert analysis.state == RequestState.PARSE_FAILED
        assert analysis.message == SCHEMA_MISMATCH_MESSAGE
        assert analysis.raw_text == '{"Readiness":"high"}'
