"""
Shared fixtures.

The model is never called for real in tests. FakeModelClient records
every prompt it receives, so tests can assert on call counts.
"""

from datetime import datetime
from typing import Optional

import pytest

from sprint_coach.core.coaching.coach import ModelReply
from sprint_coach.core.coaching.models import SessionRecord


class FakeModelClient:
    """Stands in for the Anthropic client. Returns canned text or raises."""

    def __init__(
        self,
        text: str = "",
        result_keys: Optional[list[str]] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.text = text
        self.result_keys = result_keys if result_keys is not None else ["id", "content", "model"]
        self.error = error
        self.prompts: list[str] = []

    @property
    def call_count(self) -> int:
        return len(self.prompts)

    async def generate(self, prompt: str) -> ModelReply:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return ModelReply(text=self.text, result_keys=self.result_keys)


class FakeClientFactory:
    """Hands out one FakeModelClient and remembers the keys it was built with."""

    def __init__(self, client: FakeModelClient) -> None:
        self.client = client
        self.api_keys: list[str] = []

    def __call__(self, api_key: str) -> FakeModelClient:
        self.api_keys.append(api_key)
        return self.client


@pytest.fixture
def fake_client() -> FakeModelClient:
    return FakeModelClient(text='{"Readiness": "high"}')


@pytest.fixture
def fake_factory(fake_client) -> FakeClientFactory:
    return FakeClientFactory(fake_client)


@pytest.fixture
def session_payloads() -> list[dict]:
    """Six logged sessions, most recent first, as the client sends them."""
    return [
        {
            "date": f"10/{17 - i}/2026",
            "sets": 3,
            "reps": 2,
            "distance": f"{30 + i * 10}m",
            "intensity": "95%",
            "notes": "tight calves" if i == 0 else "",
        }
        for i in range(6)
    ]


@pytest.fixture
def sample_record() -> SessionRecord:
    return SessionRecord.create(
        distance="60",
        intensity="90",
        sets=2,
        reps=3,
        notes="windy",
        now=datetime(2026, 10, 17, 18, 30),
    )


@pytest.fixture
def full_recommendation() -> dict:
    """A recommendation that follows the documented schema exactly."""
    return {
        "Readiness": "medium",
        "Readiness Reason": "Two high-intensity days in a row with calf tightness.",
        "Recommended Session Type": "tempo",
        "Workout": [
            "6 × 100m @ 70% (walk back recovery)",
            "2 × 200m @ 65%",
        ],
        "Coach Notes": [
            "Keep ground contacts relaxed.",
            "If calves feel tight again → reduce volume 20%",
        ],
        "Next Suggested Distance Range": "100-200m",
        "Warning": None,
    }
