"""Shared test fixtures for pytest.

The environment is pinned to ``test`` before anything imports settings so no
``.env`` file is read and no provider credentials are required. Real model
requests are blocked; stages run against ``ScriptedClient`` fakes or
pydantic-ai's ``FunctionModel``.
"""

import os
from collections.abc import Generator, Iterable, Mapping
from typing import Any

import pytest
from fastapi.testclient import TestClient
from pydantic_ai import models


os.environ["ENVIRONMENT"] = "test"
os.environ.pop("GEMINI_API_KEY", None)
os.environ.pop("AZURE_OPENAI_API_KEY", None)

models.ALLOW_MODEL_REQUESTS = False

from core.config import get_settings  # noqa: E402
from dependencies.meeting import get_meeting_orchestrator  # noqa: E402
from main import app  # noqa: E402
from services.meeting.orchestrator import MeetingOrchestrator  # noqa: E402
from services.meeting.session_cache import SessionCache  # noqa: E402
from services.meeting.stages import (  # noqa: E402
    ActionStage,
    FollowUpStage,
    QAStage,
    UnderstandingStage,
)


class ScriptedClient:
    """Generation client fake returning canned responses in call order.

    Each response is either a string (returned as the raw text) or an
    exception instance (raised). Prompts and parameters are recorded.
    """

    def __init__(self, responses: Iterable[str | BaseException] = ()) -> None:
        self.responses = list(responses)
        self.prompts: list[str] = []
        self.parameters: list[Mapping[str, Any] | None] = []
        self.configured = True

    async def generate(
        self, prompt: str, parameters: Mapping[str, Any] | None = None
    ) -> str:
        self.prompts.append(prompt)
        self.parameters.append(parameters)
        if not self.responses:
            raise AssertionError("ScriptedClient ran out of responses")
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response

    def is_configured(self) -> bool:
        return self.configured

    @property
    def call_count(self) -> int:
        return len(self.prompts)


class FakeClock:
    """Manually advanced monotonic clock for cache tests."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_orchestrator(
    client: ScriptedClient, cache: SessionCache | None = None
) -> MeetingOrchestrator:
    return MeetingOrchestrator(
        understanding=UnderstandingStage(client),
        action=ActionStage(client),
        follow_up=FollowUpStage(client),
        qa=QAStage(client),
        cache=cache if cache is not None else SessionCache(),
    )


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Generator[None, None, None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def scripted_client() -> ScriptedClient:
    return ScriptedClient()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def meeting_api(
    scripted_client: ScriptedClient,
) -> Generator[tuple[TestClient, ScriptedClient], None, None]:
    """TestClient whose orchestrator runs on the scripted generation client."""
    orchestrator = make_orchestrator(scripted_client)
    app.dependency_overrides[get_meeting_orchestrator] = lambda: orchestrator
    with TestClient(app) as test_client:
        yield test_client, scripted_client
    app.dependency_overrides.pop(get_meeting_orchestrator, None)


@pytest.fixture
def orchestrator_factory():
    """Build orchestrators sharing the fake client wiring."""
    return make_orchestrator
