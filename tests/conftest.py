"""Shared pytest fixtures."""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from config.config_loader import AppConfig, DiscussionConfig, PromptsConfig, ServiceConfig
from roundtable.models import Notification, Participant, ServiceResponse
from roundtable.providers.base import GenerationService
from roundtable.selection import Selection


def make_response(text: str | None, provider: str = "mock") -> ServiceResponse:
    return ServiceResponse(
        provider=provider,
        model="mock-model",
        generated_text=text,
        latency_sec=0.1,
        token_count=10,
    )


class MockService(GenerationService):
    """Test double GenerationService."""

    def __init__(self, service_name: str = "mock", response_text: str | None = "Mock line") -> None:
        self._name = service_name
        self._response_text = response_text
        # Shadow the class method with an AsyncMock at the instance level.
        # ABC check passes because generate is defined in the class body below.
        self.generate = AsyncMock(return_value=make_response(response_text, service_name))  # type: ignore[assignment]

    def name(self) -> str:
        return self._name

    def model_string(self) -> str:
        return "mock-model"

    async def generate(self, prompt: str) -> ServiceResponse:  # type: ignore[override]
        """Default implementation; replaced by AsyncMock in __init__."""
        return make_response(self._response_text, self._name)


class RecordingNotifier:
    """Collects notifications for assertions."""

    def __init__(self) -> None:
        self.notifications: list[Notification] = []

    def __call__(self, notification: Notification) -> None:
        self.notifications.append(notification)

    @property
    def titles(self) -> list[str]:
        return [n.title for n in self.notifications]


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def lincoln() -> Participant:
    return Participant(id="lincoln", name="Abraham Lincoln", role="16th President")


@pytest.fixture
def douglass() -> Participant:
    return Participant(id="douglass", name="Frederick Douglass", role="Abolitionist")


@pytest.fixture
def kennedy() -> Participant:
    return Participant(id="jfk", name="John F. Kennedy", role="35th President")


@pytest.fixture
def king() -> Participant:
    return Participant(id="king", name="Martin Luther King Jr.", role="Civil rights leader")


@pytest.fixture
def franklin() -> Participant:
    return Participant(id="franklin", name="Benjamin Franklin", role="Founding Father")


@pytest.fixture
def ready_selection(notifier, lincoln, douglass, kennedy) -> Selection:
    """Three participants, Lincoln moderating, topic set."""
    selection = Selection(notifier)
    for p in (lincoln, douglass, kennedy):
        selection.toggle_participant(p)
    selection.set_moderator(lincoln)
    selection.set_topic("Justice and Equality")
    return selection


@pytest.fixture
def mock_service() -> MockService:
    return MockService()


@pytest.fixture
def sample_service_config() -> ServiceConfig:
    return ServiceConfig(
        name="openai",
        sdk="openai",
        model="gpt-4o",
        api_key_env="TEST_OPENAI_KEY",
        max_tokens=1024,
    )


@pytest.fixture
def sample_app_config(tmp_path: Path, sample_service_config: ServiceConfig) -> AppConfig:
    return AppConfig(
        discussion=DiscussionConfig(roster_path=tmp_path / "roster.yaml"),
        service=sample_service_config,
        prompts=PromptsConfig(),
        topics=["War and Peace", "Justice and Equality", "Innovation and Progress"],
    )
