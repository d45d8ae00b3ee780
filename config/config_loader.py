"""Load settings.yaml into typed dataclasses. Reports the service API key at startup."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

_CONFIG_DIR = Path(__file__).parent
_SETTINGS_PATH = _CONFIG_DIR / "settings.yaml"

_DEFAULT_MODERATED = (
    "You are moderating a discussion between {participants} about {topic}.\n"
    "{moderator} is the moderator of this discussion.\n"
    "Each character should speak in their own voice and perspective, "
    "drawing from their historical context and experiences.\n"
    "Generate a natural conversation between these figures, with {moderator} guiding the discussion."
)

_DEFAULT_OPEN = (
    "Generate a natural conversation between {participants} about {topic}.\n"
    "Each character should speak in their own voice and perspective, "
    "drawing from their historical context and experiences."
)

_DEFAULT_CHAT = (
    "You are {name}. A user has sent this message: {message}\n"
    "Respond in your characteristic speaking style, drawing from your historical context "
    "and experiences. Keep the response natural and engaging."
)

_DEFAULT_CHAT_GREETING = "Good day, I'm {name}. What would you like to talk about?"


@dataclass
class ServiceConfig:
    name: str
    sdk: str
    model: str
    api_key_env: str
    max_tokens: int
    base_url: str | None = None
    available: bool = False


@dataclass
class PromptsConfig:
    moderated: str = _DEFAULT_MODERATED
    open: str = _DEFAULT_OPEN
    chat: str = _DEFAULT_CHAT
    chat_greeting: str = _DEFAULT_CHAT_GREETING


@dataclass
class DiscussionConfig:
    min_participants: int = 2
    max_participants: int = 4
    require_moderator: bool = True
    max_retries: int = 3
    retry_delay_sec: float = 2.0
    roster_path: Path = _CONFIG_DIR / "roster.yaml"
    featured: list[str] = field(default_factory=list)


@dataclass
class AppConfig:
    discussion: DiscussionConfig
    service: ServiceConfig
    prompts: PromptsConfig
    topics: list[str] = field(default_factory=list)


def _resolve_path(value: str, base: Path) -> Path:
    path = Path(value)
    return path if path.is_absolute() else base / path


def load_config(settings_path: Path = _SETTINGS_PATH) -> AppConfig:
    """Load and validate configuration from settings.yaml.

    Raises FileNotFoundError if settings file missing.
    Logs a message for a missing API key but does not raise — callers check
    ``service.available``.
    """
    if not settings_path.exists():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")

    with settings_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    discussion_raw = raw.get("discussion", {})
    discussion = DiscussionConfig(
        min_participants=int(discussion_raw.get("min_participants", 2)),
        max_participants=int(discussion_raw.get("max_participants", 4)),
        require_moderator=bool(discussion_raw.get("require_moderator", True)),
        max_retries=int(discussion_raw.get("max_retries", 3)),
        retry_delay_sec=float(discussion_raw.get("retry_delay_sec", 2.0)),
        roster_path=_resolve_path(discussion_raw.get("roster_path", "roster.yaml"), settings_path.parent),
        featured=[str(n) for n in discussion_raw.get("featured", [])],
    )

    prompts_raw = raw.get("prompts", {})
    prompts = PromptsConfig(
        moderated=prompts_raw.get("moderated", _DEFAULT_MODERATED),
        open=prompts_raw.get("open", _DEFAULT_OPEN),
        chat=prompts_raw.get("chat", _DEFAULT_CHAT),
        chat_greeting=prompts_raw.get("chat_greeting", _DEFAULT_CHAT_GREETING),
    )

    service_raw = raw["service"]
    service = ServiceConfig(
        name=str(service_raw["name"]),
        sdk=service_raw["sdk"],
        model=service_raw["model"],
        api_key_env=service_raw["api_key_env"],
        max_tokens=int(service_raw["max_tokens"]),
        base_url=service_raw.get("base_url"),
    )

    api_key = os.environ.get(service.api_key_env, "").strip()
    if api_key:
        service.available = True
        logger.info("Generation service available: %s", service.name)
    else:
        logger.info(
            "Generation service unavailable (no API key): %s — set %s in .env",
            service.name,
            service.api_key_env,
        )

    return AppConfig(
        discussion=discussion,
        service=service,
        prompts=prompts,
        topics=[str(t) for t in raw.get("topics", [])],
    )
