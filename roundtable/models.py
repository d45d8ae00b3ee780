"""Pure dataclasses for the discussion pipeline. No logic, no deps."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Participant:
    name: str
    role: str = ""
    description: str = ""
    image_url: str = ""
    voice_id: str = ""
    id: str | None = None
    nationality: str | None = None
    era: str | None = None
    persona_prompt: str | None = None  # per-figure voice notes for the prompt

    @property
    def key(self) -> str:
        """Identity used for selection: id when present, else name."""
        return self.id if self.id else self.name


@dataclass(frozen=True)
class Turn:
    speaker: Participant
    text: str


class AttemptOutcome(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    RETRYABLE_FAILURE = "retryable-failure"
    FATAL_FAILURE = "fatal-failure"


@dataclass(frozen=True)
class GenerationAttempt:
    attempt_number: int    # 0-indexed
    outcome: AttemptOutcome = AttemptOutcome.PENDING


class GenerationStatus(str, Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class FailureReason(str, Enum):
    OVERLOADED = "overloaded"
    SERVICE_ERROR = "service_error"
    EMPTY_RESULT = "empty_result"


@dataclass(frozen=True)
class GenerationState:
    status: GenerationStatus = GenerationStatus.IDLE
    attempt: int = 0
    transcript: tuple[Turn, ...] = ()  # last good transcript
    reason: FailureReason | None = None


@dataclass(frozen=True)
class ServiceResponse:
    provider: str          # "gemini", "openai", "claude"
    model: str             # actual model string used
    generated_text: str | None
    latency_sec: float
    token_count: int | None


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    severity: Severity = Severity.INFO


class ChatRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class ChatMessage:
    role: ChatRole
    content: str
