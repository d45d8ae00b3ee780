"""Abstract base for generation service adapters and their error taxonomy."""

from abc import ABC, abstractmethod

from roundtable.models import ServiceResponse

# HTTP statuses treated as transient overload
OVERLOAD_STATUS_CODES = frozenset({503})


class GenerationServiceError(Exception):
    """Raised when a generation service call fails."""

    def __init__(self, provider_name: str, message: str) -> None:
        self.provider_name = provider_name
        super().__init__(f"[{provider_name}] {message}")


class RetryableServiceError(GenerationServiceError):
    """Transient overload; the call may be retried."""


class FatalServiceError(GenerationServiceError):
    """Any failure that must not be retried."""


class RetriesExhaustedError(RetryableServiceError):
    """Every allowed attempt ended in a retryable failure."""

    def __init__(self, provider_name: str, attempts: int, last_error: RetryableServiceError) -> None:
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(provider_name, f"Gave up after {attempts} attempts: {last_error}")


def classify_status(
    provider_name: str,
    status_code: int | None,
    message: str,
    overload_codes: frozenset[int] = OVERLOAD_STATUS_CODES,
) -> GenerationServiceError:
    """Map an HTTP status from a vendor SDK error onto the retry taxonomy."""
    if status_code in overload_codes:
        return RetryableServiceError(provider_name, f"Service overloaded ({status_code}): {message}")
    return FatalServiceError(provider_name, f"API call failed: {message}")


class GenerationService(ABC):
    """Abstract base for text-in/text-out generation services."""

    @abstractmethod
    def name(self) -> str:
        """Return the short service name (e.g. 'gemini', 'claude')."""
        ...

    @abstractmethod
    def model_string(self) -> str:
        """Return the actual model identifier string."""
        ...

    @abstractmethod
    async def generate(self, prompt: str) -> ServiceResponse:
        """Generate text for the given prompt.

        Args:
            prompt: The full prompt text to send.

        Returns:
            ServiceResponse; ``generated_text`` is None when the service
            answered without any text.

        Raises:
            RetryableServiceError: The service reported a transient overload.
            FatalServiceError: Any other failure.
        """
        ...
