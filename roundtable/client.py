"""Generation client: calls the service with bounded, fixed-delay retry."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from roundtable.models import AttemptOutcome, GenerationAttempt, Notification, Severity
from roundtable.notifications import Notifier, null_notifier
from roundtable.providers.base import (
    FatalServiceError,
    GenerationService,
    GenerationServiceError,
    RetriesExhaustedError,
    RetryableServiceError,
)

logger = logging.getLogger(__name__)

MAX_RETRIES = 3        # total attempts, including the first
RETRY_DELAY = 2.0      # seconds between attempts

AttemptListener = Callable[[GenerationAttempt], None]


class GenerationClient:
    """Wrap a GenerationService with the retry policy.

    Only ``RetryableServiceError`` is retried. Each scheduled retry emits
    exactly one notification; success and failure are left to the caller.
    """

    def __init__(
        self,
        service: GenerationService,
        notify: Notifier = null_notifier,
        *,
        max_retries: int = MAX_RETRIES,
        retry_delay: float = RETRY_DELAY,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        self._service = service
        self._notify = notify
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._sleep = sleep

    @property
    def service(self) -> GenerationService:
        return self._service

    async def generate(self, prompt: str, on_attempt: AttemptListener | None = None) -> str | None:
        """Run the prompt, retrying transient overloads.

        Args:
            prompt: The full prompt text.
            on_attempt: Optional callback invoked as each attempt starts and ends.

        Returns:
            The generated text, or None when the service answered with none.

        Raises:
            RetriesExhaustedError: Every attempt failed with a retryable error.
            FatalServiceError: A non-retryable failure; raised on first occurrence.
        """
        name = self._service.name()

        for attempt in range(self.max_retries):
            if on_attempt:
                on_attempt(GenerationAttempt(attempt))
            try:
                response = await self._service.generate(prompt)
            except RetryableServiceError as exc:
                if on_attempt:
                    on_attempt(GenerationAttempt(attempt, AttemptOutcome.RETRYABLE_FAILURE))
                if attempt + 1 >= self.max_retries:
                    logger.error("Service %s still overloaded after %d attempts", name, self.max_retries)
                    raise RetriesExhaustedError(name, self.max_retries, exc) from exc
                logger.warning(
                    "Service %s overloaded on attempt %d/%d, retrying in %.1fs: %s",
                    name, attempt + 1, self.max_retries, self.retry_delay, exc,
                )
                self._notify(
                    Notification(
                        "API Temporarily Unavailable",
                        f"Retrying in {self.retry_delay:g} seconds... "
                        f"(Attempt {attempt + 2}/{self.max_retries})",
                        Severity.INFO,
                    )
                )
                await self._sleep(self.retry_delay)
                continue
            except GenerationServiceError as exc:
                if on_attempt:
                    on_attempt(GenerationAttempt(attempt, AttemptOutcome.FATAL_FAILURE))
                logger.error("Service %s failed on attempt %d: %s", name, attempt + 1, exc)
                if isinstance(exc, FatalServiceError):
                    raise
                raise FatalServiceError(name, str(exc)) from exc
            except Exception as exc:
                if on_attempt:
                    on_attempt(GenerationAttempt(attempt, AttemptOutcome.FATAL_FAILURE))
                logger.error("Service %s unexpected failure on attempt %d: %s", name, attempt + 1, exc)
                raise FatalServiceError(name, f"Unexpected error: {exc}") from exc

            if on_attempt:
                on_attempt(GenerationAttempt(attempt, AttemptOutcome.SUCCESS))
            logger.info("Service %s answered on attempt %d", name, attempt + 1)
            return response.generated_text or None

        raise RuntimeError("retry loop exited without a result")
