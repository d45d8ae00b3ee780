"""Discussion orchestration: validate, prompt, generate, attribute, publish."""

import dataclasses
import logging
from collections.abc import Callable

from config.config_loader import PromptsConfig
from roundtable.client import GenerationClient
from roundtable.models import (
    FailureReason,
    GenerationAttempt,
    GenerationState,
    GenerationStatus,
    Notification,
    Severity,
    Turn,
)
from roundtable.notifications import Notifier, null_notifier
from roundtable.prompt import build_prompt
from roundtable.providers.base import RetriesExhaustedError
from roundtable.selection import Selection, SelectionValidationError
from roundtable.turns import assign_turns

logger = logging.getLogger(__name__)

StateListener = Callable[[GenerationState], None]

_FAILURE_MESSAGES = {
    FailureReason.OVERLOADED: (
        "Error",
        "The AI service is currently overloaded. Please try again in a few minutes.",
        Severity.ERROR,
    ),
    FailureReason.SERVICE_ERROR: (
        "Error",
        "Failed to generate discussion. Please try again.",
        Severity.ERROR,
    ),
    FailureReason.EMPTY_RESULT: (
        "No discussion generated",
        "The AI service returned no text. Please try again.",
        Severity.WARNING,
    ),
}


class DiscussionOrchestrator:
    """Owns the generation state for one session.

    At most one generation runs at a time. The orchestrator is the only
    writer of ``state``; listeners registered with ``subscribe`` observe
    every change, including the attempt counter moving during retries.
    """

    def __init__(
        self,
        selection: Selection,
        client: GenerationClient,
        notify: Notifier = null_notifier,
        templates: PromptsConfig | None = None,
    ) -> None:
        self._selection = selection
        self._client = client
        self._notify = notify
        self._templates = templates
        self._state = GenerationState()
        self._in_flight = False
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> GenerationState:
        return self._state

    @property
    def transcript(self) -> tuple[Turn, ...]:
        return self._state.transcript

    @property
    def is_generating(self) -> bool:
        return self._in_flight

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a state listener. Returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, **changes) -> None:
        self._state = dataclasses.replace(self._state, **changes)
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                logger.exception("State listener %r failed", listener)

    def _on_attempt(self, attempt: GenerationAttempt) -> None:
        if attempt.attempt_number != self._state.attempt:
            logger.debug("Generation moved to attempt %d", attempt.attempt_number)
            self._publish(attempt=attempt.attempt_number)

    def _fail(self, reason: FailureReason) -> None:
        title, description, severity = _FAILURE_MESSAGES[reason]
        self._publish(status=GenerationStatus.FAILED, reason=reason)
        self._notify(Notification(title, description, severity))

    async def start(self) -> GenerationState:
        """Run one generation to completion and return the resulting state.

        A call while another generation is in flight is rejected with a
        "busy" notification. Validation failures are notified and leave the
        state untouched. Service failures end in ``FAILED`` and keep the
        previous transcript.
        """
        if self._in_flight:
            logger.info("Generation already in progress, ignoring start request")
            self._notify(
                Notification(
                    "Generation in progress",
                    "Please wait for the current discussion to finish.",
                    Severity.WARNING,
                )
            )
            return self._state

        try:
            snapshot = self._selection.validate_for_generation()
        except SelectionValidationError as exc:
            logger.info("Selection rejected: %s", exc)
            self._notify(exc.to_notification())
            return self._state

        self._in_flight = True
        try:
            try:
                prompt = build_prompt(snapshot, self._templates)
            except (KeyError, IndexError, ValueError) as exc:
                logger.error("Prompt template could not be rendered: %r", exc)
                self._fail(FailureReason.SERVICE_ERROR)
                return self._state

            logger.info(
                "Generating discussion on %r with %d participants",
                snapshot.topic,
                len(snapshot.participants),
            )
            logger.debug("Prompt:\n%s", prompt)
            self._publish(status=GenerationStatus.IN_FLIGHT, attempt=0, reason=None)

            try:
                text = await self._client.generate(prompt, on_attempt=self._on_attempt)
            except RetriesExhaustedError as exc:
                logger.error("Error generating discussion: %s", exc)
                self._fail(FailureReason.OVERLOADED)
                return self._state
            except Exception as exc:
                logger.error("Error generating discussion: %s", exc)
                self._fail(FailureReason.SERVICE_ERROR)
                return self._state

            turns = assign_turns(text or "", snapshot.participants)
            if not turns:
                logger.warning("Service returned no usable text")
                self._fail(FailureReason.EMPTY_RESULT)
                return self._state

            self._publish(status=GenerationStatus.SUCCEEDED, transcript=tuple(turns), reason=None)
            logger.info("Discussion generated: %d turns", len(turns))
            self._notify(
                Notification(
                    "Discussion Generated",
                    "The historical figures have started their conversation.",
                    Severity.INFO,
                )
            )
            return self._state
        finally:
            self._in_flight = False
