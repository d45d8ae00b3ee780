"""Participant, moderator and topic selection with its cardinality rules."""

import logging
from dataclasses import dataclass
from enum import Enum

from roundtable.models import Notification, Participant, Severity
from roundtable.notifications import Notifier, null_notifier

logger = logging.getLogger(__name__)

DEFAULT_MIN_PARTICIPANTS = 2
DEFAULT_MAX_PARTICIPANTS = 4


class ValidationKind(str, Enum):
    TOO_FEW_PARTICIPANTS = "too_few_participants"
    NO_TOPIC = "no_topic"
    NO_MODERATOR = "no_moderator"
    SELECTION_FULL = "selection_full"


class SelectionValidationError(Exception):
    """Raised when the selection cannot be used to start a discussion."""

    def __init__(self, kind: ValidationKind, title: str, description: str) -> None:
        self.kind = kind
        self.title = title
        self.description = description
        super().__init__(f"{title}: {description}")

    def to_notification(self) -> Notification:
        return Notification(self.title, self.description, Severity.ERROR)


@dataclass(frozen=True)
class SelectionSnapshot:
    participants: tuple[Participant, ...]
    topic: str
    moderator: Participant | None = None


class Selection:
    """Mutable selection edited by user toggles.

    Invariants: participants are unique by key, never more than
    ``max_participants``, and the moderator is always one of them.
    """

    def __init__(
        self,
        notify: Notifier = null_notifier,
        *,
        require_moderator: bool = True,
        min_participants: int = DEFAULT_MIN_PARTICIPANTS,
        max_participants: int = DEFAULT_MAX_PARTICIPANTS,
    ) -> None:
        self._notify = notify
        self.require_moderator = require_moderator
        self.min_participants = min_participants
        self.max_participants = max_participants
        self._participants: list[Participant] = []
        self._moderator: Participant | None = None
        self._topic: str | None = None

    @property
    def participants(self) -> tuple[Participant, ...]:
        return tuple(self._participants)

    @property
    def moderator(self) -> Participant | None:
        return self._moderator

    @property
    def topic(self) -> str | None:
        return self._topic

    def is_selected(self, participant: Participant) -> bool:
        return any(p.key == participant.key for p in self._participants)

    def toggle_participant(self, participant: Participant) -> bool:
        """Add or remove a participant. Returns True if the selection changed.

        A full selection is reported through the notifier and left untouched.
        """
        if self.is_selected(participant):
            self._participants = [p for p in self._participants if p.key != participant.key]
            if self._moderator is not None and self._moderator.key == participant.key:
                self._moderator = None
            logger.debug("Removed participant %s", participant.name)
            return True

        if len(self._participants) >= self.max_participants:
            self._notify(
                Notification(
                    "Maximum participants reached",
                    f"You can select up to {self.max_participants} participants for the discussion.",
                    Severity.ERROR,
                )
            )
            logger.debug("Selection full, ignoring %s", participant.name)
            return False

        self._participants.append(participant)
        logger.debug("Added participant %s", participant.name)
        return True

    def set_moderator(self, participant: Participant | None) -> bool:
        """Set the moderator; ignored when the participant is not selected."""
        if participant is None:
            self._moderator = None
            return True
        for selected in self._participants:
            if selected.key == participant.key:
                self._moderator = selected
                return True
        return False

    def set_topic(self, topic: str | None) -> None:
        self._topic = topic

    def validate_for_generation(self) -> SelectionSnapshot:
        """Check the selection and return an immutable snapshot of it.

        Raises:
            SelectionValidationError: too few participants, no topic, or
                (when a moderator is required) no moderator.
        """
        if len(self._participants) < self.min_participants:
            raise SelectionValidationError(
                ValidationKind.TOO_FEW_PARTICIPANTS,
                "Not enough participants",
                f"Please select at least {self.min_participants} participants for the discussion.",
            )
        if not self._topic:
            raise SelectionValidationError(
                ValidationKind.NO_TOPIC,
                "No topic selected",
                "Please select a topic for the discussion.",
            )
        if self.require_moderator and self._moderator is None:
            raise SelectionValidationError(
                ValidationKind.NO_MODERATOR,
                "No moderator selected",
                "Please select a moderator for the discussion.",
            )
        return SelectionSnapshot(
            participants=tuple(self._participants),
            topic=self._topic,
            moderator=self._moderator,
        )
