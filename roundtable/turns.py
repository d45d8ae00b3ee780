"""Split generated text into turns and attribute them round-robin."""

from collections.abc import Sequence

from roundtable.models import Participant, Turn


def split_lines(raw_text: str) -> list[str]:
    """Non-blank lines of ``raw_text``, stripped, in original order."""
    return [line.strip() for line in raw_text.splitlines() if line.strip()]


def assign_turns(raw_text: str, participants: Sequence[Participant]) -> list[Turn]:
    """Attribute the i-th non-blank line to ``participants[i % len(participants)]``.

    Speaker labels inside the text are ignored. Blank input gives an empty list.

    Raises:
        ValueError: If there is text to assign but no participants.
    """
    lines = split_lines(raw_text)
    if not lines:
        return []
    if not participants:
        raise ValueError("Cannot assign turns without participants")
    return [Turn(speaker=participants[i % len(participants)], text=line) for i, line in enumerate(lines)]
