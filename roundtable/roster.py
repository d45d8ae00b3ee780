"""Participant roster loading and lookup."""

import logging
from pathlib import Path

import yaml

from roundtable.models import Participant

logger = logging.getLogger(__name__)


def _to_participant(raw: dict) -> Participant:
    return Participant(
        id=str(raw["id"]) if raw.get("id") is not None else None,
        name=str(raw["name"]),
        role=str(raw.get("role", "")),
        description=str(raw.get("description", "")),
        image_url=str(raw.get("image_url", "")),
        voice_id=str(raw.get("voice_id", "")),
        nationality=raw.get("nationality"),
        era=raw.get("era"),
        persona_prompt=raw.get("prompt"),
    )


def order_featured_first(participants: list[Participant], featured: list[str]) -> list[Participant]:
    """Featured participants first, then the rest; each group sorted by name."""
    featured_names = set(featured)
    return sorted(participants, key=lambda p: (p.name not in featured_names, p.name.lower()))


def load_roster(roster_path: Path, featured: list[str] | None = None) -> list[Participant]:
    """Read participants from a roster YAML file.

    Entries without a name are skipped with a warning; duplicate keys keep
    the first entry.

    Raises:
        FileNotFoundError: If the roster file is missing.
    """
    if not roster_path.exists():
        raise FileNotFoundError(f"Roster file not found: {roster_path}")

    with roster_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    participants: list[Participant] = []
    seen: set[str] = set()
    for entry in raw.get("participants", []):
        if not entry or not entry.get("name"):
            logger.warning("Skipping roster entry without a name: %r", entry)
            continue
        participant = _to_participant(entry)
        if participant.key in seen:
            logger.warning("Duplicate roster entry skipped: %s", participant.key)
            continue
        seen.add(participant.key)
        participants.append(participant)

    logger.info("Loaded %d participants from %s", len(participants), roster_path)
    return order_featured_first(participants, featured or [])


def find_participant(roster: list[Participant], name: str) -> Participant | None:
    """Case-insensitive lookup by name or id."""
    wanted = name.strip().lower()
    for participant in roster:
        if participant.name.lower() == wanted or (participant.id or "").lower() == wanted:
            return participant
    return None
