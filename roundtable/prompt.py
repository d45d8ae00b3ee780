"""Render generation prompts: discussions from a selection snapshot, replies for one-on-one chat."""

from config.config_loader import PromptsConfig
from roundtable.models import Participant
from roundtable.selection import SelectionSnapshot


def _voice_notes(snapshot: SelectionSnapshot) -> str:
    """Per-participant persona lines, in participant order. Empty if none."""
    notes = [
        f"- {p.name}: {p.persona_prompt.strip()}"
        for p in snapshot.participants
        if p.persona_prompt and p.persona_prompt.strip()
    ]
    if not notes:
        return ""
    return "\n\nVoice notes:\n" + "\n".join(notes)


def build_prompt(snapshot: SelectionSnapshot, templates: PromptsConfig | None = None) -> str:
    """Build the instruction sent to the generation service.

    Deterministic: the same snapshot and templates always give the same text.
    """
    templates = templates or PromptsConfig()
    names = ", ".join(p.name for p in snapshot.participants)
    if snapshot.moderator is not None:
        prompt = templates.moderated.format(
            participants=names,
            topic=snapshot.topic,
            moderator=snapshot.moderator.name,
        )
    else:
        prompt = templates.open.format(participants=names, topic=snapshot.topic)
    return prompt + _voice_notes(snapshot)


def build_chat_prompt(participant: Participant, message: str, templates: PromptsConfig | None = None) -> str:
    """Prompt for a one-on-one reply from ``participant`` to a user message."""
    templates = templates or PromptsConfig()
    prompt = templates.chat.format(name=participant.name, message=message.strip())
    if participant.persona_prompt and participant.persona_prompt.strip():
        prompt += f"\n\nVoice notes: {participant.persona_prompt.strip()}"
    return prompt


def build_chat_greeting(participant: Participant, templates: PromptsConfig | None = None) -> str:
    templates = templates or PromptsConfig()
    return templates.chat_greeting.format(name=participant.name)
