"""One-on-one conversation with a single historical figure."""

import logging

from config.config_loader import PromptsConfig
from roundtable.client import GenerationClient
from roundtable.models import ChatMessage, ChatRole, Notification, Participant, Severity
from roundtable.notifications import Notifier, null_notifier
from roundtable.prompt import build_chat_greeting, build_chat_prompt

logger = logging.getLogger(__name__)


class FigureChat:
    """A chat session with one participant, opened by the figure's greeting.

    Each user message is answered with a fresh generation through the shared
    ``GenerationClient``, so overload retries behave as in a discussion.
    The history lives only in memory for the life of the session.
    """

    def __init__(
        self,
        participant: Participant,
        client: GenerationClient,
        notify: Notifier = null_notifier,
        templates: PromptsConfig | None = None,
    ) -> None:
        self._participant = participant
        self._client = client
        self._notify = notify
        self._templates = templates or PromptsConfig()
        self._busy = False
        try:
            greeting = build_chat_greeting(participant, self._templates)
        except (KeyError, IndexError, ValueError) as exc:
            raise ValueError(f"Chat greeting template could not be rendered: {exc!r}") from exc
        self._messages: list[ChatMessage] = [ChatMessage(ChatRole.ASSISTANT, greeting)]

    @property
    def participant(self) -> Participant:
        return self._participant

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return tuple(self._messages)

    @property
    def is_busy(self) -> bool:
        return self._busy

    async def send(self, text: str) -> ChatMessage | None:
        """Send a user message and return the figure's reply.

        Blank input is ignored. A send while a reply is pending is rejected
        with a warning. Any failure is reported as a "Failed to process
        message" error; the user's message stays in the history either way.

        Returns:
            The assistant message, or None when no reply was added.
        """
        if not text.strip():
            return None

        if self._busy:
            logger.info("Chat reply already pending, ignoring message")
            self._notify(
                Notification(
                    "Message in progress",
                    f"Please wait for {self._participant.name} to reply.",
                    Severity.WARNING,
                )
            )
            return None

        self._busy = True
        self._messages.append(ChatMessage(ChatRole.USER, text))
        try:
            try:
                prompt = build_chat_prompt(self._participant, text, self._templates)
                logger.debug("Chat prompt:\n%s", prompt)
                reply = await self._client.generate(prompt)
            except Exception as exc:
                logger.error("Error in chat: %s", exc)
                self._notify(Notification("Error", "Failed to process message", Severity.ERROR))
                return None

            if not reply or not reply.strip():
                logger.warning("Service returned no reply for %s", self._participant.name)
                self._notify(
                    Notification(
                        "No reply",
                        f"{self._participant.name} had nothing to say. Please try again.",
                        Severity.WARNING,
                    )
                )
                return None

            message = ChatMessage(ChatRole.ASSISTANT, reply.strip())
            self._messages.append(message)
            return message
        finally:
            self._busy = False
