"""Click CLI — loads config and roster, then runs one discussion or a one-on-one chat."""

import asyncio
import logging
import sys
from collections.abc import Callable

import click
from dotenv import load_dotenv
from rich.logging import RichHandler

from config.config_loader import AppConfig, ServiceConfig, load_config
from roundtable.chat import FigureChat
from roundtable.client import GenerationClient
from roundtable.models import GenerationStatus, Participant
from roundtable.orchestrator import DiscussionOrchestrator
from roundtable.output import console, print_chat_message, print_notification, print_roster, print_transcript
from roundtable.providers.anthropic import AnthropicService
from roundtable.providers.base import GenerationService, GenerationServiceError
from roundtable.providers.gemini import GeminiService
from roundtable.providers.openai_provider import OpenAIService
from roundtable.roster import find_participant, load_roster
from roundtable.selection import Selection

logger = logging.getLogger(__name__)

SERVICE_CLASSES: dict[str, type[GenerationService]] = {
    "google-genai": GeminiService,
    "openai": OpenAIService,
    "anthropic": AnthropicService,
}


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def _build_service(config: ServiceConfig) -> GenerationService:
    """Instantiate the configured service adapter.

    Raises:
        GenerationServiceError: Unknown sdk or missing API key.
    """
    service_cls = SERVICE_CLASSES.get(config.sdk)
    if service_cls is None:
        raise GenerationServiceError(config.name, f"Unknown sdk '{config.sdk}'")
    return service_cls(config)


def _resolve_topic(topic_arg: str, topics: list[str]) -> str:
    """Accept a 1-based index into the topic list or a topic string."""
    if topic_arg.isdigit():
        index = int(topic_arg)
        if 1 <= index <= len(topics):
            return topics[index - 1]
        raise click.BadParameter(f"Topic index must be between 1 and {len(topics)}", param_hint="--topic")
    for topic in topics:
        if topic.lower() == topic_arg.strip().lower():
            return topic
    return topic_arg


def _build_selection(
    config: AppConfig,
    roster: list[Participant],
    participants_arg: str,
    moderator_arg: str | None,
    topic: str,
    require_moderator: bool,
) -> Selection:
    selection = Selection(
        print_notification,
        require_moderator=require_moderator,
        min_participants=config.discussion.min_participants,
        max_participants=config.discussion.max_participants,
    )
    for name in (n.strip() for n in participants_arg.split(",") if n.strip()):
        participant = find_participant(roster, name)
        if participant is None:
            raise click.BadParameter(f"Unknown participant '{name}'", param_hint="--participants")
        if not selection.is_selected(participant):
            selection.toggle_participant(participant)

    if moderator_arg:
        moderator = find_participant(roster, moderator_arg)
        if moderator is None or not selection.set_moderator(moderator):
            raise click.BadParameter(
                f"Moderator '{moderator_arg}' must be one of the selected participants",
                param_hint="--moderator",
            )

    selection.set_topic(topic)
    return selection


async def _run_discussion(orchestrator: DiscussionOrchestrator) -> None:
    with console.status("Generating discussion...", spinner="dots") as status:

        def on_state(state) -> None:
            if state.status is GenerationStatus.IN_FLIGHT and state.attempt:
                status.update(f"Generating discussion... (attempt {state.attempt + 1})")

        unsubscribe = orchestrator.subscribe(on_state)
        try:
            await orchestrator.start()
        finally:
            unsubscribe()


_CHAT_EXIT_WORDS = {"quit", "exit"}


def _ask_user() -> str:
    return click.prompt("You", default="", show_default=False)


async def _run_chat(chat: FigureChat, ask: Callable[[], str] = _ask_user) -> None:
    """Read user lines until a blank line or quit, printing each reply."""
    console.print("[dim]Blank line or 'quit' to leave.[/dim]")
    print_chat_message(chat.participant, chat.messages[0])
    while True:
        text = (await asyncio.to_thread(ask)).strip()
        if not text or text.lower() in _CHAT_EXIT_WORDS:
            break
        with console.status(f"{chat.participant.name} is thinking...", spinner="dots"):
            reply = await chat.send(text)
        if reply is not None:
            print_chat_message(chat.participant, reply)


def _build_client(config: AppConfig) -> GenerationClient:
    """Service adapter wrapped in the configured retry policy.

    Raises:
        GenerationServiceError: Unknown sdk or missing API key.
    """
    return GenerationClient(
        _build_service(config.service),
        print_notification,
        max_retries=config.discussion.max_retries,
        retry_delay=config.discussion.retry_delay_sec,
    )


@click.command()
@click.option("--participants", "participants_arg", default=None,
              help="Comma-separated participant names (2-4)")
@click.option("--moderator", "moderator_arg", default=None, help="Moderator; must be one of the participants")
@click.option("--topic", "topic_arg", default=None, help="Topic text or its number from --list")
@click.option("--no-moderator", is_flag=True, default=False, help="Run an open discussion without a moderator")
@click.option("--chat", "chat_arg", default=None, help="Chat one-on-one with a figure instead of a discussion")
@click.option("--list", "list_only", is_flag=True, default=False, help="List participants and topics, then exit")
@click.option("--verbose", is_flag=True, help="Enable DEBUG-level logging")
def main(
    participants_arg: str | None,
    moderator_arg: str | None,
    topic_arg: str | None,
    no_moderator: bool,
    chat_arg: str | None,
    list_only: bool,
    verbose: bool,
) -> None:
    """Roundtable -- synthetic discussions between historical figures.

    \b
    Examples:
      roundtable --list
      roundtable --participants "Abraham Lincoln,Frederick Douglass" --moderator "Abraham Lincoln" --topic 5
      roundtable --participants lincoln,jfk,king --no-moderator --topic "War and Peace"
      roundtable --chat "John F. Kennedy"
    """
    load_dotenv()
    _setup_logging(verbose)

    try:
        config = load_config()
        roster = load_roster(config.discussion.roster_path, config.discussion.featured)
    except FileNotFoundError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        sys.exit(1)

    if list_only:
        print_roster(roster, config.topics)
        return

    if chat_arg:
        figure = find_participant(roster, chat_arg)
        if figure is None:
            console.print(f"[bold red]Error:[/bold red] Unknown participant '{chat_arg}'")
            sys.exit(1)
        try:
            chat = FigureChat(figure, _build_client(config), print_notification, config.prompts)
        except (GenerationServiceError, ValueError) as exc:
            console.print(f"[bold red]Error:[/bold red] {exc}")
            sys.exit(1)
        asyncio.run(_run_chat(chat))
        return

    if not participants_arg or not topic_arg:
        console.print("[bold red]Error:[/bold red] Provide --participants and --topic, or use --list.")
        sys.exit(1)

    require_moderator = config.discussion.require_moderator and not no_moderator
    topic = _resolve_topic(topic_arg, config.topics)
    selection = _build_selection(config, roster, participants_arg, moderator_arg, topic, require_moderator)

    try:
        client = _build_client(config)
    except GenerationServiceError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        sys.exit(1)

    orchestrator = DiscussionOrchestrator(selection, client, print_notification, config.prompts)

    asyncio.run(_run_discussion(orchestrator))

    state = orchestrator.state
    if state.status is GenerationStatus.SUCCEEDED:
        print_transcript(state.transcript, topic, selection.moderator)
    else:
        sys.exit(1)


if __name__ == "__main__":
    main()
