"""Rich console output for rosters, notifications, transcripts and chat messages."""

from collections.abc import Sequence

from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from roundtable.models import ChatMessage, ChatRole, Notification, Participant, Severity, Turn


console = Console(legacy_windows=False)

_SEVERITY_STYLES = {
    Severity.INFO: "cyan",
    Severity.WARNING: "yellow",
    Severity.ERROR: "bold red",
}


def print_notification(notification: Notification) -> None:
    """Notifier that prints a one-line toast to the console."""
    style = _SEVERITY_STYLES[notification.severity]
    console.print(f"[{style}]{notification.title}:[/{style}] {notification.description}")


def print_roster(roster: Sequence[Participant], topics: Sequence[str]) -> None:
    """Print the selectable participants and numbered topics."""
    table = Table(title="Participants", show_lines=False)
    table.add_column("Name", style="bold")
    table.add_column("Role")
    table.add_column("Era", style="dim")
    for p in roster:
        table.add_row(p.name, p.role, p.era or "")
    console.print(table)

    console.print(Rule("[bold cyan]Topics[/bold cyan]"))
    for i, topic in enumerate(topics, start=1):
        console.print(f"  {i:>2}. {topic}")


def print_transcript(
    turns: Sequence[Turn],
    topic: str,
    moderator: Participant | None = None,
) -> None:
    """Print the discussion turn by turn, marking the moderator."""
    console.print(Rule(f"[bold green]{topic}[/bold green]"))
    if not turns:
        console.print(Text("Select participants and a topic to start a historical discussion", style="dim"))
        return
    for turn in turns:
        title = f"[bold]{turn.speaker.name}[/bold]"
        if moderator is not None and turn.speaker.key == moderator.key:
            title += " [dim](Moderator)[/dim]"
        console.print(Panel(turn.text, title=title, title_align="left", border_style="dim"))


def print_chat_message(participant: Participant, message: ChatMessage) -> None:
    """Print one chat message; the figure's replies go in a panel."""
    if message.role is ChatRole.USER:
        console.print(f"[bold]You:[/bold] {message.content}")
        return
    console.print(
        Panel(message.content, title=f"[bold]{participant.name}[/bold]", title_align="left", border_style="cyan")
    )
