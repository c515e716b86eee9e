"""Rich console rendering for the directory, sessions and the profile."""

import logging
from collections.abc import Sequence
from datetime import datetime

from rich.console import Console, Group
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from hottake.models import Debate, Participant, Profile
from hottake.workflow import ConfirmationPrompt, SessionWorkflow

logger = logging.getLogger(__name__)

console = Console(legacy_windows=False)


def label_for(person: Profile | Participant) -> str:
    """``name, age, gender`` with absent parts left out."""
    parts = [person.name] if person.name else []
    if person.age is not None:
        parts.append(str(person.age))
    if person.gender:
        parts.append(person.gender)
    return ", ".join(parts)


def _format_date(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d") if value else ""


def debates_table(debates: Sequence[Debate]) -> Table:
    table = Table(title="HotTake debates", expand=True)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Debating", justify="right")
    table.add_column("Created")
    for index, debate in enumerate(debates, start=1):
        table.add_row(
            str(index),
            debate.title,
            str(debate.participant_count),
            _format_date(debate.created_at),
        )
    return table


def print_debates(debates: Sequence[Debate], error: str = "") -> None:
    if error:
        print_error(error)
    if not debates:
        console.print("[dim]No debates yet. Create one with `hottake create`.[/dim]")
        return
    console.print(debates_table(debates))


def prompt_panel(prompt: ConfirmationPrompt) -> Panel:
    body = Text.assemble(
        (prompt.title, "bold"),
        "\n",
        f"{prompt.participant_count} people are debating",
        "\n",
        "Do you want to join this debate?",
    )
    return Panel(body, title="Join Debate?", border_style="cyan")


def session_panel(workflow: SessionWorkflow) -> Panel:
    debate = workflow.debate
    title = debate.title if debate else ""
    count = debate.participant_count if debate else 0

    controls = Text.assemble(
        ("muted" if workflow.session.is_muted else "mic on", "red" if workflow.session.is_muted else "green"),
        " | ",
        ("camera on" if workflow.session.is_video_on else "camera off",
         "green" if workflow.session.is_video_on else "red"),
    )

    roster = Table.grid(padding=(0, 2))
    roster.add_column(justify="right", style="dim")
    roster.add_column()
    for index, participant in enumerate(workflow.roster, start=1):
        roster.add_row(str(index), label_for(participant) or participant.id)

    parts: list = [
        Text(f"{count} participants", style="dim"),
        Text(f"You: {label_for(workflow.me) or 'anonymous'}"),
        controls,
        Rule(style="dim"),
        roster,
    ]
    focused = workflow.session.focused_participant
    if focused is not None:
        parts.append(Panel(label_for(focused) or focused.id, title="Fullscreen", border_style="magenta"))
    return Panel(Group(*parts), title=f"[bold]{title}[/bold]", border_style="cyan")


def print_session(workflow: SessionWorkflow) -> None:
    if workflow.error:
        print_error(workflow.error)
        return
    console.print(session_panel(workflow))


def profile_panel(profile: Profile) -> Panel:
    if profile.is_empty():
        return Panel(
            Text("No profile saved yet. Run: hottake profile edit --name NAME", style="dim"),
            title="Profile",
            border_style="yellow",
        )
    table = Table.grid(padding=(0, 2))
    table.add_column(style="dim")
    table.add_column()
    table.add_row("Id", profile.id or "(not saved)")
    table.add_row("Name", profile.name or "")
    table.add_row("Age", "" if profile.age is None else str(profile.age))
    table.add_row("Gender", profile.gender or "")
    return Panel(table, title="Profile", border_style="cyan")


def print_profile(profile: Profile) -> None:
    console.print(profile_panel(profile))


def print_error(message: str) -> None:
    console.print(f"[bold red]Error:[/bold red] {message}")
