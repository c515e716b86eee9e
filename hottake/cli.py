"""Click CLI: wires storage, shared state, the directory client and the views."""

import asyncio
import logging
import sys
from dataclasses import dataclass

import click
from dotenv import load_dotenv
from rich.logging import RichHandler

from config.config_loader import AppConfig, load_config
from hottake.app_state import AppState, get_app_state
from hottake.directory import DebatesService
from hottake.errors import NetworkError
from hottake.forms import CreateDebateForm, ProfileForm
from hottake.navigation import CREATE_DEBATE, DEBATE_TEMPLATE, HOME, PROFILE, Router, debate_path
from hottake.output import console, print_debates, print_error, print_profile, print_session, prompt_panel
from hottake.profile_store import ProfileStore
from hottake.storage import KeyValueStorage
from hottake.workflow import ClickTarget, Phase, SessionWorkflow

logger = logging.getLogger(__name__)

_SESSION_HELP = "[m]ute  [v]ideo  [f N] fullscreen  [x] close fullscreen  [l]eave"


@dataclass
class HotTakeApp:
    config: AppConfig
    state: AppState
    store: ProfileStore
    service: DebatesService
    router: Router
    workflow: SessionWorkflow


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


async def _stay() -> None:
    """Views that the CLI drives through commands instead of routes."""


def _build_app(config: AppConfig, refresh_home: bool = True) -> HotTakeApp:
    """Assemble the client. The shared state is loaded from storage here."""
    state = get_app_state()
    storage = KeyValueStorage(config.storage.data_dir)
    store = ProfileStore(storage, state, key=config.storage.profile_key)
    stored = store.load_into_state()
    if stored.is_fresh:
        logger.info("No saved profile yet")

    service = DebatesService(
        config.api.base_url,
        state,
        timeout_sec=config.api.timeout_sec,
        title_max_len=config.ui.title_max_len,
    )
    router = Router()
    workflow = SessionWorkflow(service, state, router)

    async def home() -> None:
        await workflow.enter_browse(refresh=refresh_home)

    router.add_route(HOME, home)
    router.add_route(DEBATE_TEMPLATE, workflow.open_session)
    router.add_route(PROFILE, _stay)
    router.add_route(CREATE_DEBATE, _stay)
    return HotTakeApp(config, state, store, service, router, workflow)


def _parse_session_command(raw: str) -> tuple[str, int | None]:
    """Split ``f 3`` into ("f", 3). Unknown input comes back as-is."""
    parts = raw.strip().lower().split()
    if not parts:
        return "", None
    command = parts[0]
    if command == "f" and len(parts) == 2 and parts[1].isdigit():
        return command, int(parts[1])
    return command, None


async def _session_loop(app: HotTakeApp) -> None:
    workflow = app.workflow
    print_session(workflow)
    if workflow.phase is not Phase.IN_SESSION:
        return

    while workflow.phase is Phase.IN_SESSION:
        command, index = _parse_session_command(click.prompt(_SESSION_HELP, default="", show_default=False))
        if command == "m":
            workflow.toggle_mute()
        elif command == "v":
            workflow.toggle_video()
        elif command == "f" and index is not None and 1 <= index <= len(workflow.roster):
            workflow.open_fullscreen(workflow.roster[index - 1])
        elif command == "x":
            workflow.click_fullscreen(ClickTarget.CLOSE_BUTTON)
        elif command == "l":
            await workflow.leave()
            console.print("[dim]Left the debate.[/dim]")
            return
        else:
            console.print(f"[yellow]Unknown command:[/yellow] {command or '(empty)'}")
            continue
        print_session(workflow)


async def _browse(app: HotTakeApp) -> None:
    workflow = app.workflow
    async with app.service:
        await app.router.navigate(HOME)
        debates = list(workflow.debates)
        print_debates(debates, workflow.error)
        if not debates:
            return

        choice = click.prompt("Pick a debate (0 to quit)", type=click.IntRange(0, len(debates)))
        if choice == 0:
            return

        console.print(prompt_panel(workflow.select(debates[choice - 1])))
        if not click.confirm("Join?", default=True):
            workflow.cancel()
            return

        await workflow.confirm()
        await _session_loop(app)


async def _join(app: HotTakeApp, debate_id: str) -> None:
    async with app.service:
        await app.router.navigate(debate_path(debate_id))
        await _session_loop(app)


async def _edit_profile(app: HotTakeApp, changes: dict[str, object]) -> bool:
    await app.router.navigate(PROFILE)
    form = ProfileForm(app.store, app.state, app.router)
    for name, value in changes.items():
        form.set_field(name, value)
    saved = await form.save()
    if saved is None:
        print_error(form.error)
        return False
    print_profile(saved)
    return True


async def _create(app: HotTakeApp, title: str) -> bool:
    async with app.service:
        await app.router.navigate(CREATE_DEBATE)
        form = CreateDebateForm(app.service, app.router, app.config.ui.title_max_len)
        form.set_title(title)
        debate = await form.submit()
        if debate is None:
            print_error(form.error)
            return False
        console.print(f"[green]Created[/green] {debate.title} [dim]({debate.id})[/dim]")
        await _session_loop(app)
        return True


async def _delete(app: HotTakeApp, debate_id: str) -> None:
    async with app.service:
        await app.service.delete_debate(debate_id)


@click.group()
@click.option("--verbose", is_flag=True, help="Enable DEBUG-level logging")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """HotTake -- browse, create and join live debates.

    \b
    Examples:
      hottake profile edit --name Alice --age 22 --gender female
      hottake browse
      hottake create "pineapple on pizza"
      hottake join 3f2c9a
    """
    load_dotenv()
    _setup_logging(verbose)

    try:
        ctx.obj = load_config()
    except FileNotFoundError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        sys.exit(1)


@main.command()
@click.pass_obj
def browse(config: AppConfig) -> None:
    """List debates, pick one and join it."""
    asyncio.run(_browse(_build_app(config)))


@main.command()
@click.argument("debate_id")
@click.pass_obj
def join(config: AppConfig, debate_id: str) -> None:
    """Open a debate session directly by id."""
    asyncio.run(_join(_build_app(config), debate_id))


@main.command()
@click.argument("title")
@click.pass_obj
def create(config: AppConfig, title: str) -> None:
    """Create a debate owned by your profile and join it."""
    if not asyncio.run(_create(_build_app(config, refresh_home=False), title)):
        sys.exit(1)


@main.command()
@click.argument("debate_id")
@click.pass_obj
def delete(config: AppConfig, debate_id: str) -> None:
    """Delete a debate by id."""
    try:
        asyncio.run(_delete(_build_app(config), debate_id))
    except NetworkError as exc:
        print_error(str(exc))
        sys.exit(1)
    console.print(f"[green]Deleted[/green] {debate_id}")


@main.group()
def profile() -> None:
    """Show or edit your local profile."""


@profile.command("show")
@click.pass_obj
def profile_show(config: AppConfig) -> None:
    app = _build_app(config, refresh_home=False)
    print_profile(app.state.current_user)


@profile.command("edit")
@click.option("--name", default=None, help="Display name")
@click.option("--age", default=None, help="Age (0-150); pass an empty string to clear")
@click.option("--gender", default=None, help="male, female or other; pass an empty string to clear")
@click.pass_obj
def profile_edit(config: AppConfig, name: str | None, age: str | None, gender: str | None) -> None:
    """Update only the fields you pass."""
    changes = {k: v for k, v in {"name": name, "age": age, "gender": gender}.items() if v is not None}
    app = _build_app(config, refresh_home=False)
    if not asyncio.run(_edit_profile(app, changes)):
        sys.exit(1)


@main.command()
@click.confirmation_option(prompt="Remove your saved profile and all local data?")
@click.pass_obj
def clear(config: AppConfig) -> None:
    """Remove all locally stored data."""
    app = _build_app(config, refresh_home=False)
    app.store.clear()
    console.print("[green]Local data cleared.[/green]")


if __name__ == "__main__":
    main()
