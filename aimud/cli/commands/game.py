"""Game commands: the interactive loop and single cycles."""

import asyncio

import typer

from aimud.cli.display import (
    console,
    display_check_results,
    display_error,
    display_file,
    display_file_list,
    display_game_over,
    display_info,
    display_narrative,
    display_success,
    display_updates,
    display_welcome,
    display_world_time,
    progress_spinner,
    prompt_input,
)
from aimud.config import settings
from aimud.context import GameContext, get_context
from aimud.engine.exceptions import EngineBusyError
from aimud.engine.schemas import EngineResponse

app = typer.Typer(help="Game commands")


def display_response(
    response: EngineResponse,
    context: GameContext,
    debug: bool = False,
) -> None:
    """Render one cycle's outcome.

    Args:
        response: The committed (or failed) response.
        context: Session context, for reference highlighting.
        debug: Reveal hidden content, rolls and diagnostics.
    """
    if response.check_results:
        display_check_results(response.check_results, debug=debug)

    if response.narrative:
        display_narrative(response.narrative, debug=debug, store=context.store)
    elif not response.failed:
        display_info("(The world responds in silence.)")

    display_updates(response.updates)

    if debug:
        for error in response.errors:
            display_error(error)
        if response.files:
            display_info(f"Files written: {', '.join(response.files)}")

    if response.game_over:
        display_game_over()


async def _run_cycle(
    context: GameContext,
    text: str,
    debug: bool = False,
) -> EngineResponse | None:
    """Submit one input and display the result.

    Returns:
        The response, or None if the engine was busy.
    """
    description = "Thinking..." if context.initialized else "Creating the world..."
    with progress_spinner(description):
        try:
            response = await context.submit(text)
        except EngineBusyError as e:
            display_error(str(e))
            return None

    display_response(response, context, debug=debug)
    return response


@app.command()
def play(
    debug: bool = typer.Option(False, "--debug", "-d", help="Reveal hidden content"),
) -> None:
    """Start the interactive game loop."""
    context = get_context()
    try:
        asyncio.run(_game_loop(context, debug or settings.debug))
    except KeyboardInterrupt:
        display_info("\nGame paused. Use 'aimud play' to continue.")


async def _game_loop(context: GameContext, debug: bool) -> None:
    """Main interactive loop."""
    display_welcome()

    if context.initialized:
        display_info(f"Resuming a world of {len(context.store)} files.")
        display_world_time(context.world_time())
    else:
        display_info("Describe the world and the character you want to play.")
        display_info("  e.g. A rainy harbour town in 1890. I am a pickpocket named Wren.")

    display_info("Type your actions. Use /quit to exit, /help for commands.")

    while True:
        console.print()
        player_input = prompt_input()

        if not player_input.strip():
            continue

        # Handle commands
        if player_input.startswith("/"):
            parts = player_input[1:].split(maxsplit=1)
            cmd = parts[0].lower() if parts else ""
            arg = parts[1].strip() if len(parts) > 1 else ""

            if cmd in ("quit", "exit", "q"):
                display_info("World saved. Goodbye.")
                break
            elif cmd == "help":
                _show_help()
            elif cmd == "files":
                display_file_list(context.store)
            elif cmd == "show":
                if not arg:
                    display_error("Usage: /show <file or name>")
                else:
                    _show_file(context, arg, debug)
            elif cmd == "time":
                display_world_time(context.world_time())
            elif cmd == "reset":
                if typer.confirm("Delete every world file and start over?"):
                    context.reset()
                    display_success("World reset. Describe a new world to begin.")
            elif cmd == "debug":
                debug = not debug
                display_info(f"Debug mode {'on' if debug else 'off'}")
            else:
                display_error(f"Unknown command: /{cmd}")
            continue

        if context.game_over:
            display_error("The game is over. Use /reset to start a new world.")
            continue

        await _run_cycle(context, player_input, debug)


def _show_file(context: GameContext, ref: str, debug: bool) -> bool:
    """Display a file by name, alias or fragment."""
    found = context.inspect(ref)
    if found is None:
        display_error(f"No world file matches '{ref}'")
        return False

    name, display_name, content = found
    display_file(name, display_name, content, debug=debug, store=context.store)
    return True


def _show_help() -> None:
    """Show in-game help."""
    console.print()
    console.print("[bold cyan]━━━ World ━━━[/bold cyan]")
    console.print("  /files         List world files")
    console.print("  /show <ref>    Show a file by name or display name")
    console.print("  /time          Current world time")
    console.print()
    console.print("[bold cyan]━━━ System ━━━[/bold cyan]")
    console.print("  /debug         Toggle hidden content, rolls and diagnostics")
    console.print("  /reset         Delete the world and start over")
    console.print("  /help          Show this help")
    console.print("  /quit          Exit (the world is saved after every action)")
    console.print()
    console.print("[bold cyan]━━━ Gameplay Tips ━━━[/bold cyan]")
    console.print("  Type your actions naturally:")
    console.print("    [dim]> Look around the warehouse[/dim]")
    console.print("    [dim]> Climb the wet wall to the skylight[/dim]")
    console.print("    [dim]> Ask the guard about the night shift[/dim]")
    console.print()


@app.command()
def start(
    scenario: str = typer.Argument(..., help="World and character description"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Reveal hidden content"),
) -> None:
    """Initialize a new world from a scenario."""
    context = get_context()
    if context.initialized:
        display_error("A world already exists")
        display_info("Use 'aimud world reset' to start over")
        raise typer.Exit(1)

    response = asyncio.run(_run_cycle(context, scenario, debug or settings.debug))
    if response is None or response.failed:
        raise typer.Exit(1)


@app.command()
def turn(
    action: str = typer.Argument(..., help="Player action to process"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Reveal hidden content"),
) -> None:
    """Execute a single action (for testing)."""
    context = get_context()
    if not context.initialized:
        display_error("No world found")
        display_info("Use 'aimud game start' to create one")
        raise typer.Exit(1)

    response = asyncio.run(_run_cycle(context, action, debug or settings.debug))
    if response is None or response.failed:
        raise typer.Exit(1)
