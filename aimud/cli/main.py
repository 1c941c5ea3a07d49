"""Main CLI application for AI-MUD."""

import logging

import typer
from rich.logging import RichHandler

from aimud.cli.commands import game, world
from aimud.cli.display import console
from aimud.config import settings

# Create main app
app = typer.Typer(
    name="aimud",
    help="A text adventure whose world lives in plain-text files written by an LLM",
    add_completion=True,
)

# Add sub-commands
app.add_typer(game.app, name="game")
app.add_typer(world.app, name="world")


def configure_logging(level: str) -> None:
    """Route log records through Rich, above the spinner."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


@app.command()
def play(
    debug: bool = typer.Option(False, "--debug", "-d", help="Reveal hidden content"),
) -> None:
    """Quick start - begin or continue playing.

    This is a shortcut for 'aimud game play'.
    """
    # Pass explicit defaults since Typer Option objects aren't resolved
    # when calling function directly (not via CLI)
    game.play(debug=debug)


@app.callback()
def main(
    log_level: str = typer.Option(
        None, "--log-level", help="Logging level (default: LOG_LEVEL setting)"
    ),
) -> None:
    """AI-MUD - a narrative engine driven by a language model.

    Use 'aimud play' and describe a world to begin.
    """
    configure_logging(log_level or settings.log_level)


if __name__ == "__main__":
    app()
