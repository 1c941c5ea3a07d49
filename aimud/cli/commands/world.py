"""World-related commands."""

import typer

from aimud.cli.display import (
    display_error,
    display_file,
    display_file_list,
    display_info,
    display_success,
)
from aimud.config import settings
from aimud.context import get_context

app = typer.Typer(help="World file commands")


@app.command()
def files() -> None:
    """List every world file."""
    display_file_list(get_context().store)


@app.command()
def show(
    ref: str = typer.Argument(..., help="Filename, display name or fragment"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Reveal hidden content"),
) -> None:
    """Show one world file."""
    context = get_context()
    found = context.inspect(ref)
    if found is None:
        display_error(f"No world file matches '{ref}'")
        raise typer.Exit(1)

    name, display_name, content = found
    display_file(
        name,
        display_name,
        content,
        debug=debug or settings.debug,
        store=context.store,
    )


@app.command()
def reset(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
) -> None:
    """Delete every world file."""
    context = get_context()

    if not force:
        confirm = typer.confirm(f"Delete all {len(context.store)} world files?")
        if not confirm:
            display_info("Cancelled")
            raise typer.Exit(0)

    context.reset()
    display_success("World reset")
