"""Rich display helpers for CLI output."""

from contextlib import contextmanager

from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table
from rich.text import Text

from aimud.engine.schemas import CheckResult, UpdateRecord
from aimud.world.annotations import TokenKind, tokenize
from aimud.world.store import CanonicalStore


# Shared console instance
console = Console()

REFERENCE_STYLE = "bold cyan"
UNRESOLVED_REFERENCE_STYLE = "cyan"
HIDDEN_STYLE = "italic magenta"
HIDDEN_PLACEHOLDER = "[hidden]"


def render_annotated(
    text: str,
    debug: bool = False,
    store: CanonicalStore | None = None,
) -> Text:
    """Render annotated text as Rich Text.

    References are highlighted (underlined when they resolve to a file).
    Hidden spans show as a placeholder unless ``debug`` is set.

    Args:
        text: Narrative or file content.
        debug: Reveal hide[...] content.
        store: Store used to tell resolved from unresolved references.

    Returns:
        Styled Text, safe to print (no markup interpretation).
    """
    rendered = Text()
    for token in tokenize(text):
        if token.kind == TokenKind.REFERENCE:
            resolved = store is not None and store.resolve_reference(token.text) is not None
            style = f"{REFERENCE_STYLE} underline" if resolved else UNRESOLVED_REFERENCE_STYLE
            rendered.append(f"[{token.text}]", style=style)
        elif token.kind == TokenKind.HIDDEN:
            if debug:
                rendered.append("hide[", style=HIDDEN_STYLE)
                rendered.append_text(render_annotated(token.text, debug=True, store=store))
                rendered.append("]", style=HIDDEN_STYLE)
            else:
                rendered.append(HIDDEN_PLACEHOLDER, style="dim")
        else:
            rendered.append(token.text)
    return rendered


def display_narrative(
    text: str,
    debug: bool = False,
    store: CanonicalStore | None = None,
) -> None:
    """Display narrative text with formatting.

    Args:
        text: Narrative text to display.
        debug: Reveal hide[...] content.
        store: Store for reference highlighting.
    """
    # Wrap in a panel with soft styling
    panel = Panel(
        render_annotated(text, debug=debug, store=store),
        border_style="dim",
        padding=(1, 2),
    )
    console.print(panel)


def update_style(value: float) -> str:
    """Colour for an update: red for losses, green for gains."""
    if value < 0:
        return "red"
    if value > 0:
        return "green"
    return "yellow"


def display_updates(updates: list[UpdateRecord]) -> None:
    """Display observable effects, coloured by sign.

    Args:
        updates: Updates in emission order.
    """
    for update in updates:
        label = Text(f"  [{update.type.value}] ", style="dim")
        label.append(update.text, style=update_style(update.value))
        console.print(label)


def display_check_results(results: list[CheckResult], debug: bool = False) -> None:
    """Display resolved checks as ``[Name: Outcome]``; rolls only in debug."""
    for result in results:
        line = Text(f"  [{result.name}: {result.outcome}]", style="bold yellow")
        if debug:
            line.append(f" (roll {result.roll})", style="dim")
        console.print(line)


def display_welcome() -> None:
    """Display welcome message."""
    console.print()
    console.print(Panel("[bold cyan]AI-MUD[/bold cyan]", style="cyan"))
    console.print()


def display_error(message: str) -> None:
    """Display error message.

    Args:
        message: Error message.
    """
    console.print(f"[bold red]Error:[/bold red] {message}")


def display_success(message: str) -> None:
    """Display success message.

    Args:
        message: Success message.
    """
    console.print(f"[bold green]{message}[/bold green]")


def display_info(message: str) -> None:
    """Display info message.

    Args:
        message: Info message.
    """
    console.print(f"[dim]{message}[/dim]")


def display_world_time(world_time: str | None) -> None:
    """Display the world clock."""
    if not world_time:
        display_info("The world clock has not been set yet.")
        return
    console.print(Text.assemble(("World time: ", "bold"), (world_time, "yellow")))


def display_game_over() -> None:
    """Display the termination banner."""
    console.print()
    console.print(
        Panel(
            "[bold red]GAME OVER[/bold red]\n[dim]Use /reset or 'aimud world reset' to start again.[/dim]",
            border_style="red",
            padding=(1, 2),
        )
    )


def display_file_list(store: CanonicalStore) -> None:
    """Display every world file with its alias and size.

    Args:
        store: World store.
    """
    names = store.list()
    if not names:
        console.print("[dim]No world files yet.[/dim]")
        return

    table = Table(title="World Files")
    table.add_column("File", style="cyan")
    table.add_column("Display Name", style="white")
    table.add_column("Size", justify="right", style="dim")

    for name in names:
        content = store.read(name) or ""
        table.add_row(name, store.get_display_name(name), f"{len(content)} chars")

    console.print(table)


def display_file(
    name: str,
    display_name: str,
    content: str,
    debug: bool = False,
    store: CanonicalStore | None = None,
) -> None:
    """Display one world file.

    Args:
        name: Filename.
        display_name: Alias shown as the title.
        content: File content.
        debug: Reveal hide[...] content.
        store: Store for reference highlighting.
    """
    panel = Panel(
        render_annotated(content, debug=debug, store=store),
        title=f"[bold]{display_name}[/bold]",
        subtitle=f"[dim]{name}[/dim]",
        border_style="cyan",
        padding=(1, 2),
    )
    console.print(panel)


def prompt_input(prompt: str = "> ") -> str:
    """Get input from user with styled prompt.

    Args:
        prompt: Prompt string.

    Returns:
        User input.
    """
    return console.input(f"[bold cyan]{prompt}[/bold cyan]")


@contextmanager
def progress_spinner(description: str = "Processing..."):
    """Context manager for spinner during operations.

    Args:
        description: Text to show next to spinner.

    Yields:
        Tuple of (progress, task_id) for optional updates.
    """
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task(description, total=None)
        yield progress, task
