"""CLI interface for Super Calc.

Commands:
- calc: Evaluate an arithmetic expression
- convert / units: Unit conversion and the unit catalog
- tip: Tip and bill splitting
- history: List, search, share and clear past results
- theme: Show or change the theme preference
- repl: Interactive keypad session with memory keys
"""

import asyncio
import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import HOME_ENV_VAR, load_config, resolve_home
from .converter import ALL_CATEGORIES, convert, filter_conversions, get_categories
from .errors import CalcError, EvaluationError
from .evaluator import EVALUATION_ERROR_DISPLAY
from .history import load_history_manager
from .logging_setup import configure_logging
from .notifier import ConsoleNotifier, ConsoleSharer
from .preferences import PreferenceStore
from .session import MEMORY_KEYS, CalculatorSession
from .storage import get_store
from .tip_calculator import calculate_tip

console = Console()


def _run(coro):
    """Run a coroutine to completion from a sync command."""
    return asyncio.run(coro)


def _open_history(ctx, sharer=None):
    config = ctx.obj["config"]
    store = get_store(ctx.obj["home"])
    return _run(load_history_manager(store, limit=config.history_limit, sharer=sharer))


def _fail(title: str, error):
    ConsoleNotifier().alert(title, str(error))
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="super-calc")
@click.option(
    "--home",
    envvar=HOME_ENV_VAR,
    default=None,
    help="Data directory (default: ~/.super-calc)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx, home: str, verbose: bool):
    """Super Calc - calculator, unit converter and tip splitter.

    Every result is kept in a searchable history (last 100 entries).
    """
    ctx.ensure_object(dict)
    home_path = resolve_home(home)
    config = load_config(home_path)
    configure_logging("DEBUG" if verbose else config.log_level)
    ctx.obj["home"] = home_path
    ctx.obj["config"] = config


# --- Calculator ---


@main.command()
@click.argument("expression")
@click.pass_context
def calc(ctx, expression: str):
    """Evaluate an arithmetic expression.

    Supports + - * / and parentheses; other characters are ignored.

    Examples:
        super-calc calc "2+3*4"
        super-calc calc "(2+3)*4"
    """
    session = CalculatorSession(_open_history(ctx))
    session.input = expression

    try:
        result = _run(session.evaluate())
    except EvaluationError as e:
        console.print(f"{escape(expression)} = [red]{EVALUATION_ERROR_DISPLAY}[/red]")
        _fail("Error", f"Invalid expression ({e})")

    console.print(f"{escape(expression)} = [bold green]{result}[/bold green]")


@main.command()
@click.pass_context
def repl(ctx):
    """Interactive keypad session.

    Type digits and operators, then "=" to evaluate. "C" clears,
    MC / MR / M+ / M- use the memory register, "quit" exits.
    """
    session = CalculatorSession(_open_history(ctx))
    notifier = ConsoleNotifier()
    console.print("[bold]Super Calc[/bold] [dim](C clear, MC/MR/M+/M- memory, quit to exit)[/dim]")

    while True:
        key = click.prompt(">", prompt_suffix=" ", default="", show_default=False).strip()
        if key.lower() in ("quit", "exit", "q"):
            break
        if not key:
            continue

        upper = key.upper()
        if upper in MEMORY_KEYS or upper == "C":
            key = upper

        try:
            shown = _run(session.press(key))
        except EvaluationError as e:
            notifier.alert("Error", f"Invalid expression ({e})")
            shown = session.result

        console.print(f"  {escape(shown or '0')}")
        if key in MEMORY_KEYS:
            console.print(f"  [dim]M = {session.memory.recall()}[/dim]")


# --- Conversion ---


@main.command("convert")
@click.argument("value")
@click.argument("from_unit")
@click.argument("to_unit")
@click.pass_context
def convert_cmd(ctx, value: str, from_unit: str, to_unit: str):
    """Convert VALUE from FROM_UNIT to TO_UNIT.

    Examples:
        super-calc convert 10 m ft
        super-calc convert 5 km mi
    """
    try:
        result = convert(value, from_unit, to_unit)
    except CalcError as e:
        _fail("Error", e)

    history = _open_history(ctx)
    _run(history.append(result.to_history_item()))
    console.print(f"[bold green]{escape(result.display)}[/bold green]")


@main.command()
@click.option(
    "--category",
    "-c",
    default=ALL_CATEGORIES,
    type=click.Choice(get_categories()),
    help="Only show one category",
)
def units(category: str):
    """List the available unit conversions."""
    table = Table(title=f"Conversions ({category})")
    table.add_column("From", style="cyan")
    table.add_column("To", style="cyan")
    table.add_column("Label", style="white")
    table.add_column("Multiplier", style="yellow", justify="right")
    table.add_column("Category", style="magenta")

    for c in filter_conversions(category):
        table.add_row(c.from_unit, c.to_unit, c.label, str(c.multiplier), c.category)

    console.print(table)


# --- Tip ---


@main.command()
@click.argument("bill")
@click.option("--percent", "-p", type=click.IntRange(0, 30), default=None, help="Tip percentage (0-30)")
@click.option("--split", "-s", type=click.IntRange(1, 20), default=None, help="Number of people (1-20)")
@click.pass_context
def tip(ctx, bill: str, percent: int, split: int):
    """Calculate the tip and split the bill.

    Examples:
        super-calc tip 100 -p 20 -s 4
    """
    config = ctx.obj["config"]
    percent = config.default_tip_percentage if percent is None else percent
    split = config.default_split_count if split is None else split

    try:
        result = calculate_tip(bill, percent, split)
    except CalcError as e:
        _fail("Error", e)

    history = _open_history(ctx)
    _run(history.append(result.to_history_item()))

    console.print(f"  Tip: [bold]{result.tip:.2f}[/bold] ({result.tip_percentage}%)")
    console.print(f"  Total: [bold]{result.total:.2f}[/bold]")
    console.print(f"  Per Person: [bold green]{result.per_person:.2f}[/bold green]")


# --- History ---


@main.group()
def history():
    """Browse, search, share and clear history."""
    pass


@history.command("list")
@click.option("--search", "-q", default="", help="Filter by text (case-insensitive)")
@click.option("--limit", "-n", default=0, help="Show at most N entries (0 = all)")
@click.pass_context
def history_list(ctx, search: str, limit: int):
    """List history entries, most recent first."""
    manager = _open_history(ctx)
    entries = manager.search(search)

    if search and not entries:
        console.print(f"[yellow]No history matches '{search}'[/yellow]")
        return

    if limit > 0:
        entries = entries[:limit]
    manager.show_table(entries)


@history.command("clear")
@click.option("--yes", "-y", is_flag=True, help="Skip the confirmation prompt")
@click.pass_context
def history_clear(ctx, yes: bool):
    """Delete all history."""
    manager = _open_history(ctx)
    notifier = ConsoleNotifier(assume_yes=yes)

    cleared = _run(manager.clear(
        lambda: notifier.confirm("Clear History", "Are you sure you want to clear all history?")
    ))

    if cleared:
        console.print("[green]History cleared.[/green]")
    else:
        console.print("[yellow]Aborted.[/yellow]")


@history.command("share")
@click.argument("item_id")
@click.pass_context
def history_share(ctx, item_id: str):
    """Share a history entry as plain text."""
    manager = _open_history(ctx, sharer=ConsoleSharer())
    item = manager.get(item_id)

    if item is None:
        console.print(f"[red]History entry not found: {item_id}[/red]")
        sys.exit(1)

    if not _run(manager.share(item)):
        console.print("[yellow]Sharing failed.[/yellow]")


# --- Theme ---


@main.command()
@click.argument("choice", required=False, type=click.Choice(["dark", "light", "toggle"]))
@click.pass_context
def theme(ctx, choice: str):
    """Show or change the theme (dark, light or toggle)."""
    prefs = PreferenceStore(get_store(ctx.obj["home"]), ctx.obj["config"].default_theme)

    if choice is None:
        current = _run(prefs.load_theme())
    elif choice == "toggle":
        current = _run(prefs.toggle_theme())
    else:
        current = _run(prefs.set_theme(choice))

    console.print(f"Theme: [bold]{current}[/bold]")


if __name__ == "__main__":
    main()
