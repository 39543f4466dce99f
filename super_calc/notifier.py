"""Console collaborators: user notifications and sharing."""

import questionary
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

console = Console()


class ConsoleNotifier:
    """Shows errors and asks accept/cancel questions in the terminal."""

    def __init__(self, assume_yes: bool = False):
        self.assume_yes = assume_yes

    def alert(self, title: str, message: str):
        console.print(f"[red]{escape(title)}: {escape(message)}[/red]")

    def confirm(self, title: str, message: str) -> bool:
        """Ask for confirmation. Defaults to cancel."""
        if self.assume_yes:
            return True
        console.print(f"[bold]{title}[/bold]")
        answer = questionary.confirm(message, default=False).ask()
        # ask() returns None on Ctrl-C
        return bool(answer)


class ConsoleSharer:
    """Share target that prints the message in a panel."""

    async def share(self, message: str):
        console.print(Panel(Text(message), title="Share"))
