"""Rich console output for fileman."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from fileman.errors import ClassifiedError, ErrorKind
from fileman.types import DirectoryEntry

# Title shown for each kind of failure
FAILURE_TITLES = {
    ErrorKind.ALREADY_EXISTS: "Already Exists",
    ErrorKind.NOT_FOUND: "Not Found",
    ErrorKind.PERMISSION_DENIED: "Permission Denied",
    ErrorKind.IO_FAILURE: "I/O Error",
    ErrorKind.UNEXPECTED: "Operation Failed",
}


def sort_entries(entries: list[DirectoryEntry]) -> list[DirectoryEntry]:
    """Order entries with directories first, then by case-insensitive name."""
    return sorted(entries, key=lambda e: (not e.is_directory, e.name.lower()))


def format_size(size: int) -> str:
    """Format a byte count for display."""
    if size < 1024:
        return f"{size} B"
    value = size / 1024
    for unit in ("KB", "MB"):
        if value < 1024:
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} GB"


class TUI:
    """Text User Interface for fileman (non-interactive output and prompts)."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize TUI."""
        self.console = console or Console()

    def show_entries(
        self, entries: list[DirectoryEntry], directory: Path, sort: bool = True
    ) -> None:
        """Display a directory listing.

        Args:
            entries: Entries of the directory.
            directory: Directory that was listed.
            sort: Sort directories first, then by name.
        """
        self.console.print(f"\n[bold]Contents of:[/bold] {escape(str(directory))}")
        if not entries:
            self.console.print("[dim](Directory is empty)[/dim]")
            return

        table = Table(show_header=True, header_style="bold")
        table.add_column("Type")
        table.add_column("Name", style="cyan")
        table.add_column("Size", justify="right")
        table.add_column("Modified")

        for entry in sort_entries(entries) if sort else entries:
            table.add_row(
                escape(entry.tag),
                escape(entry.name) + ("/" if entry.is_directory else ""),
                "" if entry.is_directory else format_size(entry.size),
                entry.last_modified.astimezone().strftime("%Y-%m-%d %H:%M"),
            )

        self.console.print(table)

    def show_content(self, name: str, content: str) -> None:
        """Display the content of a file.

        Args:
            name: File name used as the panel title.
            content: File content.
        """
        self.console.print(
            Panel(escape(content) if content else "[dim](empty file)[/dim]", title=escape(name))
        )

    def show_failure(self, error: ClassifiedError) -> None:
        """Show a classified failure.

        Args:
            error: The failure to display.
        """
        title = FAILURE_TITLES[error.kind]
        self.console.print(
            f"[red]✗[/red] [bold]{title}[/bold] - Error {escape(error.context)}: "
            f"{escape(error.message)}"
        )

    def show_success(self, message: str) -> None:
        """Show success message.

        Args:
            message: Success message.
        """
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def show_error(self, message: str) -> None:
        """Show error message.

        Args:
            message: Error message.
        """
        self.console.print(f"[red]✗[/red] {escape(message)}")

    def show_warning(self, message: str) -> None:
        """Show warning message.

        Args:
            message: Warning message.
        """
        self.console.print(f"[yellow]![/yellow] {escape(message)}")

    def show_info(self, message: str) -> None:
        """Show info message.

        Args:
            message: Info message.
        """
        self.console.print(f"[blue]i[/blue] {escape(message)}")

    def confirm(self, message: str, default: bool = False) -> bool:
        """Show confirmation prompt.

        Args:
            message: Confirmation message.
            default: Default response.

        Returns:
            User's response. Closed input or an interrupt counts as "no".
        """
        try:
            return Confirm.ask(message, default=default, console=self.console)
        except (EOFError, KeyboardInterrupt):
            self.console.print()
            return False

    def prompt(self, label: str) -> str:
        """Prompt for a line of input.

        Args:
            label: Prompt text.

        Returns:
            Entered text.
        """
        return Prompt.ask(label, console=self.console)
