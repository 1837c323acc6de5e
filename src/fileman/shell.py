"""Interactive shell bound to a single Session."""

from __future__ import annotations

import shlex
from collections.abc import Callable
from dataclasses import dataclass

from rich.markup import escape

from fileman.config import Settings
from fileman.errors import SessionError
from fileman.session import Session
from fileman.tui import TUI

EXIT_COMMANDS = {"exit", "quit"}


@dataclass(frozen=True)
class ShellCommand:
    """A shell command and its argument requirements."""

    handler: Callable[[list[str]], None]
    min_args: int
    usage: str
    help: str


class Shell:
    """Read-eval loop over Session operations.

    Failures are displayed and the loop continues; nothing a command does
    can end the shell except `exit`, `quit`, EOF or Ctrl-C.
    """

    def __init__(self, session: Session, tui: TUI, settings: Settings | None = None) -> None:
        """Initialize the shell.

        Args:
            session: Session to operate on.
            tui: Output and prompt helper.
            settings: Display and confirmation settings.
        """
        self.session = session
        self.tui = tui
        self.settings = settings or Settings()
        self.commands: dict[str, ShellCommand] = {
            "ls": ShellCommand(self._ls, 0, "ls", "List the current directory"),
            "cd": ShellCommand(self._cd, 1, "cd PATH", "Change directory"),
            "pwd": ShellCommand(self._pwd, 0, "pwd", "Show the current directory"),
            "cat": ShellCommand(self._cat, 1, "cat NAME", "Show a file"),
            "touch": ShellCommand(self._touch, 1, "touch NAME [TEXT...]", "Create a file"),
            "mkdir": ShellCommand(self._mkdir, 1, "mkdir NAME", "Create a directory"),
            "write": ShellCommand(self._write, 2, "write NAME TEXT...", "Replace a file's content"),
            "rm": ShellCommand(self._rm, 1, "rm NAME", "Delete a file or directory"),
            "mv": ShellCommand(self._mv, 2, "mv OLD NEW", "Rename a file or directory"),
            "help": ShellCommand(self._help, 0, "help", "Show this help"),
        }

    def run(self) -> None:
        """Prompt for commands until the user exits."""
        self.tui.show_info("Type 'help' for commands, 'exit' to quit.")
        while True:
            try:
                line = self.tui.prompt(escape(str(self.session.current_directory)))
            except (EOFError, KeyboardInterrupt):
                self.tui.console.print()
                break
            if not self.execute(line):
                break

    def execute(self, line: str) -> bool:
        """Run one command line.

        Args:
            line: Raw input.

        Returns:
            False if the shell should stop, True otherwise.
        """
        try:
            args = shlex.split(line)
        except ValueError as e:
            self.tui.show_error(f"Invalid input: {e}")
            return True
        if not args:
            return True

        name, args = args[0], args[1:]
        if name in EXIT_COMMANDS:
            return False

        command = self.commands.get(name)
        if command is None:
            self.tui.show_error(f"Unknown command: {name} (try 'help')")
            return True
        if len(args) < command.min_args:
            self.tui.show_error(f"Usage: {command.usage}")
            return True

        try:
            command.handler(args)
        except SessionError as e:
            self.tui.show_failure(e.error)
        return True

    def _ls(self, args: list[str]) -> None:
        entries = self.session.list_directory()
        self.tui.show_entries(
            entries, self.session.current_directory, sort=self.settings.sort_listing
        )

    def _cd(self, args: list[str]) -> None:
        self.session.navigate_to(args[0])

    def _pwd(self, args: list[str]) -> None:
        self.tui.console.print(escape(str(self.session.get_current_directory())))

    def _cat(self, args: list[str]) -> None:
        self.tui.show_content(args[0], self.session.read_file(args[0]))

    def _touch(self, args: list[str]) -> None:
        path = self.session.create_file(args[0], " ".join(args[1:]))
        self.tui.show_success(f"File created: {path}")

    def _mkdir(self, args: list[str]) -> None:
        path = self.session.create_directory(args[0])
        self.tui.show_success(f"Directory created: {path}")

    def _write(self, args: list[str]) -> None:
        path = self.session.update_file(args[0], " ".join(args[1:]))
        self.tui.show_success(f"File updated: {path}")

    def _rm(self, args: list[str]) -> None:
        if self.settings.confirm_delete and not self.tui.confirm(
            f"Are you sure you want to delete '{args[0]}'?"
        ):
            self.tui.show_info("Delete cancelled")
            return
        path = self.session.delete(args[0])
        self.tui.show_success(f"Deleted: {path}")

    def _mv(self, args: list[str]) -> None:
        old_name, new_name = args[0], args[1]
        if old_name == new_name:
            self.tui.show_warning("Invalid rename: new name must be different")
            return
        path = self.session.rename(old_name, new_name)
        self.tui.show_success(f"Renamed: {old_name} -> {path.name}")

    def _help(self, args: list[str]) -> None:
        for command in self.commands.values():
            self.tui.console.print(f"  {escape(command.usage):<22} {command.help}")
        self.tui.console.print(f"  {'exit':<22} Leave the shell")
