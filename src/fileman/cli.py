"""CLI commands using Typer."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

if TYPE_CHECKING:
    from fileman.context import AppContext

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from fileman import __version__
from fileman.context import create_context
from fileman.errors import SessionError
from fileman.shell import Shell
from fileman.tui import TUI

app = typer.Typer(
    name="fileman",
    help="Browse and edit a directory tree from the terminal",
    no_args_is_help=True,
)

config_app = typer.Typer(help="Configuration commands")

app.add_typer(config_app, name="config")

console = Console()
tui = TUI(console)

RootOption = Annotated[
    Path | None,
    typer.Option(
        "--root",
        "-r",
        envvar="FILEMAN_ROOT",
        help="Session root directory (defaults to the configured rootDir)",
    ),
]


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"fileman v{__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route log records to stderr through Rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-V", help="Enable debug logging")
    ] = False,
) -> None:
    """Browse and edit a directory tree from the terminal."""
    configure_logging(verbose)


def _context_for(root: Path | None, context: AppContext | None) -> AppContext:
    """Use an injected context or build the production one."""
    return context or create_context(root=root)


def _fail(error: SessionError) -> typer.Exit:
    """Show a session failure and build the exit to raise."""
    tui.show_failure(error.error)
    return typer.Exit(1)


# ============================================================================
# Browsing Commands
# ============================================================================


@app.command("pwd")
def pwd(
    root: RootOption = None,
    _context=None,
) -> None:
    """Show the session root directory."""
    ctx = _context_for(root, _context)
    console.print(escape(str(ctx.session.get_current_directory())))


@app.command("ls")
def ls(
    path: Annotated[str | None, typer.Argument(help="Directory to list")] = None,
    root: RootOption = None,
    _context=None,
) -> None:
    """List a directory."""
    ctx = _context_for(root, _context)
    try:
        if path:
            ctx.session.navigate_to(path)
        entries = ctx.session.list_directory()
    except SessionError as e:
        raise _fail(e) from e
    tui.show_entries(entries, ctx.session.current_directory, sort=ctx.settings.sort_listing)


@app.command("cat")
def cat(
    name: Annotated[str, typer.Argument(help="File to show")],
    root: RootOption = None,
    _context=None,
) -> None:
    """Show the content of a file."""
    ctx = _context_for(root, _context)
    try:
        content = ctx.session.read_file(name)
    except SessionError as e:
        raise _fail(e) from e
    tui.show_content(name, content)


# ============================================================================
# Editing Commands
# ============================================================================


@app.command("touch")
def touch(
    name: Annotated[str, typer.Argument(help="File to create")],
    content: Annotated[str, typer.Option("--content", "-c", help="Initial content")] = "",
    root: RootOption = None,
    _context=None,
) -> None:
    """Create a new file."""
    ctx = _context_for(root, _context)
    if ctx.session.resolve(name).exists():
        tui.show_warning(f"A file or directory named '{name}' already exists")
        raise typer.Exit(1)
    try:
        path = ctx.session.create_file(name, content)
    except SessionError as e:
        raise _fail(e) from e
    tui.show_success(f"File created: {path}")


@app.command("mkdir")
def mkdir(
    name: Annotated[str, typer.Argument(help="Directory to create")],
    root: RootOption = None,
    _context=None,
) -> None:
    """Create a new directory."""
    ctx = _context_for(root, _context)
    if ctx.session.resolve(name).exists():
        tui.show_warning(f"A file or directory named '{name}' already exists")
        raise typer.Exit(1)
    try:
        path = ctx.session.create_directory(name)
    except SessionError as e:
        raise _fail(e) from e
    tui.show_success(f"Directory created: {path}")


@app.command("write")
def write(
    name: Annotated[str, typer.Argument(help="File to update")],
    content: Annotated[str, typer.Argument(help="New content")],
    root: RootOption = None,
    _context=None,
) -> None:
    """Replace the content of an existing file."""
    ctx = _context_for(root, _context)
    try:
        path = ctx.session.update_file(name, content)
    except SessionError as e:
        raise _fail(e) from e
    tui.show_success(f"File updated: {path}")


@app.command("rm")
def rm(
    name: Annotated[str, typer.Argument(help="File or directory to delete")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
    root: RootOption = None,
    _context=None,
) -> None:
    """Delete a file, or a directory and everything in it."""
    ctx = _context_for(root, _context)
    if not yes and ctx.settings.confirm_delete:
        if not tui.confirm(f"Are you sure you want to delete '{name}'?"):
            tui.show_info("Delete cancelled")
            return
    try:
        path = ctx.session.delete(name)
    except SessionError as e:
        raise _fail(e) from e
    tui.show_success(f"Deleted: {path}")


@app.command("mv")
def mv(
    old_name: Annotated[str, typer.Argument(help="Existing name")],
    new_name: Annotated[str, typer.Argument(help="New name")],
    root: RootOption = None,
    _context=None,
) -> None:
    """Rename a file or directory."""
    ctx = _context_for(root, _context)
    if not new_name.strip() or new_name == old_name:
        tui.show_warning("Invalid rename: new name must be different and non-empty")
        raise typer.Exit(1)
    try:
        path = ctx.session.rename(old_name, new_name)
    except SessionError as e:
        raise _fail(e) from e
    tui.show_success(f"Renamed: {old_name} -> {path}")


# ============================================================================
# Config Commands
# ============================================================================


@config_app.command("show")
def config_show(
    _context=None,
) -> None:
    """Show current configuration."""
    ctx = _context or create_context()
    settings = ctx.config.load()

    console.print("\n[bold]Configuration[/bold]")
    console.print(f"  Config file: {escape(str(ctx.config.config_file))}")
    console.print(f"  Root directory: {escape(str(settings.root_dir))}")
    console.print(f"  Sort listing: {settings.sort_listing}")
    console.print(f"  Confirm delete: {settings.confirm_delete}")


@config_app.command("set")
def config_set(
    key: Annotated[str, typer.Argument(help="root-dir, sort-listing or confirm-delete")],
    value: Annotated[str, typer.Argument(help="Configuration value")],
    _context=None,
) -> None:
    """Set a configuration value."""
    ctx = _context or create_context()
    try:
        ctx.settings = ctx.config.set_value(key, value)
    except ValueError as e:
        tui.show_error(str(e).splitlines()[0])
        raise typer.Exit(1) from e
    tui.show_success(f"Set {key} to {value}")


# ============================================================================
# Interactive Mode
# ============================================================================


@app.command("shell")
def shell(
    root: RootOption = None,
    _context=None,
) -> None:
    """Run an interactive shell with a movable current directory."""
    ctx = _context_for(root, _context)
    if ctx.session.startup_error is not None:
        tui.show_failure(ctx.session.startup_error)
    Shell(ctx.session, tui, ctx.settings).run()


if __name__ == "__main__":
    app()
