"""Shared test fixtures."""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from rich.console import Console

from fileman.config import ConfigManager, Settings
from fileman.context import AppContext
from fileman.filesystem import FileOperations
from fileman.session import Session
from fileman.tui import TUI

@pytest.fixture
def temp_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Override home directory for testing."""
    monkeypatch.setattr(Path, "home", lambda: tmp_path)
    return tmp_path


@pytest.fixture
def ops() -> FileOperations:
    """Create a filesystem engine."""
    return FileOperations()


@pytest.fixture
def root_dir(tmp_path: Path) -> Path:
    """Session root that does not exist yet."""
    return tmp_path / "FileManagerTest"


@pytest.fixture
def session(root_dir: Path) -> Session:
    """Create a session rooted in a temporary directory."""
    return Session.create(root_dir)


@pytest.fixture
def temp_config_dir(tmp_path: Path) -> Path:
    """Create a temporary configuration directory."""
    config_dir = tmp_path / ".fileman"
    config_dir.mkdir(parents=True)
    return config_dir


@pytest.fixture
def config(temp_config_dir: Path) -> ConfigManager:
    """Create a config manager with temporary directory."""
    return ConfigManager.create(temp_config_dir)


@pytest.fixture
def app_context(session: Session, config: ConfigManager) -> AppContext:
    """Create an AppContext around the temporary session."""
    return AppContext(
        session=session,
        config=config,
        settings=Settings(confirm_delete=False),
    )


@pytest.fixture
def output() -> io.StringIO:
    """Buffer receiving console output."""
    return io.StringIO()


@pytest.fixture
def tui(output: io.StringIO) -> TUI:
    """Create a TUI that writes to a buffer."""
    return TUI(Console(file=output, width=200, color_system=None))
