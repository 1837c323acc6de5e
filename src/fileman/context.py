"""Application context for dependency injection.

Separates object creation from object use: CLI commands receive an
AppContext instead of building their own Session and config.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from fileman.config import ConfigManager, Settings
from fileman.session import Session


@dataclass
class AppContext:
    """Container for application dependencies.

    For tests, construct AppContext directly with a Session rooted in a
    temporary directory.
    """

    session: Session
    config: ConfigManager
    settings: Settings = field(default_factory=Settings)


def create_context(
    root: Path | None = None,
    config_dir: Path | None = None,
) -> AppContext:
    """Factory for application dependencies.

    The session root is `root` when given, otherwise the configured
    `rootDir`.

    Args:
        root: Override session root (from --root or FILEMAN_ROOT).
        config_dir: Override configuration directory (for testing).

    Returns:
        Configured AppContext with all dependencies.
    """
    config = ConfigManager.create(config_dir) if config_dir else ConfigManager.create_default()
    settings = config.load()
    session = Session.create(root or settings.root_dir.expanduser())
    return AppContext(session=session, config=config, settings=settings)
