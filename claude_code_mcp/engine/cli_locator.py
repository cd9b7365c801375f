"""Locate the Claude CLI binary."""
from __future__ import annotations

import logging
import os
from pathlib import Path

from .errors import InvalidCliNameError

logger = logging.getLogger(__name__)

DEFAULT_CLI_NAME = "claude"


def local_install_path(home: Path | None = None) -> Path:
    """Per-user install location used by ``claude migrate-installer``."""
    return (home or Path.home()) / ".claude" / "local" / "claude"


def find_claude_cli(cli_name: str | None = None, home: Path | None = None) -> str:
    """Determine the Claude CLI command/path.

    1. An absolute *cli_name* is used directly; one containing a path
       separator is rejected.
    2. ~/.claude/local/claude is used if it exists.
    3. Otherwise *cli_name* (or 'claude') is returned for PATH lookup.
    """
    logger.debug("Attempting to find Claude CLI (cli_name=%s)", cli_name)

    if cli_name:
        if os.path.isabs(cli_name):
            logger.debug("CLAUDE_CLI_NAME is an absolute path: %s", cli_name)
            return cli_name
        if "/" in cli_name:
            raise InvalidCliNameError(cli_name)

    name = cli_name or DEFAULT_CLI_NAME

    user_path = local_install_path(home)
    if user_path.exists():
        logger.debug("Found Claude CLI at local user path: %s", user_path)
        return str(user_path)
    logger.debug("Claude CLI not found at local user path: %s", user_path)

    logger.warning(
        "Claude CLI not found at %s. Falling back to %r in PATH. "
        "Ensure it is installed and accessible.",
        user_path, name,
    )
    return name
