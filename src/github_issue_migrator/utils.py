"""
Utility functions for the GitHub issue migration tool.
"""

from __future__ import annotations

import logging
import re
import subprocess
from typing import Final

LOG_FILE: Final[str] = "migration.log"
LOG_FORMAT: Final[str] = "%(asctime)s - %(levelname)s - %(message)s"

_PASS_PATH_PATTERN: Final[re.Pattern[str]] = re.compile(r"(?:[A-Za-z0-9_-]+)(?:/[A-Za-z0-9_-]+)*")


class PassError(Exception):
    """Base class for pass-related errors."""


class InvalidPassPathError(PassError):
    """Raised when the pass path does not exist in the password store."""


def setup_logging(*, verbosity: int = 0) -> None:
    """Configure logging for the migration process.

    The console only shows warnings by default, INFO with one ``-v`` and DEBUG
    with two. The log file always receives everything.
    """
    if verbosity >= 2:  # noqa: PLR2004
        console_level = logging.DEBUG
    elif verbosity == 1:
        console_level = logging.INFO
    else:
        console_level = logging.WARNING

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    file_handler = logging.FileHandler(LOG_FILE, mode="a")
    file_handler.setLevel(logging.DEBUG)

    logging.basicConfig(
        level=logging.DEBUG,
        format=LOG_FORMAT,
        handlers=[console_handler, file_handler],
    )
    # PyGithub logs every request at DEBUG
    logging.getLogger("github").setLevel(logging.INFO if verbosity < 3 else logging.DEBUG)  # noqa: PLR2004


def _validate_pass_path(pass_path: str) -> None:
    """Validate the pass path format."""
    if not _PASS_PATH_PATTERN.fullmatch(pass_path):
        msg = f"Invalid pass path: {pass_path}"
        raise ValueError(msg)


def get_pass_value(pass_path: str) -> str:
    """Get a secret from the ``pass`` password manager at the given path."""
    _validate_pass_path(pass_path)

    try:
        result = subprocess.run(  # noqa: S603
            ["pass", "show", pass_path], capture_output=True, text=True, check=True
        )
    except FileNotFoundError as e:
        msg = "The 'pass' utility is not installed"
        raise PassError(msg) from e
    except subprocess.CalledProcessError as e:
        if "not in the password store" in e.stderr.lower():
            msg = f"Pass path '{pass_path}' not found or invalid."
            raise InvalidPassPathError(msg) from e
        msg = (
            f"Failed to get value from pass at '{pass_path}'.\n"
            f"Error: {e.stderr.strip()}\n"
            f"Return code: {e.returncode}"
        )
        raise PassError(msg) from e

    # pass stores the secret on the first line, metadata may follow
    return result.stdout.splitlines()[0].strip() if result.stdout else ""
