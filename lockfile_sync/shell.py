"""Process and output utilities.

Provides thin wrappers around subprocess calls for running package manager
commands, plus output formatting helpers.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable
from pathlib import Path

from .errors import ExternalToolError

# Library users get silence unless they configure logging themselves.
logging.getLogger("lockfile_sync").addHandler(logging.NullHandler())


# Signature shared by run() and the stand-ins injected in its place.
Runner = Callable[..., "subprocess.CompletedProcess[str]"]


def run(*args: str, cwd: Path | str | None = None) -> subprocess.CompletedProcess[str]:
    """Run a command and wait for it to exit.

    Output is captured so it can be attached to the error when the command
    fails; package managers are noisy and a lockfile-only refresh prints
    nothing the user needs on success.

    Args:
        *args: Command and arguments (e.g., "npm", "install", "--package-lock-only").
        cwd: Directory to run the command in.

    Returns:
        CompletedProcess with stdout/stderr as text.

    Raises:
        ExternalToolError: If the command exits non-zero or is not installed.
    """
    try:
        result = subprocess.run(args, cwd=cwd, capture_output=True, text=True)
    except FileNotFoundError as exc:
        raise ExternalToolError(list(args), 127, str(exc)) from exc
    if result.returncode != 0:
        output = "\n".join(s for s in (result.stdout, result.stderr) if s).strip()
        raise ExternalToolError(list(args), result.returncode, output)
    return result


def step(msg: str) -> None:
    """Print a visually distinct step header.

    Used to separate the phases of a sync in terminal output.
    """
    print(f"\n{'─' * 60}\n{msg}\n{'─' * 60}")
