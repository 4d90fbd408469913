"""Exception hierarchy for lockfile-sync.

Every failure the engine raises derives from LockfileSyncError so the
surrounding release pipeline can stop on any of them with a single except
clause. Recoverable conditions (a package without a lockfile, a malformed
lockfile, a missing pnpm lockfile) are not exceptions; those calls return
None instead.
"""

from __future__ import annotations

from pathlib import Path


class LockfileSyncError(Exception):
    """Base exception for all lockfile-sync errors."""


class LockfileWriteError(LockfileSyncError):
    """Raised when a patched lockfile cannot be written back to disk."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Could not write {path}: {reason}")


class ExternalToolError(LockfileSyncError):
    """Raised when a spawned package manager exits with a non-zero status.

    Attributes:
        command: The full argv that was run.
        returncode: Exit status of the process (127 if it could not be found).
        output: Combined stdout/stderr captured from the process.
    """

    def __init__(self, command: list[str], returncode: int, output: str = "") -> None:
        self.command = command
        self.returncode = returncode
        self.output = output
        message = f"`{' '.join(command)}` exited with status {returncode}"
        if output:
            message += f"\n{output}"
        super().__init__(message)


class UnsupportedClientError(LockfileSyncError):
    """Raised when asked for a package manager other than npm, pnpm or yarn."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f'Unsupported npm client "{name}", expected one of: npm, pnpm, yarn'
        )


class ConfigError(LockfileSyncError):
    """Raised for malformed configuration files or package manifests."""
