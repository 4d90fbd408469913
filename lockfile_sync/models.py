"""Data models for lockfile-sync.

These Pydantic models represent the packages, lockfiles and results that
flow between the reader, the patchers, the client adapters and the pipeline.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class WorkspacePackage(BaseModel):
    """A single publishable package in the monorepo workspace.

    Owned by the surrounding release pipeline; lockfile-sync only reads
    ``version`` and ``location``.

    Attributes:
        name: Package name from package.json.
        version: Current (already bumped) version string.
        location: Absolute path to the package directory.
        manifest_path: Path to the package's package.json.
    """

    name: str
    version: str
    location: Path
    manifest_path: Path


class LockfileSchema(str, Enum):
    """Shape of an npm lockfile.

    classic-v1 only has the nested ``dependencies`` tree, classic-v2 carries
    both that tree and the path-keyed ``packages`` map, and modern
    (lockfileVersion 3) only has ``packages``.
    """

    CLASSIC_V1 = "classic-v1"
    CLASSIC_V2 = "classic-v2"
    MODERN = "modern"


class LockfileKind(str, Enum):
    """Which tool owns a lockfile and where it lives."""

    NPM_CLASSIC = "npm-classic"
    NPM_MODERN_ROOT = "npm-modern-root"
    PNPM = "pnpm"
    YARN = "yarn"


class LoadedLockfile(BaseModel):
    """A parsed lockfile together with the formatting it was read with.

    Attributes:
        path: Where the lockfile was read from.
        document: The parsed JSON object, mutated in place by the patchers.
        indent: Indentation of the source text (spaces count or "\\t").
        newline: Line ending of the source text.
    """

    path: Path
    document: dict[str, Any]
    indent: int | str = 2
    newline: str = "\n"


class LockfileLocation(BaseModel):
    """Where a lockfile is expected and whether it is there right now."""

    path: Path
    kind: LockfileKind
    exists_on_disk: bool


class SyncResult(BaseModel):
    """Outcome of one full lockfile sync.

    Attributes:
        package_lockfiles: Per-package lockfiles that were patched and saved.
        root_lockfile: Root package-lock.json, if it was patched.
        refreshed_lockfile: File name produced by the client refresh, or None
            when the refresh was skipped or produced nothing.
    """

    package_lockfiles: list[Path] = Field(default_factory=list)
    root_lockfile: Path | None = None
    refreshed_lockfile: str | None = None
