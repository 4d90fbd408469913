"""Workspace package discovery.

Expands the configured globs relative to the project root and reads each
matching package.json into a WorkspacePackage.
"""

from __future__ import annotations

import glob
from pathlib import Path

from .config import read_manifest
from .errors import ConfigError
from .models import WorkspacePackage


def discover_packages(root: Path, globs: list[str]) -> list[WorkspacePackage]:
    """Scan the workspace and discover all packages.

    Args:
        root: Project root directory.
        globs: Patterns like "packages/*" relative to root.

    Returns:
        Packages sorted by location, each directory listed once.

    Raises:
        ConfigError: If no package matches or a manifest is malformed.
    """
    member_dirs: list[Path] = []
    for pattern in globs:
        for match in sorted(glob.glob(str(root / pattern))):
            p = Path(match)
            if (p / "package.json").exists() and p not in member_dirs:
                member_dirs.append(p)

    if not member_dirs:
        raise ConfigError(f"No packages found matching {', '.join(globs)} in {root}")

    packages: list[WorkspacePackage] = []
    for d in sorted(member_dirs):
        manifest_path = d / "package.json"
        manifest = read_manifest(manifest_path)
        packages.append(
            WorkspacePackage(
                name=str(manifest.get("name") or d.name),
                version=str(manifest.get("version") or "0.0.0"),
                location=d,
                manifest_path=manifest_path,
            )
        )
    return packages
