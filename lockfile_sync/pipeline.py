"""Lockfile sync pipeline: patch packages → patch root → refresh.

This module orchestrates bringing lockfiles back in line once workspace
package versions have been bumped:
1. Patch each package's own package-lock.json (if it has one)
2. Patch the workspace entries of the root package-lock.json
3. Ask the configured package manager for a lockfile-only refresh

Per-package patches always finish before any package manager is spawned,
so the refresh sees manifests and lockfiles that already agree.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from .clients import PackageManagerClient, get_client
from .lockfile import (
    NPM_LOCKFILE,
    file_exists,
    load_lockfile,
    load_lockfile_when_exists,
    lockfile_schema,
    save_loaded_lockfile,
    update_classic_lockfile_version,
    update_root_lockfile_version,
)
from .models import (
    LockfileKind,
    LockfileLocation,
    LockfileSchema,
    SyncResult,
    WorkspacePackage,
)
from .shell import step


def update_package_lockfile(pkg: WorkspacePackage) -> Path | None:
    """Patch and save the package-lock.json next to a package's manifest.

    Returns:
        Path of the saved lockfile, or None when the package has no
        (readable) lockfile.

    Raises:
        LockfileWriteError: If the patched lockfile cannot be saved.
    """
    lockfile = load_lockfile_when_exists(pkg.location)
    if lockfile is None:
        return None
    update_classic_lockfile_version(pkg, lockfile.document)
    return save_loaded_lockfile(lockfile)


def update_package_lockfiles(packages: Sequence[WorkspacePackage]) -> list[Path]:
    """Patch every package's own lockfile, one package at a time.

    Packages without a lockfile are skipped.
    """
    step("Updating package lockfiles")

    updated: list[Path] = []
    for pkg in packages:
        path = update_package_lockfile(pkg)
        if path is None:
            continue
        updated.append(path)
        print(f"  {pkg.name}: {path.name} → {pkg.version}")

    if not updated:
        print("  No package lockfiles found")
    return updated


def update_root_lockfile(
    packages: Sequence[WorkspacePackage], root: Path
) -> Path | None:
    """Patch the workspace entries of the project-root package-lock.json.

    The file is read once, every package is patched in memory, and the
    result is written once. Classic v1 root lockfiles have no path-keyed
    entries to patch and are left for the client refresh.

    Returns:
        Path of the saved root lockfile, or None if no workspace entry
        matched and the file was left untouched.
    """
    lockfile = load_lockfile(root / NPM_LOCKFILE)
    if lockfile is None:
        return None
    if lockfile_schema(lockfile.document) is LockfileSchema.CLASSIC_V1:
        return None

    step("Updating root lockfile")

    updated = False
    for pkg in packages:
        if update_root_lockfile_version(pkg, lockfile.document, root):
            print(f"  {pkg.name} → {pkg.version}")
            updated = True

    if not updated:
        print("  No workspace entries to update")
        return None
    return save_loaded_lockfile(lockfile)


def refresh_root_lockfile(
    client: PackageManagerClient | str, root: Path
) -> str | None:
    """Regenerate the root lockfile through the package manager.

    Args:
        client: An adapter, or the name of one ("npm", "pnpm", "yarn").
        root: Project root to run the package manager in.

    Returns:
        The lockfile name produced, or None when the client produced nothing.

    Raises:
        UnsupportedClientError: For an unknown client name.
        ExternalToolError: If the package manager fails.
    """
    if isinstance(client, str):
        client = get_client(client)

    step(f"Refreshing root lockfile with {client.name}")

    lockfile_name = client.install_lockfile_only(root)
    print(f"  {lockfile_name or '<not produced>'}")
    return lockfile_name


def sync_lockfiles(
    packages: Sequence[WorkspacePackage],
    root: Path,
    client: PackageManagerClient | str = "npm",
    *,
    refresh: bool = True,
) -> SyncResult:
    """Execute the full lockfile sync.

    Args:
        packages: Workspace packages with their final versions.
        root: Project root directory.
        client: Package manager adapter or name used for the refresh.
        refresh: If False, only patch files and never spawn the client.
    """
    if isinstance(client, str):
        client = get_client(client)

    result = SyncResult(package_lockfiles=update_package_lockfiles(packages))
    result.root_lockfile = update_root_lockfile(packages, root)
    if refresh:
        result.refreshed_lockfile = refresh_root_lockfile(client, root)
    return result


def locate_lockfiles(
    packages: Sequence[WorkspacePackage],
    root: Path,
    client: PackageManagerClient | str = "npm",
) -> list[LockfileLocation]:
    """List where lockfiles are expected and whether each one exists.

    Always reports the client's root lockfile; per-package npm lockfiles are
    reported only when present, since most packages don't have one.
    """
    if isinstance(client, str):
        client = get_client(client)

    locations = [client.root_lockfile(root)]
    for pkg in packages:
        path = pkg.location / NPM_LOCKFILE
        if file_exists(path):
            locations.append(
                LockfileLocation(
                    path=path, kind=LockfileKind.NPM_CLASSIC, exists_on_disk=True
                )
            )
    return locations
