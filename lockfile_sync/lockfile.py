"""npm lockfile reading, patching and writing.

Lockfiles are plain JSON, so the whole document is loaded into a dict,
patched in memory and written back in one go. The indentation and line
endings of the source file are remembered on read and reproduced on write so
that a version bump shows up as a one-line diff.
"""

from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any

from .errors import LockfileWriteError
from .models import LoadedLockfile, LockfileSchema, WorkspacePackage

logger = logging.getLogger(__name__)

NPM_LOCKFILE = "package-lock.json"

_INDENT_RE = re.compile(r"^([ \t]+)\S", re.MULTILINE)


def file_exists(path: Path | str) -> bool:
    """Return True if something exists at path.

    Missing parent directories simply mean the file does not exist.
    """
    try:
        return Path(path).exists()
    except OSError:
        return False


def detect_indent(text: str) -> int | str:
    """Return the indentation used by a JSON text (spaces count or a tab)."""
    match = _INDENT_RE.search(text)
    if not match:
        return 2
    indent = match.group(1)
    return "\t" if indent.startswith("\t") else len(indent)


def load_lockfile(path: Path) -> LoadedLockfile | None:
    """Load a JSON lockfile from path.

    Returns:
        The loaded lockfile, or None when the file is missing, unreadable,
        not valid JSON or not a JSON object.
    """
    if not file_exists(path):
        logger.debug("No lockfile at %s", path)
        return None
    try:
        text = path.read_bytes().decode("utf-8")
        document = json.loads(text)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.debug("Could not parse lockfile %s: %s", path, exc)
        return None
    if not isinstance(document, dict):
        logger.debug("Lockfile %s is not a JSON object", path)
        return None
    packages = document.get("packages", {})
    if not isinstance(packages, dict) or not isinstance(packages.get("", {}), dict):
        logger.debug("Lockfile %s has a malformed packages map", path)
        return None
    return LoadedLockfile(
        path=path,
        document=document,
        indent=detect_indent(text),
        newline="\r\n" if "\r\n" in text else "\n",
    )


def load_lockfile_when_exists(directory: Path | str) -> LoadedLockfile | None:
    """Load the package-lock.json sitting in directory, if there is one.

    A package without a lockfile is perfectly valid, so absence is reported
    as None rather than raised.
    """
    return load_lockfile(Path(directory) / NPM_LOCKFILE)


def lockfile_schema(document: dict[str, Any]) -> LockfileSchema:
    """Classify a parsed npm lockfile by the maps it carries."""
    has_packages = isinstance(document.get("packages"), dict)
    if not has_packages:
        return LockfileSchema.CLASSIC_V1
    if "dependencies" in document:
        return LockfileSchema.CLASSIC_V2
    return LockfileSchema.MODERN


def update_classic_lockfile_version(
    pkg: WorkspacePackage, document: dict[str, Any]
) -> dict[str, Any]:
    """Set a package's own version inside its own lockfile.

    Updates the top-level ``version`` and, for v2+ lockfiles, the root entry
    ``packages[""].version``. Dependency entries are left alone. The document
    is mutated in place and returned; nothing is written.
    """
    document["version"] = pkg.version
    packages = document.get("packages")
    if isinstance(packages, dict):
        root_entry = packages.setdefault("", {})
        if isinstance(root_entry, dict):
            root_entry["version"] = pkg.version
        else:
            logger.debug("packages[\"\"] of %s is not an object, skipping", pkg.name)
    return document


def update_root_lockfile_version(
    pkg: WorkspacePackage, document: dict[str, Any], root: Path | str
) -> bool:
    """Set a workspace package's version in the project-root lockfile.

    The package entry is looked up by its root-relative path, e.g.
    ``packages["packages/pkg-1"]``. Packages the lockfile doesn't know about
    (private, or added after the lockfile was generated) are skipped.

    Returns:
        True if an entry was updated.
    """
    packages = document.get("packages")
    if not isinstance(packages, dict):
        return False
    rel_path = Path(os.path.relpath(pkg.location, root)).as_posix()
    entry = packages.get(rel_path)
    if not isinstance(entry, dict):
        logger.debug("%s (%s) not in root lockfile, skipping", pkg.name, rel_path)
        return False
    entry["version"] = pkg.version
    return True


def save_lockfile(
    path: Path,
    document: dict[str, Any],
    indent: int | str = 2,
    newline: str = "\n",
) -> Path:
    """Write a lockfile document back to disk as formatted JSON.

    Raises:
        LockfileWriteError: If the file cannot be written.
    """
    text = json.dumps(document, indent=indent, ensure_ascii=False) + "\n"
    if newline != "\n":
        text = text.replace("\n", newline)
    try:
        path.write_text(text, encoding="utf-8", newline="")
    except OSError as exc:
        raise LockfileWriteError(path, exc.strerror or str(exc)) from exc
    return path


def save_loaded_lockfile(lockfile: LoadedLockfile) -> Path:
    """Write a loaded lockfile back where it came from, in its own format."""
    return save_lockfile(
        lockfile.path, lockfile.document, lockfile.indent, lockfile.newline
    )
