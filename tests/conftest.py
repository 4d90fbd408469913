"""Shared test fixtures."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from lockfile_sync.models import WorkspacePackage


def write_json(path: Path, data: Any, indent: int | str = 2) -> Path:
    """Write data as a JSON file the way npm does (trailing newline)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=indent) + "\n")
    return path


def read_json(path: Path) -> Any:
    return json.loads(path.read_text())


def make_package(root: Path, name: str, version: str = "1.0.0") -> WorkspacePackage:
    """Create packages/<name>/package.json under root and return its model."""
    location = root / "packages" / name
    manifest_path = write_json(
        location / "package.json", {"name": name, "version": version}
    )
    return WorkspacePackage(
        name=name, version=version, location=location, manifest_path=manifest_path
    )


@pytest.fixture
def lockfile_v1() -> dict[str, Any]:
    """A classic v1 package-lock.json for package-1."""
    return {
        "name": "package-1",
        "version": "1.0.0",
        "lockfileVersion": 1,
        "requires": True,
        "dependencies": {
            "tiny-tarball": {
                "version": "1.0.0",
                "resolved": "https://registry.npmjs.org/tiny-tarball/-/tiny-tarball-1.0.0.tgz",
                "integrity": "sha1-u/EC1a5zr+LFUyleD7AiMCFvZbE=",
            }
        },
    }


@pytest.fixture
def lockfile_v2() -> dict[str, Any]:
    """A classic v2 package-lock.json for package-1."""
    return {
        "name": "package-1",
        "version": "1.0.0",
        "lockfileVersion": 2,
        "requires": True,
        "packages": {
            "": {
                "name": "package-1",
                "version": "1.0.0",
                "dependencies": {"tiny-tarball": "^1.0.0"},
            },
            "node_modules/tiny-tarball": {"version": "1.0.0"},
        },
        "dependencies": {"tiny-tarball": {"version": "1.0.0"}},
    }


@pytest.fixture
def root_lockfile_v2() -> dict[str, Any]:
    """A project-root package-lock.json for a two-package workspace."""
    return {
        "name": "root",
        "version": "0.0.0",
        "lockfileVersion": 2,
        "requires": True,
        "packages": {
            "": {
                "name": "root",
                "version": "0.0.0",
                "workspaces": ["packages/*"],
            },
            "node_modules/package-1": {
                "resolved": "packages/package-1",
                "link": True,
            },
            "node_modules/package-2": {
                "resolved": "packages/package-2",
                "link": True,
            },
            "node_modules/tiny-tarball": {"version": "1.0.0"},
            "packages/package-1": {"name": "package-1", "version": "1.0.0"},
            "packages/package-2": {
                "name": "package-2",
                "version": "1.0.0",
                "dependencies": {"package-1": "^1.0.0"},
            },
        },
        "dependencies": {
            "package-1": {"version": "file:packages/package-1"},
            "package-2": {"version": "file:packages/package-2"},
            "tiny-tarball": {"version": "1.0.0"},
        },
    }


@pytest.fixture
def workspace(tmp_path: Path, root_lockfile_v2: dict[str, Any]) -> Path:
    """A workspace root with two packages and a v2 root lockfile."""
    write_json(
        tmp_path / "package.json",
        {"name": "root", "private": True, "workspaces": ["packages/*"]},
    )
    write_json(tmp_path / "package-lock.json", root_lockfile_v2)
    make_package(tmp_path, "package-1")
    make_package(tmp_path, "package-2")
    return tmp_path
