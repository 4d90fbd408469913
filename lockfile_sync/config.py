"""Configuration loading.

Settings live in an optional ``lockfile-sync.toml`` at the project root,
parsed with tomlkit:

    [lockfile-sync]
    npm-client = "pnpm"
    packages = ["packages/*"]
    refresh = true

Workspace globs fall back to the ``workspaces`` field of the root
package.json, then to ``packages/*``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import tomlkit
from pydantic import BaseModel, Field, ValidationError
from tomlkit.exceptions import ParseError

from .clients import CLIENTS
from .errors import ConfigError

CONFIG_FILE = "lockfile-sync.toml"
DEFAULT_PACKAGE_GLOBS = ["packages/*"]


class SyncConfig(BaseModel):
    """Resolved settings for one sync run.

    Attributes:
        npm_client: Package manager used for the root refresh.
        packages: Glob patterns (relative to the root) of workspace packages.
        refresh: Whether to run the client's lockfile-only refresh.
    """

    npm_client: str = "npm"
    packages: list[str] = Field(default_factory=lambda: list(DEFAULT_PACKAGE_GLOBS))
    refresh: bool = True


def load_config_file(path: Path) -> tomlkit.TOMLDocument:
    """Load and parse a TOML config file."""
    try:
        return tomlkit.parse(path.read_text())
    except ParseError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc


def get_workspace_globs(manifest: dict[str, Any]) -> list[str] | None:
    """Extract workspace globs from a root package.json.

    Accepts both the npm/yarn list form (``"workspaces": ["packages/*"]``)
    and the older yarn object form (``"workspaces": {"packages": [...]}``).
    """
    workspaces = manifest.get("workspaces")
    if isinstance(workspaces, dict):
        workspaces = workspaces.get("packages")
    if isinstance(workspaces, list) and workspaces:
        return [str(w) for w in workspaces]
    return None


def load_config(
    root: Path,
    npm_client: str | None = None,
    refresh: bool | None = None,
) -> SyncConfig:
    """Resolve settings from the config file, root package.json and overrides.

    Args:
        root: Project root directory.
        npm_client: Overrides ``npm-client`` from the file when given.
        refresh: Overrides ``refresh`` from the file when given.

    Raises:
        ConfigError: If the file is malformed or names an unknown client.
    """
    settings: dict[str, Any] = {}
    source = "settings"

    config_path = root / CONFIG_FILE
    if config_path.exists():
        doc = load_config_file(config_path)
        table = doc.unwrap().get("lockfile-sync", {})
        if not isinstance(table, dict):
            raise ConfigError(f"[lockfile-sync] in {config_path} must be a table")
        source = str(config_path)
        for key, value in table.items():
            settings[key.replace("-", "_")] = value

    if "packages" not in settings:
        manifest_path = root / "package.json"
        if manifest_path.exists():
            globs = get_workspace_globs(read_manifest(manifest_path))
            if globs:
                settings["packages"] = globs

    # Command line wins over the file
    if npm_client is not None:
        settings["npm_client"] = npm_client
    if refresh is not None:
        settings["refresh"] = refresh

    try:
        config = SyncConfig(**settings)
    except ValidationError as exc:
        raise ConfigError(f"Invalid {source}: {exc}") from exc
    if config.npm_client not in CLIENTS:
        raise ConfigError(
            f'Unknown npm-client "{config.npm_client}" '
            f"(expected one of: {', '.join(CLIENTS)})"
        )
    return config


def read_manifest(path: Path) -> dict[str, Any]:
    """Read a package.json file.

    Raises:
        ConfigError: If the file is not a JSON object.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Could not read {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{path} is not a JSON object")
    return data
