"""Package manager adapters for refreshing the project-root lockfile.

Each client knows where its lockfile lives and how to ask the tool for a
lockfile-only update, i.e. regenerate the lockfile from the (already bumped)
package.json manifests without touching node_modules.

Process spawning is injected through ``runner`` so callers and tests can
substitute it; it defaults to :func:`lockfile_sync.shell.run`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from . import shell
from .errors import ExternalToolError, LockfileWriteError, UnsupportedClientError
from .lockfile import NPM_LOCKFILE, file_exists
from .models import LockfileKind, LockfileLocation
from .shell import Runner
from .versions import version_at_least

NPM_SHRINKWRAP = "npm-shrinkwrap.json"
PNPM_LOCKFILE = "pnpm-lock.yaml"
YARN_LOCKFILE = "yarn.lock"

# First npm release that supports `npm install --package-lock-only` for
# workspaces without touching node_modules.
NPM_INSTALL_LOCKFILE_ONLY_MIN = "8.5.0"


class PackageManagerClient:
    """Base class for the npm, pnpm and yarn adapters.

    Attributes:
        name: Executable name of the package manager.
        lockfile_name: Canonical lockfile name at the project root.
        lockfile_kind: Kind reported for the root lockfile.
    """

    name: str = ""
    lockfile_name: str = ""
    lockfile_kind: LockfileKind = LockfileKind.NPM_MODERN_ROOT

    def __init__(
        self,
        runner: Runner | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.runner = runner or shell.run
        self.logger = logger or logging.getLogger(__name__)

    def root_lockfile(self, cwd: Path | str) -> LockfileLocation:
        """Describe where this client's lockfile is expected under cwd."""
        path = Path(cwd) / self.lockfile_name
        return LockfileLocation(
            path=path, kind=self.lockfile_kind, exists_on_disk=file_exists(path)
        )

    def install_lockfile_only(self, cwd: Path | str) -> str | None:
        """Refresh the root lockfile in cwd.

        Returns:
            The lockfile name that was produced, or None if nothing was.

        Raises:
            ExternalToolError: If the package manager fails.
        """
        raise NotImplementedError


class NpmClient(PackageManagerClient):
    """npm: `install --package-lock-only`, or `shrinkwrap` on npm < 8.5.0."""

    name = "npm"
    lockfile_name = NPM_LOCKFILE
    lockfile_kind = LockfileKind.NPM_MODERN_ROOT

    def __init__(
        self,
        runner: Runner | None = None,
        logger: logging.Logger | None = None,
        version_probe: Callable[[], str] | None = None,
    ) -> None:
        super().__init__(runner=runner, logger=logger)
        self.version_probe = version_probe or self._probe_version

    def _probe_version(self) -> str:
        return self.runner("npm", "--version").stdout.strip()

    def install_lockfile_only(self, cwd: Path | str) -> str:
        npm_version = self.version_probe()
        self.logger.debug("Detected npm %s", npm_version)

        try:
            use_install = version_at_least(npm_version, NPM_INSTALL_LOCKFILE_ONLY_MIN)
        except ValueError as exc:
            raise ExternalToolError(["npm", "--version"], 0, npm_version) from exc

        if use_install:
            self.runner("npm", "install", "--package-lock-only", cwd=cwd)
        else:
            # Older npm can only regenerate the lock through shrinkwrap, which
            # writes npm-shrinkwrap.json instead of package-lock.json.
            self.runner("npm", "shrinkwrap", "--package-lock-only", cwd=cwd)
            lockfile = Path(cwd) / NPM_LOCKFILE
            try:
                (Path(cwd) / NPM_SHRINKWRAP).rename(lockfile)
            except OSError as exc:
                raise LockfileWriteError(lockfile, exc.strerror or str(exc)) from exc

        return NPM_LOCKFILE


class PnpmClient(PackageManagerClient):
    """pnpm: `install --lockfile-only --fix-lockfile`, root lockfile only."""

    name = "pnpm"
    lockfile_name = PNPM_LOCKFILE
    lockfile_kind = LockfileKind.PNPM

    def install_lockfile_only(self, cwd: Path | str) -> str | None:
        # pnpm only ever keeps a single lockfile at the workspace root.
        if not file_exists(Path(cwd) / PNPM_LOCKFILE):
            self.logger.warning(
                'we could not sync or locate "%s" by using "%s" client at location %s',
                PNPM_LOCKFILE,
                self.name,
                cwd,
            )
            return None

        self.runner("pnpm", "install", "--lockfile-only", "--fix-lockfile", cwd=cwd)
        return PNPM_LOCKFILE


class YarnClient(PackageManagerClient):
    """yarn (berry): `install --mode update-lockfile`."""

    name = "yarn"
    lockfile_name = YARN_LOCKFILE
    lockfile_kind = LockfileKind.YARN

    def install_lockfile_only(self, cwd: Path | str) -> str:
        self.runner("yarn", "install", "--mode", "update-lockfile", cwd=cwd)
        return YARN_LOCKFILE


CLIENTS: dict[str, type[PackageManagerClient]] = {
    "npm": NpmClient,
    "pnpm": PnpmClient,
    "yarn": YarnClient,
}


def get_client(
    name: str,
    runner: Runner | None = None,
    logger: logging.Logger | None = None,
    version_probe: Callable[[], str] | None = None,
) -> PackageManagerClient:
    """Build the adapter for a package manager name.

    Args:
        name: One of "npm", "pnpm" or "yarn".
        runner: Process runner to inject (defaults to shell.run).
        logger: Logger for diagnostics (defaults to this module's logger).
        version_probe: npm only; returns the installed npm version.

    Raises:
        UnsupportedClientError: For any other name.
    """
    if name not in CLIENTS:
        raise UnsupportedClientError(name)
    if name == "npm":
        return NpmClient(runner=runner, logger=logger, version_probe=version_probe)
    return CLIENTS[name](runner=runner, logger=logger)
