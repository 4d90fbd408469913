"""CLI entry point for lockfile-sync."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from lockfile_sync.clients import CLIENTS
from lockfile_sync.config import load_config
from lockfile_sync.errors import LockfileSyncError
from lockfile_sync.pipeline import locate_lockfiles, sync_lockfiles
from lockfile_sync.workspace import discover_packages

root_option = click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Project root containing the workspace.",
)
client_option = click.option(
    "--client",
    type=click.Choice(sorted(CLIENTS)),
    default=None,
    help="Package manager used for the root lockfile (default: from config, npm).",
)


@click.group()
@click.version_option(package_name="lockfile-sync")
@click.option("-v", "--verbose", is_flag=True, help="Show debug diagnostics.")
def cli(verbose: bool) -> None:
    """Keep monorepo lockfiles in step with bumped package versions."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@root_option
@client_option
@click.option(
    "--refresh/--no-refresh",
    default=None,
    help="Run the package manager's lockfile-only refresh (default: on).",
)
def sync(root: Path, client: str | None, refresh: bool | None) -> None:
    """Patch lockfiles to the current package versions, then refresh."""
    root = root.resolve()
    try:
        config = load_config(root, npm_client=client, refresh=refresh)
        packages = discover_packages(root, config.packages)
        result = sync_lockfiles(
            packages, root, config.npm_client, refresh=config.refresh
        )
    except LockfileSyncError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo()
    click.echo(f"✓ Updated {len(result.package_lockfiles)} package lockfile(s)")
    if result.root_lockfile:
        click.echo(f"✓ Updated {result.root_lockfile.relative_to(root)}")
    if result.refreshed_lockfile:
        click.echo(f"✓ Refreshed {result.refreshed_lockfile}")


@cli.command()
@root_option
@client_option
def status(root: Path, client: str | None) -> None:
    """Show which lockfiles lockfile-sync would touch."""
    root = root.resolve()
    try:
        config = load_config(root, npm_client=client)
        packages = discover_packages(root, config.packages)
    except LockfileSyncError as exc:
        raise click.ClickException(str(exc)) from exc

    for location in locate_lockfiles(packages, root, config.npm_client):
        mark = "✓" if location.exists_on_disk else "✗"
        click.echo(
            f"{mark} {location.path.relative_to(root)} ({location.kind.value})"
        )
