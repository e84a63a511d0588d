from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ghinst.adapters.storage_fs import FileSystemInstaller
from ghinst.cli.client import ReleaseClient
from ghinst.internal.config import Settings
from ghinst.internal.logging import get_logger
from ghinst.kernel.archive import extract_binary
from ghinst.kernel.contracts import InstallTarget, PlatformKey, Release
from ghinst.kernel.errors import GhinstError, NoMatchingAssetError
from ghinst.kernel.platforms import current_platform
from ghinst.kernel.selection import platform_phrases, select_asset
from ghinst.kernel.targets import parse_target

logger = get_logger(__name__)
console = Console(highlight=False, soft_wrap=True)
err_console = Console(stderr=True, highlight=False, soft_wrap=True)


def install_release(
    target: InstallTarget,
    settings: Settings,
    platform_key: Optional[PlatformKey] = None,
) -> tuple[Release, Path]:
    """
    Resolve, download, extract and install one release.
    Returns the release and the published symlink path.
    """
    platform_key = platform_key or current_platform()
    # Unsupported hosts fail before any network call
    platform_phrases(platform_key.os, platform_key.arch)

    client = ReleaseClient(api_url=settings.api_url, token=settings.token)

    release = client.fetch_release(target.owner, target.repo, target.tag)
    asset = select_asset(release.assets, platform_key.os, platform_key.arch)
    logger.info("Selected asset", asset=asset.name, platform=str(platform_key))

    data = client.download(asset.url)
    payload = extract_binary(data, asset.name)

    installer = FileSystemInstaller(settings.install_root)
    link_path = installer.install(target.owner, target.repo, release.tag_name, payload)
    return release, link_path


def _print_available_assets(exc: NoMatchingAssetError) -> None:
    if not exc.assets:
        err_console.print("the release has no assets")
        return

    table = Table(title="Available assets")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Size", justify="right", style="green")
    for asset in exc.assets:
        table.add_row(escape(asset.name), f"{asset.size:,}")
    err_console.print(table)


def install(spec: str, settings: Settings) -> None:
    """
    Install the binary published by owner/repo[@version].
    """
    try:
        target = parse_target(spec)
        release, link_path = install_release(target, settings)
    except NoMatchingAssetError as exc:
        err_console.print(f"[red]error:[/red] {escape(str(exc))}")
        _print_available_assets(exc)
        raise typer.Exit(1)
    except GhinstError as exc:
        err_console.print(f"[red]error:[/red] {escape(str(exc))}")
        raise typer.Exit(1)

    console.print(
        f"[green]installed[/green] {escape(target.repo)} ({escape(release.tag_name)}) → {escape(str(link_path))}"
    )
