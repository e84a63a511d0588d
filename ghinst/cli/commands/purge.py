from rich.console import Console
from rich.markup import escape
import typer

from ghinst.adapters.storage_fs import FileSystemInstaller
from ghinst.internal.config import Settings
from ghinst.internal.logging import get_logger
from ghinst.kernel.errors import GhinstError
from ghinst.kernel.targets import parse_target

logger = get_logger(__name__)
console = Console(highlight=False, soft_wrap=True)
err_console = Console(stderr=True, highlight=False, soft_wrap=True)


def purge(spec: str, settings: Settings) -> None:
    """
    Remove all but the most recently installed version of owner/repo.
    """
    try:
        target = parse_target(spec)
        installer = FileSystemInstaller(settings.install_root)
        removed = installer.purge(target.owner, target.repo)
    except GhinstError as exc:
        err_console.print(f"[red]error:[/red] {escape(str(exc))}")
        raise typer.Exit(1)

    if not removed:
        console.print(f"nothing to purge for {escape(target.owner)}/{escape(target.repo)}")
        return

    for path in removed:
        console.print(f"removed {escape(str(path))}")
