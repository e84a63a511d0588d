from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from ghinst.cli.commands import install, purge, version
from ghinst.internal.config import Settings
from ghinst.internal.constants import ENV_INSTALL_ROOT
from ghinst.internal.logging import setup_logging

app = typer.Typer(
    name="ghinst",
    help="Install prebuilt binaries from GitHub releases.",
    add_completion=False,
)
err_console = Console(stderr=True, highlight=False, soft_wrap=True)

TARGET_METAVAR = "OWNER/REPO[@VERSION]"


def _version_callback(value: bool) -> None:
    if value:
        version.version()
        raise typer.Exit()


@app.command()
def main(
    target: Optional[str] = typer.Argument(
        None,
        metavar=TARGET_METAVAR,
        help="Repository to install from, optionally pinned to a release tag.",
        show_default=False,
    ),
    purge_old: bool = typer.Option(
        False, "--purge", help="Remove all but the most recently installed version."
    ),
    root: Optional[Path] = typer.Option(
        None,
        "--root",
        envvar=ENV_INSTALL_ROOT,
        help="Install root directory.",
        show_default=False,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr."),
    show_version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show the ghinst version and exit.",
    ),
):
    """
    Install OWNER/REPO's release binary for this platform and link it into <root>/bin.
    """
    if not target:
        err_console.print(f"[red]error:[/red] missing {escape(TARGET_METAVAR)} argument")
        raise typer.Exit(1)

    settings = Settings.from_env(install_root=root)
    setup_logging("DEBUG" if verbose else settings.log_level, log_file_path=settings.log_file)

    if purge_old:
        purge.purge(target, settings)
    else:
        install.install(target, settings)


if __name__ == "__main__":
    app()
