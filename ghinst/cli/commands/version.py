import importlib.metadata

import typer


def version():
    """
    Show the ghinst version.
    """
    try:
        # Read from installed package metadata; only works once the package is installed
        package_version = importlib.metadata.version("ghinst")
    except importlib.metadata.PackageNotFoundError:
        typer.echo("ghinst is not installed or version metadata not found.", err=True)
        raise typer.Exit(1)

    typer.echo(f"ghinst {package_version}")
