"""
edgekit CLI Package.

- domains.py: domain detection, validation, planning and deployment
- utils.py: version output and logging setup
"""

from typing import Annotated

import typer

from edgekit.cli.domains import domains_app
from edgekit.cli.utils import configure_logging, version_callback

app = typer.Typer(
    name="edgekit",
    help="Deployment orchestration for multi-domain edge services.",
    no_args_is_help=True,
)
app.add_typer(domains_app, name="domains")


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    configure_logging(verbose)


def main() -> None:
    """Console script entry point."""
    app()


__all__ = ["app", "main", "domains_app"]
