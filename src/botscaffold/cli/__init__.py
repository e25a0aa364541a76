from __future__ import annotations

import typer

from .. import __version__
from .bot import deploy, discover_domains, run
from .new import new, resolve_options, run_new


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


def app_main(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show the version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Scaffold Discord bots with domain-based slash commands."""


def create_app() -> typer.Typer:
    app = typer.Typer(
        add_completion=False,
        no_args_is_help=True,
        help="Scaffold Discord bots with domain-based slash commands.",
    )
    app.command(name="new")(new)
    app.command(name="deploy")(deploy)
    app.command(name="run")(run)
    app.callback()(app_main)
    return app


def main() -> None:
    app = create_app()
    app()


__all__ = [
    "create_app",
    "discover_domains",
    "main",
    "resolve_options",
    "run_new",
]
