from __future__ import annotations

import os
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import questionary
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel

from ..logging import setup_logging
from ..scaffold import (
    ScaffoldError,
    ScaffoldOptions,
    default_package_manager,
    parse_domains,
    scaffold_project,
)
from ..scaffold.options import DEFAULT_DOMAIN

_ROCKET = "\N{ROCKET}"


def _should_run_interactive() -> bool:
    if os.environ.get("BOTSCAFFOLD_NO_INTERACTIVE"):
        return False
    return sys.stdin.isatty() and sys.stdout.isatty()


def _ask(question: questionary.Question) -> Any:
    answer = question.ask()
    if answer is None:
        typer.echo("aborted", err=True)
        raise typer.Exit(code=1)
    return answer


def _prompt_project_name(value: str | None, *, interactive: bool) -> str:
    if value is not None and value.strip():
        return value
    if not interactive:
        typer.echo("error: please provide a project name.", err=True)
        typer.echo("usage: botscaffold new <project-name>", err=True)
        raise typer.Exit(code=1)
    return _ask(
        questionary.text(
            "project name:",
            validate=lambda text: bool(text.strip()) or "name cannot be empty",
        )
    )


def _prompt_domains(values: list[str] | None, *, interactive: bool) -> list[str]:
    domains: list[str] = []
    for value in values or []:
        domains.extend(parse_domains(value))
    if domains:
        return domains
    if not interactive:
        return [DEFAULT_DOMAIN]
    raw = _ask(
        questionary.text("command domains (comma separated):", default=DEFAULT_DOMAIN)
    )
    return parse_domains(raw) or [DEFAULT_DOMAIN]


def _prompt_flag(value: bool | None, message: str, *, interactive: bool) -> bool:
    if value is not None:
        return value
    if not interactive:
        return False
    return bool(_ask(questionary.confirm(message, default=False)))


def resolve_options(
    *,
    name: str | None,
    domains: list[str] | None,
    with_prisma: bool | None,
    with_mongo: bool | None,
    minimal: bool,
    install: bool,
    package_manager: str | None,
    interactive: bool,
) -> ScaffoldOptions:
    project_name = _prompt_project_name(name, interactive=interactive)
    resolved_domains = _prompt_domains(domains, interactive=interactive)
    prisma = _prompt_flag(
        with_prisma, "add prisma (postgresql) support?", interactive=interactive
    )
    mongo = _prompt_flag(with_mongo, "add mongodb support?", interactive=interactive)
    try:
        return ScaffoldOptions(
            project_name=project_name,
            domains=resolved_domains,
            with_prisma=prisma,
            with_mongo=mongo,
            minimal=minimal,
            install=install,
            package_manager=package_manager or default_package_manager(),
        )
    except ValidationError as exc:
        for error in exc.errors():
            typer.echo(f"error: {error['msg']}", err=True)
        raise typer.Exit(code=1) from exc


def render_next_steps(console: Console, project_dir: Path, options: ScaffoldOptions) -> None:
    run = "uv run " if options.package_manager == "uv" else ""
    lines = [
        f"[bold]cd[/] {options.project_name}",
        "edit [cyan].env[/] with your [cyan]BOT_TOKEN[/] and [cyan]CLIENT_ID[/]",
    ]
    if not options.install:
        install = "uv sync" if options.package_manager == "uv" else "pip install -e ."
        lines.append(f"[bold]{install}[/]")
    lines.append(f"[bold]{run}deploy[/]")
    lines.append(f"[bold]{run}dev[/]")
    body = "\n".join(f"[bold yellow]{idx}.[/] {line}" for idx, line in enumerate(lines, 1))
    console.print(
        Panel(
            body,
            title=f'[bold]project "{options.project_name}" is ready[/]',
            subtitle=f"{_ROCKET} {project_dir}",
            border_style="green",
            padding=(1, 2),
            expand=False,
        )
    )


def run_new(
    options: ScaffoldOptions,
    *,
    cwd: Path,
    scaffold_fn: Callable[..., Path] = scaffold_project,
) -> Path:
    console = Console(stderr=True)
    console.print(f"{_ROCKET} creating [bold]{options.project_name}[/]...")
    try:
        project_dir = scaffold_fn(options, cwd=cwd)
    except ScaffoldError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    render_next_steps(console, project_dir, options)
    return project_dir


def new(
    name: str | None = typer.Argument(None, help="Project directory name."),
    domain: list[str] | None = typer.Option(
        None,
        "--domain",
        "-d",
        help="Command domain (repeatable or comma separated).",
    ),
    with_prisma: bool | None = typer.Option(
        None, "--with-prisma/--no-prisma", help="Add Prisma support (PostgreSQL)."
    ),
    with_mongo: bool | None = typer.Option(
        None, "--with-mongo/--no-mongo", help="Add MongoDB support."
    ),
    minimal: bool = typer.Option(
        False, "--minimal", help="Skip services, middlewares, utils and the Makefile."
    ),
    install: bool = typer.Option(
        True, "--install/--no-install", help="Install dependencies after generating."
    ),
    package_manager: str | None = typer.Option(
        None, "--package-manager", help="Installer to use: uv or pip."
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Accept defaults, never prompt."),
    debug: bool = typer.Option(False, "--debug/--no-debug", help="Verbose logging."),
) -> None:
    """Create a new Discord bot project."""
    setup_logging(debug=debug, cache_logger_on_first_use=False)
    options = resolve_options(
        name=name,
        domains=domain,
        with_prisma=with_prisma,
        with_mongo=with_mongo,
        minimal=minimal,
        install=install,
        package_manager=package_manager,
        interactive=not yes and _should_run_interactive(),
    )
    run_new(options, cwd=Path.cwd())
