from __future__ import annotations

from pathlib import Path

import typer

from ..config import BotSettings, ConfigError, load_bot_settings, require_credentials
from ..logging import get_logger, setup_logging
from ..runtime import run_bot, run_deploy
from ..scaffold.layout import DOMAINS_DIR

logger = get_logger(__name__)

_ROOT_OPTION = typer.Option(
    Path(DOMAINS_DIR),
    "--root",
    help="Directory holding <domain>/commands/ folders.",
)
_DOMAIN_OPTION = typer.Option(
    None,
    "--domain",
    "-d",
    help="Domain to load (repeatable); defaults to every folder under --root.",
)
_ENV_FILE_OPTION = typer.Option(Path(".env"), "--env-file", help="Env file to read.")
_DEBUG_OPTION = typer.Option(False, "--debug/--no-debug", help="Verbose logging.")


def discover_domains(root: Path) -> list[str]:
    if not root.is_dir():
        return []
    return sorted(
        path.name
        for path in root.iterdir()
        if path.is_dir() and not path.name.startswith(("_", "."))
    )


def _resolve_domains(root: Path, domains: list[str] | None) -> list[str]:
    if domains:
        return list(domains)
    found = discover_domains(root)
    if not found:
        typer.echo(f"error: no domains found under {root}", err=True)
        raise typer.Exit(code=1)
    return found


def _load_settings_or_exit(env_file: Path) -> BotSettings:
    try:
        settings = load_bot_settings(env_file)
        require_credentials(settings)
    except ConfigError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    return settings


def deploy(
    root: Path = _ROOT_OPTION,
    domain: list[str] | None = _DOMAIN_OPTION,
    env_file: Path = _ENV_FILE_OPTION,
    debug: bool = _DEBUG_OPTION,
) -> None:
    """Replace the remote command catalog with the local commands."""
    setup_logging(debug=debug, cache_logger_on_first_use=False)
    settings = _load_settings_or_exit(env_file)
    domains = _resolve_domains(root, domain)
    result = run_deploy(domains, root=root, settings=settings)
    for error in result.load_errors:
        typer.echo(f"warning: skipped {error.location}: {error.error}", err=True)
    if not result.ok:
        typer.echo(f"error: deploy failed: {result.error}", err=True)
        raise typer.Exit(code=1)
    if result.skipped:
        typer.echo("no commands to deploy", err=True)
    else:
        typer.echo(f"deployed {len(result.commands)} {result.scope} command(s)")


def run(
    root: Path = _ROOT_OPTION,
    domain: list[str] | None = _DOMAIN_OPTION,
    env_file: Path = _ENV_FILE_OPTION,
    debug: bool = _DEBUG_OPTION,
) -> None:
    """Start the bot: load commands, deploy them and serve interactions."""
    setup_logging(debug=debug)
    settings = _load_settings_or_exit(env_file)
    domains = _resolve_domains(root, domain)
    try:
        run_bot(domains, root=root, settings=settings)
    except KeyboardInterrupt:
        logger.info("bot.shutdown")
