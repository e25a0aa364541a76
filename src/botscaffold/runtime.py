"""Startup and deploy entry points used by generated bot projects."""

from __future__ import annotations

import dataclasses
from collections.abc import Sequence
from functools import partial
from pathlib import Path

import anyio

from .commands import CommandRegistry, DeployResult, deploy_commands, load_commands
from .commands.deploy import CommandCatalog
from .commands.dispatch import register_dispatcher
from .config import BotSettings, require_credentials
from .discord.client import BotClient
from .discord.rest import DiscordRestClient
from .logging import get_logger

logger = get_logger(__name__)


def _warn_skipped(registry: CommandRegistry) -> None:
    if registry.errors:
        logger.warning(
            "commands.skipped_files",
            count=len(registry.errors),
            files=[error.location for error in registry.errors],
        )


async def deploy_registry(
    registry: CommandRegistry,
    settings: BotSettings,
    *,
    rest: CommandCatalog | None = None,
) -> DeployResult:
    if rest is not None:
        result = await deploy_commands(registry, settings, catalog=rest)
    else:
        token, client_id = require_credentials(settings)
        async with DiscordRestClient(token, client_id) as client:
            result = await deploy_commands(registry, settings, catalog=client)
    return dataclasses.replace(result, load_errors=registry.errors)


async def deploy(
    domains: Sequence[str],
    *,
    root: Path,
    settings: BotSettings,
) -> DeployResult:
    token, client_id = require_credentials(settings)
    registry = load_commands(domains, root=root)
    _warn_skipped(registry)
    async with DiscordRestClient(token, client_id) as client:
        return await deploy_registry(registry, settings, rest=client)


async def serve(
    domains: Sequence[str],
    *,
    root: Path,
    settings: BotSettings,
) -> None:
    token, client_id = require_credentials(settings)
    logger.info("bot.starting", version=settings.version)
    registry = load_commands(domains, root=root)
    _warn_skipped(registry)
    bot = BotClient(token)
    register_dispatcher(registry, bot)

    async def _on_ready() -> None:
        async with DiscordRestClient(token, client_id) as rest:
            await deploy_registry(registry, settings, rest=rest)
        user = bot.user
        logger.info(
            "bot.ready",
            user=str(user) if user is not None else "unknown",
            client_id=str(user.id) if user is not None else client_id,
            version=settings.version,
        )

    bot.on_ready(_on_ready)
    try:
        await bot.start()
        logger.info("bot.running")
        await bot.wait_closed()
    finally:
        await bot.close()


def run_deploy(
    domains: Sequence[str], *, root: Path, settings: BotSettings
) -> DeployResult:
    return anyio.run(partial(deploy, list(domains), root=root, settings=settings))


def run_bot(domains: Sequence[str], *, root: Path, settings: BotSettings) -> None:
    anyio.run(partial(serve, list(domains), root=root, settings=settings))
