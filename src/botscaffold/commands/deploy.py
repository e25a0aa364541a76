"""Push the local command set to the remote command catalog.

Deploying is a full replace: commands registered remotely but missing from
the local registry are deleted by the platform.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from ..config import BotSettings
from ..logging import get_logger
from .registry import LoadError
from .types import SlashCommand

logger = get_logger(__name__)

GLOBAL_SCOPE = "global"
GUILD_SCOPE = "guild"


class CommandCatalog(Protocol):
    async def put_commands(
        self,
        commands: list[dict[str, Any]],
        *,
        guild_id: str | None = None,
    ) -> Any: ...


@dataclass(frozen=True, slots=True)
class DeployResult:
    ok: bool
    scope: str
    commands: tuple[str, ...] = ()
    skipped: bool = False
    error: str | None = None
    remote: list[dict[str, Any]] = field(default_factory=list)
    # command files skipped while building the registry
    load_errors: tuple[LoadError, ...] = ()


async def deploy_commands(
    commands: Mapping[str, SlashCommand],
    config: BotSettings,
    *,
    catalog: CommandCatalog,
    log: Any | None = None,
) -> DeployResult:
    log = log or logger
    scope = GLOBAL_SCOPE if config.use_global_commands else GUILD_SCOPE
    guild_id = None if config.use_global_commands else config.guild_id

    if scope == GUILD_SCOPE and not guild_id:
        error = "GUILD_ID must be set in .env or config to deploy guild commands"
        log.error("deploy.missing_guild_id", error=error)
        return DeployResult(ok=False, scope=scope, error=error)

    body = [command.data.to_payload() for command in commands.values()]
    names = tuple(item["name"] for item in body)
    log.info("deploy.scope", scope=scope, guild_id=guild_id)
    if not body:
        log.warning("deploy.nothing_to_deploy")
        return DeployResult(ok=True, scope=scope, skipped=True)

    log.info("deploy.commands", commands=list(names))
    try:
        remote = await catalog.put_commands(body, guild_id=guild_id)
    except Exception as exc:
        log.error(
            "deploy.failed",
            scope=scope,
            error=str(exc),
            error_type=exc.__class__.__name__,
        )
        return DeployResult(ok=False, scope=scope, commands=names, error=str(exc))

    log.info("deploy.succeeded", scope=scope, count=len(names))
    return DeployResult(
        ok=True,
        scope=scope,
        commands=names,
        remote=remote if isinstance(remote, list) else [],
    )
