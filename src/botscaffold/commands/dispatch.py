from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Protocol

from ..logging import bound_context, get_logger
from .types import InteractionEvent, SlashCommand

logger = get_logger(__name__)

NOT_FOUND_MESSAGE = "Command not found."
FAILURE_MESSAGE = "\N{CROSS MARK} Something went wrong."

InteractionHandler = Callable[[InteractionEvent], Awaitable[None]]


class InteractionSource(Protocol):
    def set_interaction_handler(self, handler: InteractionHandler) -> None: ...


async def _send_failure(event: InteractionEvent) -> None:
    if event.replied or event.deferred:
        await event.edit_reply(FAILURE_MESSAGE)
    else:
        await event.reply(FAILURE_MESSAGE, ephemeral=True)


async def dispatch_interaction(
    commands: Mapping[str, SlashCommand],
    event: InteractionEvent,
    *,
    log: Any | None = None,
) -> None:
    """Route one interaction to its command. Never raises."""
    log = log or logger
    if not event.is_chat_input_command():
        return

    name = event.command_name
    with bound_context(command=name, user_id=event.user_id):
        command = commands.get(name)
        if command is None:
            log.warning("dispatch.unknown_command", command=name)
            try:
                await event.reply(NOT_FOUND_MESSAGE, ephemeral=True)
            except Exception as exc:
                log.error(
                    "dispatch.reply_failed",
                    command=name,
                    error=str(exc),
                    error_type=exc.__class__.__name__,
                )
            return

        log.info("dispatch.triggered", command=name, user=event.user_tag)
        try:
            await command.execute(event)
        except Exception as exc:
            log.error(
                "dispatch.command_failed",
                command=name,
                error=str(exc),
                error_type=exc.__class__.__name__,
            )
            try:
                await _send_failure(event)
            except Exception as reply_exc:
                log.error(
                    "dispatch.reply_failed",
                    command=name,
                    error=str(reply_exc),
                    error_type=reply_exc.__class__.__name__,
                )
            return

        log.info("dispatch.completed", command=name, user=event.user_tag)


def register_dispatcher(
    commands: Mapping[str, SlashCommand],
    source: InteractionSource,
    *,
    log: Any | None = None,
) -> InteractionHandler:
    """Subscribe command dispatch on ``source`` and return the handler."""

    async def handle(event: InteractionEvent) -> None:
        await dispatch_interaction(commands, event, log=log)

    source.set_interaction_handler(handle)
    (log or logger).info("dispatch.ready", commands=len(commands))
    return handle
