"""Discord gateway client wrapper."""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Awaitable, Callable
from typing import Any

import discord

from ..commands.dispatch import InteractionHandler
from ..logging import get_logger

logger = get_logger(__name__)

ReadyCallback = Callable[[], Awaitable[None]]


class DiscordInteraction:
    """Expose a Pycord interaction through the dispatcher's event contract."""

    def __init__(self, interaction: discord.Interaction) -> None:
        self._interaction = interaction
        self._deferred = False

    @property
    def raw(self) -> discord.Interaction:
        return self._interaction

    def is_chat_input_command(self) -> bool:
        if self._interaction.type != discord.InteractionType.application_command:
            return False
        data = self._interaction.data or {}
        return data.get("type", 1) == 1

    @property
    def command_name(self) -> str:
        data = self._interaction.data or {}
        return str(data.get("name", ""))

    @property
    def user_tag(self) -> str:
        user = self._interaction.user
        return str(user) if user is not None else "unknown"

    @property
    def user_id(self) -> int | str:
        user = self._interaction.user
        return user.id if user is not None else "unknown"

    @property
    def replied(self) -> bool:
        return self._interaction.response.is_done() and not self._deferred

    @property
    def deferred(self) -> bool:
        return self._deferred

    def option(self, name: str, default: Any = None) -> Any:
        data = self._interaction.data or {}
        for item in data.get("options", []) or []:
            if item.get("name") == name:
                return item.get("value", default)
        return default

    async def reply(self, content: str, *, ephemeral: bool = False) -> None:
        await self._interaction.response.send_message(content, ephemeral=ephemeral)

    async def defer(self, *, ephemeral: bool = False) -> None:
        await self._interaction.response.defer(ephemeral=ephemeral)
        self._deferred = True

    async def edit_reply(self, content: str) -> None:
        await self._interaction.edit_original_response(content=content)


class BotClient:
    """Wrapper around a Pycord client that feeds interactions to a handler."""

    def __init__(self, token: str) -> None:
        if not token:
            raise ValueError("Discord bot token is empty")
        self._token = token
        self._interaction_handler: InteractionHandler | None = None
        self._ready_callbacks: list[ReadyCallback] = []
        # Defer client creation until inside async context
        self._client: discord.Client | None = None
        self._ready_event: asyncio.Event | None = None
        self._start_task: asyncio.Task[None] | None = None

    def _ensure_client(self) -> discord.Client:
        if self._client is not None:
            return self._client

        intents = discord.Intents.default()
        intents.guilds = True
        intents.guild_messages = True
        intents.message_content = True
        intents.members = True

        self._client = discord.Client(intents=intents)
        self._ready_event = asyncio.Event()

        @self._client.event
        async def on_ready() -> None:
            assert self._ready_event is not None
            first = not self._ready_event.is_set()
            self._ready_event.set()
            if not first:
                return
            for callback in self._ready_callbacks:
                try:
                    await callback()
                except Exception as exc:
                    logger.exception("bot.ready_callback_failed", error=str(exc))

        @self._client.event
        async def on_interaction(interaction: discord.Interaction) -> None:
            if self._interaction_handler is None:
                return
            await self._interaction_handler(DiscordInteraction(interaction))

        return self._client

    @property
    def client(self) -> discord.Client:
        return self._ensure_client()

    @property
    def user(self) -> discord.ClientUser | None:
        if self._client is None:
            return None
        return self._client.user

    def set_interaction_handler(self, handler: InteractionHandler) -> None:
        self._interaction_handler = handler

    def on_ready(self, callback: ReadyCallback) -> None:
        self._ready_callbacks.append(callback)

    async def start(self) -> None:
        """Log in, connect and wait until the gateway reports ready."""
        client = self._ensure_client()
        assert self._ready_event is not None

        async def _run_client() -> None:
            try:
                await client.start(self._token)
            except asyncio.CancelledError:
                pass

        self._start_task = asyncio.create_task(_run_client(), name="discord-client-start")
        ready = asyncio.create_task(self._ready_event.wait())
        done, _ = await asyncio.wait(
            {ready, self._start_task}, return_when=asyncio.FIRST_COMPLETED
        )
        if ready not in done:
            ready.cancel()
            # login failures surface here
            self._start_task.result()

    async def wait_closed(self) -> None:
        if self._start_task is not None:
            await self._start_task

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            if self._start_task is not None and not self._start_task.done():
                self._start_task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await self._start_task
