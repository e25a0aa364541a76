from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from botscaffold.commands import SlashCommand, SlashCommandData


@dataclass
class FakeInteraction:
    command_name: str
    user_tag: str = "tester#0001"
    user_id: int = 42
    chat_input: bool = True
    replied: bool = False
    deferred: bool = False
    fail_replies: bool = False
    replies: list[tuple[str, bool]] = field(default_factory=list)
    edits: list[str] = field(default_factory=list)

    def is_chat_input_command(self) -> bool:
        return self.chat_input

    async def reply(self, content: str, *, ephemeral: bool = False) -> None:
        if self.fail_replies:
            raise RuntimeError("reply failed")
        self.replies.append((content, ephemeral))
        self.replied = True

    async def defer(self, *, ephemeral: bool = False) -> None:
        _ = ephemeral
        self.deferred = True

    async def edit_reply(self, content: str) -> None:
        self.edits.append(content)


@dataclass
class FakeCatalog:
    error: Exception | None = None
    calls: list[tuple[list[dict[str, Any]], str | None]] = field(default_factory=list)

    async def put_commands(
        self,
        commands: list[dict[str, Any]],
        *,
        guild_id: str | None = None,
    ) -> list[dict[str, Any]]:
        self.calls.append((commands, guild_id))
        if self.error is not None:
            raise self.error
        return [dict(item, id=str(idx)) for idx, item in enumerate(commands, 1)]


class FakeSource:
    def __init__(self) -> None:
        self.handler = None

    def set_interaction_handler(self, handler) -> None:
        self.handler = handler


def make_command(name: str, execute=None, *, description: str | None = None) -> SlashCommand:
    async def _noop(event) -> None:
        await event.reply(f"{name} ok")

    return SlashCommand(
        data=SlashCommandData(name=name, description=description or f"{name} command"),
        execute=execute or _noop,
    )


COMMAND_SOURCE = """
from botscaffold.commands import SlashCommandData

data = SlashCommandData(name={name!r}, description={description!r})


async def execute(interaction):
    await interaction.reply({reply!r})
"""


def command_source(name: str, *, description: str = "test command", reply: str = "ok") -> str:
    return COMMAND_SOURCE.format(name=name, description=description, reply=reply)
