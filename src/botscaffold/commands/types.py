"""Command descriptors and the interaction contract used by the dispatcher."""

from __future__ import annotations

import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Protocol

import msgspec

NAME_RE = re.compile(r"^[-_\w]{1,32}$")
MAX_DESCRIPTION = 100
MAX_OPTIONS = 25
MAX_CHOICES = 25

CHAT_INPUT = 1


class OptionType(IntEnum):
    STRING = 3
    INTEGER = 4
    BOOLEAN = 5
    USER = 6
    CHANNEL = 7
    ROLE = 8
    MENTIONABLE = 9
    NUMBER = 10
    ATTACHMENT = 11


def validate_name(name: str, *, label: str = "command") -> None:
    if not NAME_RE.match(name) or name != name.lower():
        raise ValueError(
            f"Invalid {label} name {name!r}; expected 1-32 lowercase "
            "letters, digits, '-' or '_'."
        )


def validate_description(description: str, *, label: str = "command") -> None:
    if not description or len(description) > MAX_DESCRIPTION:
        raise ValueError(
            f"Invalid {label} description {description!r}; expected "
            f"1-{MAX_DESCRIPTION} characters."
        )


class OptionChoice(msgspec.Struct, frozen=True):
    name: str
    value: str | int | float


class CommandOption(msgspec.Struct, frozen=True, omit_defaults=True):
    type: OptionType
    name: str
    description: str
    required: bool = False
    choices: tuple[OptionChoice, ...] = ()

    def __post_init__(self) -> None:
        validate_name(self.name, label="option")
        validate_description(self.description, label="option")
        if len(self.choices) > MAX_CHOICES:
            raise ValueError(f"Option {self.name!r} has more than {MAX_CHOICES} choices.")


class SlashCommandData(msgspec.Struct, frozen=True, omit_defaults=True):
    """Wire shape of a chat-input command definition."""

    name: str
    description: str
    options: tuple[CommandOption, ...] = ()
    type: int = CHAT_INPUT
    default_member_permissions: str | None = None
    nsfw: bool = False

    def __post_init__(self) -> None:
        validate_name(self.name)
        validate_description(self.description)
        if len(self.options) > MAX_OPTIONS:
            raise ValueError(f"Command {self.name!r} has more than {MAX_OPTIONS} options.")
        # required options must precede optional ones
        seen_optional = False
        for option in self.options:
            if not option.required:
                seen_optional = True
            elif seen_optional:
                raise ValueError(
                    f"Required option {option.name!r} of {self.name!r} follows an optional one."
                )

    def to_payload(self) -> dict[str, Any]:
        # a JSON round trip yields plain lists for nested options and choices
        payload = msgspec.json.decode(msgspec.json.encode(self))
        # omit_defaults drops the type, the endpoint expects it
        payload["type"] = self.type
        return payload


class CommandMeta(msgspec.Struct, frozen=True, forbid_unknown_fields=True):
    required_role: str | None = None


class InteractionEvent(Protocol):
    @property
    def command_name(self) -> str: ...

    @property
    def user_tag(self) -> str: ...

    @property
    def user_id(self) -> int | str: ...

    @property
    def replied(self) -> bool: ...

    @property
    def deferred(self) -> bool: ...

    def is_chat_input_command(self) -> bool: ...

    async def reply(self, content: str, *, ephemeral: bool = False) -> None: ...

    async def defer(self, *, ephemeral: bool = False) -> None: ...

    async def edit_reply(self, content: str) -> None: ...


Execute = Callable[[InteractionEvent], Awaitable[None]]


@dataclass(frozen=True, slots=True)
class SlashCommand:
    data: SlashCommandData
    execute: Execute
    meta: CommandMeta = field(default_factory=CommandMeta)
    domain: str | None = None
    source: str | None = None

    @property
    def name(self) -> str:
        return self.data.name
