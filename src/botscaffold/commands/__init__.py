from .deploy import DeployResult, deploy_commands
from .dispatch import dispatch_interaction, register_dispatcher
from .registry import CommandRegistry, LoadError, load_commands
from .types import (
    CommandMeta,
    CommandOption,
    InteractionEvent,
    OptionChoice,
    OptionType,
    SlashCommand,
    SlashCommandData,
)

__all__ = [
    "CommandMeta",
    "CommandOption",
    "CommandRegistry",
    "DeployResult",
    "InteractionEvent",
    "LoadError",
    "OptionChoice",
    "OptionType",
    "SlashCommand",
    "SlashCommandData",
    "deploy_commands",
    "dispatch_interaction",
    "load_commands",
    "register_dispatcher",
]
