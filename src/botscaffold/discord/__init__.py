from .client import BotClient, DiscordInteraction
from .rest import DiscordApiError, DiscordRestClient

__all__ = ["BotClient", "DiscordApiError", "DiscordInteraction", "DiscordRestClient"]
