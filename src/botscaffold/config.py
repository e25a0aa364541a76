from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import AliasChoices, Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ENV_FILE = Path(".env")
DEFAULT_WEBHOOK_PORT = 5001


class ConfigError(RuntimeError):
    pass


class BotSettings(BaseSettings):
    """Environment-sourced settings for a generated bot project."""

    model_config = SettingsConfigDict(
        env_file=DEFAULT_ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    bot_token: SecretStr | None = None
    client_id: str | None = None
    guild_id: str | None = None
    use_global_commands: bool = Field(
        default=False,
        validation_alias=AliasChoices("GLOBAL_COMMANDS", "use_global_commands"),
    )
    webhook_port: int = DEFAULT_WEBHOOK_PORT
    database_url: str | None = None
    mongo_uri: str | None = None
    version: str = Field(
        default="0.0.1",
        validation_alias=AliasChoices("BOT_VERSION", "version"),
    )

    @field_validator(
        "bot_token",
        "client_id",
        "guild_id",
        "database_url",
        "mongo_uri",
        mode="before",
    )
    @classmethod
    def _blank_is_unset(cls, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, int) and not isinstance(value, bool):
            value = str(value)
        if not isinstance(value, str):
            return value
        cleaned = value.strip()
        return cleaned or None

    @field_validator("use_global_commands", mode="before")
    @classmethod
    def _parse_toggle(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower() == "true"
        return value

    @field_validator("webhook_port", mode="before")
    @classmethod
    def _validate_port(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return DEFAULT_WEBHOOK_PORT
        return value

    @property
    def scope(self) -> str:
        return "global" if self.use_global_commands else "guild"

    def token_value(self) -> str | None:
        if self.bot_token is None:
            return None
        return self.bot_token.get_secret_value() or None


def load_bot_settings(env_file: str | Path | None = DEFAULT_ENV_FILE) -> BotSettings:
    if env_file is not None:
        path = Path(env_file).expanduser()
        if path.exists() and not path.is_file():
            raise ConfigError(f"Env path {path} exists but is not a file.") from None
    try:
        return BotSettings(_env_file=env_file)
    except ValidationError as exc:
        raise ConfigError(f"Invalid bot settings: {exc}") from exc


def require_credentials(settings: BotSettings) -> tuple[str, str]:
    token = settings.token_value()
    if token is None:
        raise ConfigError("Missing BOT_TOKEN; set it in .env or the environment.")
    if settings.client_id is None:
        raise ConfigError("Missing CLIENT_ID; set it in .env or the environment.")
    return token, settings.client_id
