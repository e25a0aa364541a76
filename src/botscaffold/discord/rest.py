from __future__ import annotations

from typing import Any

import httpx

from ..logging import get_logger

logger = get_logger(__name__)

API_BASE = "https://discord.com/api/v10"


class DiscordApiError(RuntimeError):
    def __init__(self, message: str, *, status: int | None = None, body: Any = None) -> None:
        super().__init__(message)
        self.status = status
        self.body = body


class DiscordRestClient:
    """Minimal REST client for the application command endpoints."""

    def __init__(
        self,
        token: str,
        application_id: str,
        *,
        timeout_s: float = 30,
        base_url: str = API_BASE,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not token:
            raise ValueError("Discord bot token is empty")
        if not application_id:
            raise ValueError("Discord application id is empty")
        self._application_id = application_id
        self._base = base_url.rstrip("/")
        self._headers = {"Authorization": f"Bot {token}"}
        self._client = client or httpx.AsyncClient(timeout=timeout_s)
        self._owns_client = client is None

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> DiscordRestClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def commands_url(self, guild_id: str | None = None) -> str:
        app = f"{self._base}/applications/{self._application_id}"
        if guild_id is None:
            return f"{app}/commands"
        return f"{app}/guilds/{guild_id}/commands"

    async def _request(self, method: str, url: str, json_data: Any = None) -> Any:
        logger.debug("discord.request", method=method, url=url)
        try:
            resp = await self._client.request(
                method, url, json=json_data, headers=self._headers
            )
        except httpx.HTTPError as e:
            logger.error(
                "discord.network_error",
                method=method,
                url=url,
                error=str(e),
                error_type=e.__class__.__name__,
            )
            raise DiscordApiError(f"{method} {url} failed: {e}") from e

        if resp.is_error:
            body: Any
            try:
                body = resp.json()
            except ValueError:
                body = resp.text
            logger.error(
                "discord.http_error",
                method=method,
                status=resp.status_code,
                url=url,
                body=body,
            )
            raise DiscordApiError(
                f"{method} {url} returned {resp.status_code}: {body}",
                status=resp.status_code,
                body=body,
            )

        if resp.status_code == 204 or not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise DiscordApiError(
                f"{method} {url} returned invalid JSON: {e}",
                status=resp.status_code,
                body=resp.text,
            ) from e

    async def put_commands(
        self,
        commands: list[dict[str, Any]],
        *,
        guild_id: str | None = None,
    ) -> list[dict[str, Any]]:
        """Replace every command in the global or guild catalog."""
        result = await self._request("PUT", self.commands_url(guild_id), commands)
        if not isinstance(result, list):
            return []
        return result

    async def get_commands(self, *, guild_id: str | None = None) -> list[dict[str, Any]]:
        result = await self._request("GET", self.commands_url(guild_id))
        if not isinstance(result, list):
            return []
        return result
