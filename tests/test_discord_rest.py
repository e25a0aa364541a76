import json

import httpx
import pytest

from botscaffold.discord.rest import DiscordApiError, DiscordRestClient

pytestmark = pytest.mark.anyio


def _client(handler) -> tuple[DiscordRestClient, httpx.AsyncClient]:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return DiscordRestClient("secret-token", "1234", client=http), http


async def test_put_commands_global_url_and_auth() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        body = json.loads(request.content)
        return httpx.Response(200, json=[dict(item, id="1") for item in body])

    client, http = _client(handler)
    try:
        result = await client.put_commands([{"name": "ping", "description": "p", "type": 1}])
    finally:
        await http.aclose()

    assert len(seen) == 1
    request = seen[0]
    assert request.method == "PUT"
    assert str(request.url) == "https://discord.com/api/v10/applications/1234/commands"
    assert request.headers["Authorization"] == "Bot secret-token"
    assert result == [{"name": "ping", "description": "p", "type": 1, "id": "1"}]


async def test_put_commands_guild_url() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, json=[])

    client, http = _client(handler)
    try:
        await client.put_commands([], guild_id="42")
    finally:
        await http.aclose()

    assert seen == ["https://discord.com/api/v10/applications/1234/guilds/42/commands"]


async def test_http_error_raises_with_status_and_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"message": "Invalid Form Body", "code": 50035})

    client, http = _client(handler)
    try:
        with pytest.raises(DiscordApiError) as exc_info:
            await client.put_commands([{"name": "BAD"}])
    finally:
        await http.aclose()

    assert exc_info.value.status == 400
    assert exc_info.value.body["code"] == 50035


async def test_network_error_raises_api_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client, http = _client(handler)
    try:
        with pytest.raises(DiscordApiError, match="connection refused"):
            await client.get_commands()
    finally:
        await http.aclose()


async def test_close_leaves_injected_client_open() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[])

    client, http = _client(handler)
    await client.close()
    assert not http.is_closed
    await http.aclose()


def test_rejects_empty_credentials() -> None:
    with pytest.raises(ValueError, match="token"):
        DiscordRestClient("", "1234")
    with pytest.raises(ValueError, match="application id"):
        DiscordRestClient("token", "")
