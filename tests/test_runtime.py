from pathlib import Path

import pytest

from botscaffold import runtime
from botscaffold.commands import CommandRegistry, LoadError
from botscaffold.config import BotSettings, ConfigError
from tests.fakes import FakeCatalog, command_source, make_command

pytestmark = pytest.mark.anyio


def _settings(**overrides) -> BotSettings:
    values = {
        "bot_token": "token",
        "client_id": "123",
        "guild_id": "456",
        "_env_file": None,
    }
    values.update(overrides)
    return BotSettings(**values)


class FakeBot:
    instances: list["FakeBot"] = []

    def __init__(self, token: str) -> None:
        self.token = token
        self.handler = None
        self.ready_callbacks = []
        self.closed = False
        self.user = None
        FakeBot.instances.append(self)

    def set_interaction_handler(self, handler) -> None:
        self.handler = handler

    def on_ready(self, callback) -> None:
        self.ready_callbacks.append(callback)

    async def start(self) -> None:
        for callback in self.ready_callbacks:
            await callback()

    async def wait_closed(self) -> None:
        return None

    async def close(self) -> None:
        self.closed = True


async def test_deploy_registry_uses_given_client(fake_catalog: FakeCatalog) -> None:
    registry = CommandRegistry([make_command("ping")])

    result = await runtime.deploy_registry(registry, _settings(), rest=fake_catalog)

    assert result.ok
    assert result.commands == ("ping",)
    assert fake_catalog.calls[0][1] == "456"


async def test_deploy_registry_carries_load_errors(fake_catalog: FakeCatalog) -> None:
    errors = (LoadError("general", "broken.py", "boom"),)
    registry = CommandRegistry([make_command("ping")], errors=errors)

    result = await runtime.deploy_registry(registry, _settings(), rest=fake_catalog)

    assert result.ok
    assert result.load_errors == errors


async def test_deploy_requires_credentials(domains_root: Path) -> None:
    with pytest.raises(ConfigError, match="BOT_TOKEN"):
        await runtime.deploy(["general"], root=domains_root, settings=_settings(bot_token=None))


async def test_serve_registers_dispatcher_and_deploys_on_ready(
    monkeypatch, domains_root: Path, write_command
) -> None:
    write_command("general", "ping.py", command_source("ping"))
    deployed: list[list[str]] = []

    async def fake_deploy_registry(registry, settings, *, rest=None):
        deployed.append(registry.names())

    FakeBot.instances = []
    monkeypatch.setattr(runtime, "BotClient", FakeBot)
    monkeypatch.setattr(runtime, "deploy_registry", fake_deploy_registry)

    await runtime.serve(["general"], root=domains_root, settings=_settings())

    bot = FakeBot.instances[0]
    assert bot.token == "token"
    assert bot.handler is not None
    assert bot.closed
    assert deployed == [["ping"]]
