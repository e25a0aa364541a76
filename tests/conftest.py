from collections.abc import Callable, Iterator
from pathlib import Path
from textwrap import dedent

import pytest
import structlog

from tests.fakes import FakeCatalog, FakeSource


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    # CLI tests configure logging against CliRunner streams that close afterwards
    yield
    structlog.reset_defaults()


@pytest.fixture
def fake_catalog() -> FakeCatalog:
    return FakeCatalog()


@pytest.fixture
def fake_source() -> FakeSource:
    return FakeSource()


@pytest.fixture
def domains_root(tmp_path: Path) -> Path:
    root = tmp_path / "domains"
    root.mkdir()
    return root


@pytest.fixture
def write_command(domains_root: Path) -> Callable[[str, str, str], Path]:
    def _write(domain: str, filename: str, source: str) -> Path:
        directory = domains_root / domain / "commands"
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / filename
        path.write_text(dedent(source), encoding="utf-8")
        return path

    return _write

