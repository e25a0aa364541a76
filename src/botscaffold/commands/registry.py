"""Discover slash commands from domain directories."""

from __future__ import annotations

import importlib.util
import sys
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import Any

import msgspec

from ..logging import get_logger
from .types import CommandMeta, SlashCommand, SlashCommandData

logger = get_logger(__name__)

COMMANDS_DIRNAME = "commands"
_MODULE_PREFIX = "_botscaffold_commands"


@dataclass(frozen=True, slots=True)
class LoadError:
    domain: str
    file: str
    error: str

    @property
    def location(self) -> str:
        return f"{self.domain}/{self.file}"


class CommandRegistry(Mapping[str, SlashCommand]):
    """Read-only name -> command mapping in discovery order."""

    __slots__ = ("_commands", "_errors")

    def __init__(
        self,
        commands: Iterable[SlashCommand] = (),
        *,
        errors: Iterable[LoadError] = (),
    ) -> None:
        mapping: dict[str, SlashCommand] = {}
        for command in commands:
            mapping[command.name] = command
        self._commands = mapping
        self._errors = tuple(errors)

    def __getitem__(self, name: str) -> SlashCommand:
        return self._commands[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._commands)

    def __len__(self) -> int:
        return len(self._commands)

    def __repr__(self) -> str:
        return f"CommandRegistry({list(self._commands)!r})"

    @property
    def errors(self) -> tuple[LoadError, ...]:
        return self._errors

    def names(self) -> list[str]:
        return list(self._commands)

    def payload(self) -> list[dict[str, Any]]:
        return [command.data.to_payload() for command in self._commands.values()]


def domain_commands_dir(root: Path, domain: str) -> Path:
    return root / domain / COMMANDS_DIRNAME


def _command_files(directory: Path) -> list[Path]:
    return sorted(
        path
        for path in directory.iterdir()
        if path.is_file() and path.suffix == ".py" and not path.name.startswith("_")
    )


def _module_name(domain: str, path: Path) -> str:
    return f"{_MODULE_PREFIX}.{domain}.{path.stem}"


def _import_file(domain: str, path: Path) -> ModuleType:
    name = _module_name(domain, path)
    spec = importlib.util.spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"cannot load module from {path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(name, None)
        raise
    return module


def _describe_import_error(exc: BaseException) -> str:
    if isinstance(exc, SystemExit):
        return f"module exited during import (code {exc.code!r})"
    return str(exc) or exc.__class__.__name__


def _coerce_meta(raw: Any) -> CommandMeta:
    if raw is None:
        return CommandMeta()
    if isinstance(raw, CommandMeta):
        return raw
    if isinstance(raw, Mapping):
        return msgspec.convert(dict(raw), CommandMeta)
    raise TypeError(f"expected CommandMeta or mapping, got {type(raw).__name__}")


def _build_command(domain: str, path: Path, module: ModuleType) -> SlashCommand | str:
    """Return a command, or a reason the module is not one."""
    data = getattr(module, "data", None)
    execute = getattr(module, "execute", None)
    if data is None or execute is None:
        return "missing `data` or `execute`"
    if not isinstance(data, SlashCommandData):
        return f"`data` is {type(data).__name__}, expected SlashCommandData"
    if not callable(execute):
        return "`execute` is not callable"
    try:
        meta = _coerce_meta(getattr(module, "meta", None))
    except (TypeError, msgspec.ValidationError) as exc:
        return f"invalid `meta`: {exc}"
    return SlashCommand(
        data=data,
        execute=execute,
        meta=meta,
        domain=domain,
        source=str(path),
    )


def load_commands(
    domains: Iterable[str],
    *,
    root: Path,
    log: Any | None = None,
) -> CommandRegistry:
    """Scan ``<root>/<domain>/commands/*.py`` for every domain, in order.

    Missing directories are skipped. Files that fail to import or do not
    export ``data`` and ``execute`` are logged, recorded on
    ``registry.errors`` and skipped; the scan always completes.
    """
    log = log or logger
    domains = list(domains)
    root = Path(root)
    log.info("commands.loading", domains=domains, root=str(root))

    loaded: list[SlashCommand] = []
    errors: list[LoadError] = []
    seen: dict[str, str] = {}

    for domain in domains:
        directory = domain_commands_dir(root, domain)
        if not directory.is_dir():
            log.debug("commands.domain_missing", domain=domain, path=str(directory))
            continue
        for path in _command_files(directory):
            try:
                module = _import_file(domain, path)
            except (Exception, SystemExit) as exc:
                error = _describe_import_error(exc)
                log.error(
                    "commands.load_failed",
                    domain=domain,
                    file=path.name,
                    error=error,
                    error_type=exc.__class__.__name__,
                )
                errors.append(LoadError(domain, path.name, error))
                continue

            result = _build_command(domain, path, module)
            if isinstance(result, str):
                log.warning(
                    "commands.invalid", domain=domain, file=path.name, reason=result
                )
                errors.append(LoadError(domain, path.name, result))
                continue

            location = f"{domain}/{path.name}"
            previous = seen.get(result.name)
            if previous is not None:
                log.warning(
                    "commands.duplicate",
                    command=result.name,
                    first=previous,
                    replaced_by=location,
                )
            seen[result.name] = location
            loaded.append(result)
            log.info("commands.loaded", command=result.name, source=location)

    registry = CommandRegistry(loaded, errors=errors)
    log.info(
        "commands.ready",
        count=len(registry),
        domains=len(domains),
        failed=len(errors),
    )
    return registry
