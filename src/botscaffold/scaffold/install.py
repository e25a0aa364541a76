from __future__ import annotations

import sys
from collections.abc import Awaitable, Callable
from pathlib import Path

from ..logging import get_logger
from ..utils.subprocess import run_inherited
from .options import InstallError, PackageManager

logger = get_logger(__name__)

CommandRunner = Callable[..., Awaitable[int]]


def install_commands(package_manager: PackageManager) -> list[list[str]]:
    if package_manager == "uv":
        return [["uv", "sync"]]
    return [[sys.executable, "-m", "pip", "install", "-e", "."]]


async def install_dependencies(
    project_dir: Path,
    package_manager: PackageManager,
    *,
    runner: CommandRunner = run_inherited,
) -> None:
    for cmd in install_commands(package_manager):
        display = " ".join(cmd)
        logger.info("install.run", cmd=display, cwd=str(project_dir))
        try:
            code = await runner(cmd, cwd=project_dir)
        except FileNotFoundError as exc:
            raise InstallError(
                f"{cmd[0]} not found; install it or pass --package-manager pip"
            ) from exc
        if code != 0:
            raise InstallError(f"`{display}` exited with status {code}")
