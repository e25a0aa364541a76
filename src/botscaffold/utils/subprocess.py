"""Child processes for dependency installs.

Installers run in their own session so that stopping one (Ctrl-C, a
cancelled task) also stops whatever it spawned.
"""

from __future__ import annotations

import os
import signal
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import anyio
from anyio.abc import Process

from ..logging import get_logger

logger = get_logger(__name__)

STOP_GRACE_S = 2.0


def _send(proc: Process, sig: signal.Signals) -> None:
    if proc.returncode is not None:
        return
    try:
        if os.name == "posix":
            os.killpg(proc.pid, sig)
        elif sig == signal.SIGTERM:
            proc.terminate()
        else:
            proc.kill()
    except ProcessLookupError:
        return
    except OSError as exc:
        logger.debug(
            "subprocess.signal_failed",
            pid=proc.pid,
            signal=sig.name,
            error=str(exc),
            error_type=exc.__class__.__name__,
        )
        proc.kill()


async def stop_process(proc: Process, *, grace_s: float = STOP_GRACE_S) -> None:
    """SIGTERM the process group, then SIGKILL once ``grace_s`` runs out."""
    _send(proc, signal.SIGTERM)
    with anyio.move_on_after(grace_s):
        await proc.wait()
        return
    logger.warning("subprocess.kill", pid=proc.pid, grace_s=grace_s)
    _send(proc, getattr(signal, "SIGKILL", signal.SIGTERM))
    await proc.wait()


@asynccontextmanager
async def manage_subprocess(
    cmd: Sequence[str], *, grace_s: float = STOP_GRACE_S, **kwargs: Any
) -> AsyncIterator[Process]:
    if os.name == "posix":
        kwargs.setdefault("start_new_session", True)
    proc = await anyio.open_process(list(cmd), **kwargs)
    try:
        yield proc
    finally:
        if proc.returncode is None:
            with anyio.CancelScope(shield=True):
                await stop_process(proc, grace_s=grace_s)


async def run_inherited(cmd: Sequence[str], *, cwd: Path) -> int:
    """Run an installer with the terminal's stdio and return its exit code."""
    logger.debug("subprocess.run", cmd=" ".join(cmd), cwd=str(cwd))
    async with manage_subprocess(
        cmd, cwd=cwd, stdin=None, stdout=None, stderr=None
    ) as proc:
        code = await proc.wait()
    logger.debug("subprocess.exited", cmd=cmd[0], code=code)
    return code
