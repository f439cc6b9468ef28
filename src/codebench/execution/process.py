"""Async subprocess helper shared by adapters and the lint validator."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessResult:
    """Exit status and decoded output of a finished subprocess."""

    returncode: int
    stdout: str
    stderr: str


async def run_process(
    cmd: list[str],
    cwd: Path | None = None,
    stdin: str | None = None,
    timeout_ms: int | None = None,
) -> ProcessResult:
    """Run ``cmd`` to completion and capture its output.

    A child that has not exited when this returns, whether by timeout or
    by cancellation of the awaiting task, is killed and reaped.

    Args:
        cmd: Executable and arguments. No shell is involved.
        cwd: Working directory for the process.
        stdin: Text written to the process's stdin, which is then closed.
        timeout_ms: Deadline in milliseconds; None waits indefinitely.

    Returns:
        ProcessResult with the exit code and UTF-8 decoded output.

    Raises:
        OSError: If the executable cannot be spawned.
        TimeoutError: If the deadline elapses.
    """
    logger.debug("Running %s (cwd=%s, timeout_ms=%s)", cmd[0], cwd, timeout_ms)
    proc = await asyncio.create_subprocess_exec(
        *cmd,
        cwd=cwd,
        stdin=asyncio.subprocess.PIPE if stdin is not None else asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    payload = stdin.encode("utf-8") if stdin is not None else None
    timeout = timeout_ms / 1000 if timeout_ms is not None else None
    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(payload), timeout)
    except asyncio.TimeoutError:
        raise TimeoutError(f"{cmd[0]} timed out after {timeout_ms}ms") from None
    finally:
        # Reached with the child still running on timeout or cancellation.
        if proc.returncode is None:
            proc.kill()
            await proc.wait()

    return ProcessResult(
        returncode=proc.returncode if proc.returncode is not None else -1,
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
    )
