"""Tests for the async subprocess helper."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from codebench.execution.process import run_process


def _make_proc(communicate: AsyncMock, returncode: int | None = None) -> MagicMock:
    proc = MagicMock()
    proc.returncode = returncode
    proc.communicate = communicate
    proc.wait = AsyncMock(return_value=-9)
    return proc


class TestRunProcess:
    """Test run_process with the subprocess factory mocked."""

    @pytest.mark.asyncio
    async def test_success_decodes_output(self) -> None:
        proc = _make_proc(AsyncMock(return_value=(b"out", b"err")), returncode=0)
        with patch("asyncio.create_subprocess_exec", new=AsyncMock(return_value=proc)) as spawn:
            result = await run_process(["agent", "-p", "x"], stdin="hello")

        assert result.returncode == 0
        assert result.stdout == "out"
        assert result.stderr == "err"
        assert spawn.call_args.args == ("agent", "-p", "x")
        proc.communicate.assert_awaited_once_with(b"hello")
        proc.kill.assert_not_called()

    @pytest.mark.asyncio
    async def test_timeout_kills_child(self) -> None:
        proc = _make_proc(AsyncMock(side_effect=asyncio.TimeoutError()))
        with patch("asyncio.create_subprocess_exec", new=AsyncMock(return_value=proc)):
            with pytest.raises(TimeoutError, match="agent timed out after 10ms"):
                await run_process(["agent"], timeout_ms=10)

        proc.kill.assert_called_once()
        proc.wait.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_cancellation_kills_child(self) -> None:
        proc = _make_proc(AsyncMock(side_effect=asyncio.CancelledError()))
        with patch("asyncio.create_subprocess_exec", new=AsyncMock(return_value=proc)):
            with pytest.raises(asyncio.CancelledError):
                await run_process(["agent"])

        proc.kill.assert_called_once()
        proc.wait.assert_awaited_once()
