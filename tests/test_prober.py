"""
Tests for the single-target reachability prober.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from powerwatch.probe.platform import LinuxCommands, UnsupportedPlatform
from powerwatch.probe.prober import Prober

LINUX_REPLY = (
    b"PING 10.0.0.1 (10.0.0.1) 56(84) bytes of data.\n"
    b"64 bytes from 10.0.0.1: icmp_seq=1 ttl=64 time=0.301 ms\n"
)
WINDOWS_REPLY = b"Reply from 10.0.0.1: bytes=32 time<1ms TTL=128\r\n"
UNREACHABLE = b"Reply from 10.0.0.254: Destination host unreachable.\r\n"
TTL_EXPIRED = b"Reply from 10.0.0.254: TTL expired in transit.\r\n"


def make_process(output: bytes, returncode: int):
    proc = MagicMock()
    proc.communicate = AsyncMock(return_value=(output, None))
    proc.wait = AsyncMock(return_value=returncode)
    proc.returncode = returncode
    return proc


@pytest.fixture
def prober():
    return Prober(LinuxCommands())


@pytest.mark.asyncio
class TestProber:
    async def test_reply_is_success(self, prober):
        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=make_process(LINUX_REPLY, 0))) as mock_exec:
            assert await prober.probe("10.0.0.1", 1) is True

        args = mock_exec.call_args.args
        assert list(args) == ["ping", "-c", "1", "-W", "1", "10.0.0.1"]

    async def test_uppercase_marker(self, prober):
        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=make_process(WINDOWS_REPLY, 0))):
            assert await prober.probe("10.0.0.1", 1) is True

    async def test_exit_zero_without_reply_is_failure(self, prober):
        # Windows ping exits 0 for "destination host unreachable"
        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=make_process(UNREACHABLE, 0))):
            assert await prober.probe("10.0.0.1", 1) is False

    async def test_ttl_expired_is_failure(self, prober):
        # A router on the path answered, not the target
        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=make_process(TTL_EXPIRED, 0))):
            assert await prober.probe("10.0.0.1", 1) is False

    async def test_non_zero_exit_is_failure(self, prober):
        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=make_process(LINUX_REPLY, 1))):
            assert await prober.probe("10.0.0.1", 1) is False

    async def test_missing_ping_binary(self, prober):
        with patch("asyncio.create_subprocess_exec", AsyncMock(side_effect=FileNotFoundError("ping"))):
            assert await prober.probe("10.0.0.1", 1) is False

    async def test_hung_process_is_killed(self, prober):
        proc = make_process(b"", 0)
        proc.communicate = AsyncMock(side_effect=asyncio.TimeoutError())

        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)):
            assert await prober.probe("10.0.0.1", 1) is False

        proc.kill.assert_called_once()
        proc.wait.assert_awaited_once()

    async def test_unsupported_platform(self):
        prober = Prober(UnsupportedPlatform("plan9"))

        with patch("asyncio.create_subprocess_exec", AsyncMock()) as mock_exec:
            assert await prober.probe("10.0.0.1", 1) is False

        mock_exec.assert_not_called()
