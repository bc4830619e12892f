"""
Tests for SSH client functionality.

Tests connection setup, command execution and connection cleanup.
"""

import asyncio
from unittest.mock import AsyncMock, patch

import asyncssh
import pytest

from powerwatch.config import HostParams
from powerwatch.ssh.client import SSHClient, SSHCommandResult, SSHConnectionConfig


class TestSSHConnectionConfig:
    """Test SSH connection configuration."""

    def test_basic_config_creation(self):
        config = SSHConnectionConfig(hostname="test.example.com")

        assert config.hostname == "test.example.com"
        assert config.port == 22
        assert config.connect_timeout == 10
        assert config.command_timeout == 30
        assert config.address == "test.example.com:22"

    def test_from_host(self):
        host = HostParams(host="192.168.1.100", port=2222, hostname="nas", username="admin", password="secret")

        config = SSHConnectionConfig.from_host(host, connect_timeout=5)

        assert config.hostname == "192.168.1.100"
        assert config.port == 2222
        assert config.username == "admin"
        assert config.password == "secret"
        assert config.connect_timeout == 5


class TestSSHCommandResult:
    """Test SSH command result handling."""

    def test_successful_result(self):
        result = SSHCommandResult(
            command="echo 'test'",
            exit_code=0,
            stdout="test\n",
            stderr="",
            execution_time=0.1,
            success=True,
        )

        assert result.success is True
        assert result.output == "test"

    def test_result_with_both_outputs(self):
        result = SSHCommandResult(
            command="ls /nonexistent",
            exit_code=2,
            stdout="some output",
            stderr="No such file or directory",
            execution_time=0.2,
            success=False,
        )

        assert result.output == "some output\nNo such file or directory"


@pytest.mark.asyncio
class TestSSHClient:
    """Test SSH client operations."""

    @pytest.fixture
    def ssh_client(self):
        return SSHClient()

    @pytest.fixture
    def config(self):
        return SSHConnectionConfig(hostname="test.com", username="root", password="secret")

    async def test_execute_command_success(self, ssh_client, config, mock_ssh_connection):
        mock_ssh_connection.run.return_value.stdout = "command output"

        with patch("powerwatch.ssh.client.asyncssh.connect", AsyncMock(return_value=mock_ssh_connection)) as mock_connect:
            result = await ssh_client.execute_command(config, "echo 'test'")

        assert result.success is True
        assert result.exit_code == 0
        assert result.stdout == "command output"
        assert result.command == "echo 'test'"
        mock_ssh_connection.run.assert_awaited_once_with("echo 'test'", check=False)

        kwargs = mock_connect.call_args.kwargs
        assert kwargs["host"] == "test.com"
        assert kwargs["port"] == 22
        assert kwargs["username"] == "root"
        assert kwargs["password"] == "secret"
        assert kwargs["known_hosts"] is None

    async def test_execute_command_failure(self, ssh_client, config, mock_ssh_connection):
        mock_ssh_connection.run.return_value.exit_status = 1
        mock_ssh_connection.run.return_value.stderr = "command failed"

        with patch("powerwatch.ssh.client.asyncssh.connect", AsyncMock(return_value=mock_ssh_connection)):
            result = await ssh_client.execute_command(config, "false")

        assert result.success is False
        assert result.exit_code == 1
        assert result.stderr == "command failed"

    async def test_connection_closed_after_command(self, ssh_client, config, mock_ssh_connection):
        with patch("powerwatch.ssh.client.asyncssh.connect", AsyncMock(return_value=mock_ssh_connection)):
            await ssh_client.execute_command(config, "true")

        mock_ssh_connection.close.assert_called_once()
        mock_ssh_connection.wait_closed.assert_awaited_once()

    async def test_connection_closed_when_command_raises(self, ssh_client, config, mock_ssh_connection):
        mock_ssh_connection.run.side_effect = asyncssh.ChannelOpenError(2, "session refused")

        with patch("powerwatch.ssh.client.asyncssh.connect", AsyncMock(return_value=mock_ssh_connection)):
            with pytest.raises(asyncssh.ChannelOpenError):
                await ssh_client.execute_command(config, "true")

        mock_ssh_connection.close.assert_called_once()

    async def test_execute_command_timeout(self, ssh_client, config, mock_ssh_connection):
        mock_ssh_connection.run.side_effect = asyncio.TimeoutError()

        with patch("powerwatch.ssh.client.asyncssh.connect", AsyncMock(return_value=mock_ssh_connection)):
            with pytest.raises(asyncio.TimeoutError):
                await ssh_client.execute_command(config, "sleep 100", timeout=1)

        mock_ssh_connection.close.assert_called_once()

    async def test_connect_failure_propagates(self, ssh_client, config):
        with patch("powerwatch.ssh.client.asyncssh.connect", AsyncMock(side_effect=OSError("Connection refused"))):
            with pytest.raises(OSError):
                await ssh_client.execute_command(config, "true")
