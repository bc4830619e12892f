"""
Async SSH client for running one-off commands on remote hosts.

Every command gets its own connection, opened and closed around the call.
Host keys are not verified.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Optional

import asyncssh

from powerwatch.config import HostParams

logger = logging.getLogger(__name__)


@dataclass
class SSHConnectionConfig:
    """Configuration for SSH connections."""

    hostname: str
    port: int = 22
    username: Optional[str] = None
    password: Optional[str] = None
    connect_timeout: int = 10
    command_timeout: int = 30

    @classmethod
    def from_host(cls, host: HostParams, **kwargs) -> "SSHConnectionConfig":
        return cls(
            hostname=host.host,
            port=host.port,
            username=host.username,
            password=host.password,
            **kwargs,
        )

    @property
    def address(self) -> str:
        return f"{self.hostname}:{self.port}"


@dataclass
class SSHCommandResult:
    """Result of SSH command execution."""

    command: str
    exit_code: Optional[int]
    stdout: str
    stderr: str
    execution_time: float
    success: bool

    @property
    def output(self) -> str:
        """Combined stdout and stderr."""
        if self.stderr:
            return f"{self.stdout}\n{self.stderr}".strip()
        return self.stdout.strip()


class SSHClient:
    """
    Async SSH client for remote host management.

    Password authentication only; no agent, no client keys, no known_hosts.
    """

    @asynccontextmanager
    async def connection(self, config: SSHConnectionConfig):
        """
        Context manager for an SSH connection.

        Args:
            config: SSH connection configuration

        Yields:
            Open SSH connection, closed on exit
        """
        connect_kwargs = {
            'host': config.hostname,
            'port': config.port,
            'username': config.username,
            'password': config.password,
            'known_hosts': None,
            'agent_path': None,
            'client_keys': None,
            'connect_timeout': config.connect_timeout,
        }

        logger.debug(f"Opening SSH connection to {config.address}")
        conn = await asyncssh.connect(**connect_kwargs)
        try:
            yield conn
        finally:
            conn.close()
            await conn.wait_closed()

    async def execute_command(
        self,
        config: SSHConnectionConfig,
        command: str,
        timeout: Optional[int] = None,
    ) -> SSHCommandResult:
        """
        Execute command on remote host.

        Args:
            config: SSH connection configuration
            command: Command to execute
            timeout: Command timeout (uses config default if None)

        Returns:
            Command execution result

        Raises:
            asyncssh.Error: If the SSH connection or session fails
            OSError: If the host cannot be reached
            asyncio.TimeoutError: If connecting or the command times out
        """
        timeout = timeout or config.command_timeout
        loop = asyncio.get_running_loop()
        start_time = loop.time()

        logger.debug(f"Executing SSH command on {config.address}: {command}")

        async with self.connection(config) as conn:
            result = await asyncio.wait_for(
                conn.run(command, check=False),
                timeout=timeout,
            )

        return SSHCommandResult(
            command=command,
            exit_code=result.exit_status,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            execution_time=loop.time() - start_time,
            success=result.exit_status == 0,
        )
