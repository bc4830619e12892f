"""
Remote fleet shutdown over SSH.

Each configured host is told to power off after a short delay. Hosts are
handled one after another and independently: a host that cannot be
reached is logged and skipped, never retried.
"""

import asyncio
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

import asyncssh

from powerwatch.config import HostParams
from powerwatch.ssh.client import SSHClient, SSHConnectionConfig

logger = logging.getLogger(__name__)

DEFAULT_SHUTDOWN_DELAY = 3.0

# Detached so the session returns before the host goes down
DEFERRED_SHUTDOWN_TEMPLATE = "nohup /bin/bash -c 'sleep {delay};shutdown now' >/dev/null 2>&1 &"


class ShutdownStatus(Enum):
    """Shutdown operation status."""
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class ShutdownResult:
    """Result of a shutdown request to one host."""

    hostname: str
    address: str
    status: ShutdownStatus
    command: str
    exit_code: Optional[int] = None
    error_message: Optional[str] = None
    timestamp: Optional[datetime] = None

    def __post_init__(self):
        if self.timestamp is None:
            self.timestamp = datetime.now(timezone.utc)

    @property
    def success(self) -> bool:
        """Whether the shutdown was scheduled."""
        return self.status == ShutdownStatus.SUCCESS

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging/display."""
        return {
            'hostname': self.hostname,
            'address': self.address,
            'status': self.status.value,
            'command': self.command,
            'exit_code': self.exit_code,
            'error_message': self.error_message,
            'timestamp': self.timestamp.isoformat() if self.timestamp else None,
            'success': self.success,
        }


def build_deferred_command(delay: float) -> str:
    """Shell command that shuts the host down delay seconds after returning."""
    return DEFERRED_SHUTDOWN_TEMPLATE.format(delay=max(1, math.ceil(delay)))


class RemoteShutdownDispatcher:
    """
    Sends a deferred shutdown command to every configured host.
    """

    def __init__(
        self,
        ssh_client: Optional[SSHClient] = None,
        shutdown_delay: float = DEFAULT_SHUTDOWN_DELAY,
        dry_run: bool = False,
    ):
        self.ssh_client = ssh_client or SSHClient()
        self.shutdown_delay = shutdown_delay
        self.dry_run = dry_run

    async def shutdown_all(self, hosts: Sequence[HostParams]) -> List[ShutdownResult]:
        """
        Ask every host to shut down, in configured order.

        Args:
            hosts: Remote hosts to shut down

        Returns:
            One result per host, in the same order
        """
        if not hosts:
            logger.info("No remote hosts configured")
            return []

        logger.info(f"Sending shutdown to {len(hosts)} remote hosts")

        results = []
        for host in hosts:
            result = await self.shutdown_host(host)
            logger.debug(
                f"Shutdown result for {result.hostname}: {result.status.value}",
                extra=result.to_dict(),
            )
            results.append(result)

        successful = sum(1 for r in results if r.success)
        logger.info(
            f"Remote shutdown completed: {successful} successful, "
            f"{len(results) - successful} failed"
        )
        return results

    async def shutdown_host(self, host: HostParams) -> ShutdownResult:
        """Send the deferred shutdown to a single host; never raises."""
        command = build_deferred_command(self.shutdown_delay)
        delay = max(1, math.ceil(self.shutdown_delay))

        if self.dry_run:
            logger.info(f"DRY RUN: Would execute '{command}' on {host.display_name} ({host.address})")
            return ShutdownResult(
                hostname=host.display_name,
                address=host.address,
                status=ShutdownStatus.SKIPPED,
                command=command,
            )

        config = SSHConnectionConfig.from_host(host)
        try:
            ssh_result = await self.ssh_client.execute_command(config, command)
        except (asyncssh.Error, OSError, asyncio.TimeoutError) as e:
            logger.error(f"Unable to shut down {host.display_name} ({host.address}): {e}")
            return ShutdownResult(
                hostname=host.display_name,
                address=host.address,
                status=ShutdownStatus.FAILED,
                command=command,
                error_message=str(e) or type(e).__name__,
            )
        except Exception as e:
            logger.exception(f"Unexpected error shutting down {host.display_name} ({host.address})")
            return ShutdownResult(
                hostname=host.display_name,
                address=host.address,
                status=ShutdownStatus.FAILED,
                command=command,
                error_message=str(e) or type(e).__name__,
            )

        if not ssh_result.success:
            logger.error(
                f"Shutdown command failed on {host.display_name} ({host.address}): "
                f"exit code {ssh_result.exit_code} {ssh_result.output}".rstrip()
            )
            return ShutdownResult(
                hostname=host.display_name,
                address=host.address,
                status=ShutdownStatus.FAILED,
                command=command,
                exit_code=ssh_result.exit_code,
                error_message=ssh_result.output or None,
            )

        logger.info(
            f"Shutdown scheduled on {host.display_name} ({host.address}), "
            f"powering off in {delay} seconds"
        )
        return ShutdownResult(
            hostname=host.display_name,
            address=host.address,
            status=ShutdownStatus.SUCCESS,
            command=command,
            exit_code=ssh_result.exit_code,
        )
