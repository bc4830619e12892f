"""
Local machine shutdown, the last step of a failover.
"""

import asyncio
import logging
from typing import Optional

from powerwatch.errors import UnsupportedPlatformError
from powerwatch.probe.platform import PlatformCommands, get_platform_commands

logger = logging.getLogger(__name__)


class LocalShutdownTrigger:
    """
    Powers off the machine running the watchdog.

    Failures are logged and reported as False. There is nothing left to
    retry once this runs.
    """

    def __init__(self, commands: Optional[PlatformCommands] = None, dry_run: bool = False):
        self.commands = commands or get_platform_commands()
        self.dry_run = dry_run

    async def shutdown_local(self) -> bool:
        try:
            command = self.commands.build_shutdown_command()
        except UnsupportedPlatformError as e:
            logger.error(f"Local shutdown not possible: {e}")
            return False

        if self.dry_run:
            logger.info(f"DRY RUN: Would execute '{' '.join(command)}' locally")
            return True

        logger.critical(f"Shutting down local machine: {' '.join(command)}")
        try:
            proc = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
            stdout, _ = await proc.communicate()
        except OSError as e:
            logger.error(f"Local shutdown failed: {e}")
            return False

        if proc.returncode != 0:
            output = stdout.decode(errors="replace").strip()
            logger.error(f"Local shutdown failed with exit code {proc.returncode}: {output}")
            return False

        return True
