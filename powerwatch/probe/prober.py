"""
Single reachability check against one target.
"""

import asyncio
import logging

from powerwatch.probe.platform import PlatformCommands

logger = logging.getLogger(__name__)

# Extra time the ping process gets on top of its own timeout before we kill it
PROCESS_GRACE_SECONDS = 2.0

# Present in every echo reply line on Linux, macOS and Windows; a bare "TTL"
# also appears in "TTL expired in transit" from an intermediate router
REPLY_MARKER = "ttl="


class Prober:
    """
    Issues one echo request to a target and reports whether it answered.

    Success requires the reply marker in the output as well as a zero exit
    status; some environments exit 0 for unreachable hosts.
    """

    def __init__(self, commands: PlatformCommands):
        self.commands = commands

    async def probe(self, target: str, timeout: float) -> bool:
        """
        Probe a target once.

        Args:
            target: Address to probe
            timeout: Seconds to wait for a reply

        Returns:
            True only on a confirmed reply; every failure mode returns False
        """
        try:
            command = self.commands.build_probe_command(target, timeout)
            exit_code, output = await self._run(command, timeout + PROCESS_GRACE_SECONDS)
        except asyncio.TimeoutError:
            logger.debug(f"Probe of {target} timed out after {timeout}s")
            return False
        except Exception as e:
            logger.debug(f"Probe of {target} failed to run: {e}")
            return False

        return exit_code == 0 and REPLY_MARKER in output.lower()

    async def _run(self, command, deadline: float):
        proc = await asyncio.create_subprocess_exec(
            *command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )
        try:
            stdout, _ = await asyncio.wait_for(proc.communicate(), timeout=deadline)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            raise
        return proc.returncode, stdout.decode(errors="replace")
