"""
Failover controller: the watchdog's decision loop.

On every tick the controller checks whether any reference target still
answers. When none do it waits out the configured debounce period and
checks again; only a second failed check shuts the fleet down, remote
hosts first and the local machine last.

Decisions are made by one task at a time. A tick that falls due while a
cycle (including its debounce wait) is still running is dropped, so two
outage evaluations can never overlap and failover runs at most once.
"""

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, List, Optional

from powerwatch.context import WatchdogContext
from powerwatch.errors import FailoverCompletedError
from powerwatch.probe.prober import Prober
from powerwatch.probe.quorum import QuorumChecker
from powerwatch.shutdown.local import LocalShutdownTrigger
from powerwatch.shutdown.remote import RemoteShutdownDispatcher, ShutdownResult
from powerwatch.utils.timeparse import format_duration

logger = logging.getLogger(__name__)


class WatchdogState(Enum):
    """Controller states."""
    MONITORING = "monitoring"
    SUSPECTED_OUTAGE = "suspected_outage"
    FAILOVER = "failover"


class CycleOutcome(Enum):
    """How a single decision cycle ended."""
    HEALTHY = "healthy"
    RECOVERED_AFTER_WAIT = "recovered_after_wait"
    FAILED_OVER = "failed_over"


class FailoverController:
    """
    Drives probe, debounce wait, re-probe and failover on a fixed interval.
    """

    def __init__(
        self,
        context: WatchdogContext,
        quorum: QuorumChecker,
        dispatcher: RemoteShutdownDispatcher,
        local_trigger: LocalShutdownTrigger,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.context = context
        self.quorum = quorum
        self.dispatcher = dispatcher
        self.local_trigger = local_trigger
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._stop_event = asyncio.Event()

        self.state = WatchdogState.MONITORING
        self.last_outcome: Optional[CycleOutcome] = None
        self.remote_results: List[ShutdownResult] = []

    @classmethod
    def from_context(cls, context: WatchdogContext) -> "FailoverController":
        """Wire up the default prober, dispatcher and local trigger."""
        return cls(
            context=context,
            quorum=QuorumChecker(Prober(context.commands)),
            dispatcher=RemoteShutdownDispatcher(
                shutdown_delay=context.config.shutdown_delay_seconds,
                dry_run=context.dry_run,
            ),
            local_trigger=LocalShutdownTrigger(context.commands, dry_run=context.dry_run),
        )

    @property
    def failed_over(self) -> bool:
        return self.state == WatchdogState.FAILOVER

    async def check(self) -> bool:
        """One quorum check with the configured targets and limits."""
        return await self.quorum.any_reachable(
            self.context.targets,
            self.context.timeout,
            self.context.retries,
        )

    async def tick(self) -> CycleOutcome:
        """
        Run one complete decision cycle.

        Returns:
            The cycle outcome

        Raises:
            FailoverCompletedError: If failover already ran
        """
        async with self._lock:
            if self.state == WatchdogState.FAILOVER:
                raise FailoverCompletedError("Failover already executed, watchdog is finished")

            if await self.check():
                self.last_outcome = CycleOutcome.HEALTHY
                return self.last_outcome

            wait = self.context.wait_time
            self.state = WatchdogState.SUSPECTED_OUTAGE
            logger.warning(
                f"All targets unreachable, suspected power loss. "
                f"Shutting down in {format_duration(wait)} unless power returns"
            )
            await self._sleep(wait)

            logger.warning("Re-checking reachability before shutdown")
            if await self.check():
                self.state = WatchdogState.MONITORING
                logger.info("Targets reachable again, power restored. Resuming monitoring")
                self.last_outcome = CycleOutcome.RECOVERED_AFTER_WAIT
                return self.last_outcome

            self.state = WatchdogState.FAILOVER
            await self._failover()
            self.last_outcome = CycleOutcome.FAILED_OVER
            return self.last_outcome

    async def _failover(self):
        logger.critical("Power not restored, starting shutdown")
        self.remote_results = await self.dispatcher.shutdown_all(self.context.config.host_params)

        logger.critical("Shutting down this machine")
        if not await self.local_trigger.shutdown_local():
            logger.error("Local shutdown did not complete")

    async def run(self) -> Optional[CycleOutcome]:
        """
        Tick on the configured interval until failover or stop().

        Returns:
            FAILED_OVER after a failover, None if stopped
        """
        loop = asyncio.get_running_loop()
        interval = self.context.interval
        next_tick = loop.time() + interval

        while not self._stop_event.is_set():
            delay = next_tick - loop.time()
            if delay > 0:
                try:
                    await asyncio.wait_for(self._stop_event.wait(), timeout=delay)
                    break
                except asyncio.TimeoutError:
                    pass

            try:
                outcome = await self.tick()
            except FailoverCompletedError:
                raise
            except Exception:
                logger.exception("Unexpected error in monitoring cycle")
                if self.state == WatchdogState.FAILOVER:
                    return CycleOutcome.FAILED_OVER
                self.state = WatchdogState.MONITORING
                outcome = None

            if outcome == CycleOutcome.FAILED_OVER:
                return outcome

            # Drop ticks that fell due while the cycle was running
            next_tick += interval
            now = loop.time()
            if next_tick <= now:
                skipped = int((now - next_tick) // interval) + 1
                next_tick += skipped * interval

        logger.info("Monitoring stopped")
        return None

    def stop(self):
        """Stop monitoring at the next tick boundary. A running cycle is never interrupted."""
        self._stop_event.set()
