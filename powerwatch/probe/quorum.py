"""
OR-quorum reachability check across configured targets.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from powerwatch.probe.prober import Prober

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReachabilityResult:
    """Outcome of a single probe attempt."""

    target: str
    attempt_index: int
    succeeded: bool


class QuorumChecker:
    """
    Decides whether the upstream network is alive.

    Targets are tried in configured order. Each target gets up to
    max_retries immediate attempts before moving on to the next one, and
    the first reply from any target settles the check as healthy.
    """

    def __init__(self, prober: Prober):
        self.prober = prober
        self.last_results: List[ReachabilityResult] = []

    async def any_reachable(
        self,
        targets: Sequence[str],
        timeout: float,
        max_retries: int,
    ) -> bool:
        """
        Check whether any target answers.

        Args:
            targets: Addresses in the order to try them
            timeout: Per-attempt timeout in seconds
            max_retries: Attempts per target, at least 1

        Returns:
            True as soon as one probe succeeds, False once every target has
            used up every attempt
        """
        if not targets:
            raise ValueError("at least one target is required")
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")

        results: List[ReachabilityResult] = []
        self.last_results = results

        for target in targets:
            for attempt in range(1, max_retries + 1):
                succeeded = await self.prober.probe(target, timeout)
                results.append(ReachabilityResult(target, attempt, succeeded))
                if succeeded:
                    return True
                logger.warning(f"Ping {target} failed (attempt {attempt}/{max_retries})")

        return False

    def first_success(self) -> Optional[ReachabilityResult]:
        """The attempt that settled the last check, if any did."""
        for result in self.last_results:
            if result.succeeded:
                return result
        return None
