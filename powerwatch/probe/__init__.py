"""
Reachability probing for powerwatch.

Checks whether reference targets still answer, with bounded per-target
retries and an OR-quorum across targets.
"""

from powerwatch.probe.platform import PlatformCommands, get_platform_commands
from powerwatch.probe.prober import Prober
from powerwatch.probe.quorum import QuorumChecker, ReachabilityResult

__all__ = [
    "PlatformCommands",
    "Prober",
    "QuorumChecker",
    "ReachabilityResult",
    "get_platform_commands",
]
