"""
Shutdown module for powerwatch.

Remote fleet shutdown over SSH and the final local power-off.
"""

from powerwatch.shutdown.local import LocalShutdownTrigger
from powerwatch.shutdown.remote import RemoteShutdownDispatcher, ShutdownResult, ShutdownStatus

__all__ = ["LocalShutdownTrigger", "RemoteShutdownDispatcher", "ShutdownResult", "ShutdownStatus"]
