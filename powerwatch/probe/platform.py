"""
Platform specific command construction.

The probe and shutdown commands differ per operating system. A provider
is selected once at startup and handed to the components that need it.
"""

import math
import sys
from abc import ABC, abstractmethod
from typing import List, Optional

from powerwatch.errors import UnsupportedPlatformError


def _whole_seconds(timeout: float) -> int:
    return max(1, math.ceil(timeout))


class PlatformCommands(ABC):
    """Builds probe and shutdown command lines for one platform."""

    name: str = "unknown"
    supported: bool = True

    @abstractmethod
    def build_probe_command(self, target: str, timeout: float) -> List[str]:
        """Command that sends a single echo request to target."""
        pass

    @abstractmethod
    def build_shutdown_command(self) -> List[str]:
        """Command that powers this machine off immediately."""
        pass


class LinuxCommands(PlatformCommands):
    name = "linux"

    def build_probe_command(self, target: str, timeout: float) -> List[str]:
        return ["ping", "-c", "1", "-W", str(_whole_seconds(timeout)), target]

    def build_shutdown_command(self) -> List[str]:
        return ["shutdown", "-P", "now"]


class DarwinCommands(PlatformCommands):
    name = "darwin"

    def build_probe_command(self, target: str, timeout: float) -> List[str]:
        # BSD ping reads -W in milliseconds
        return ["ping", "-c", "1", "-W", str(_whole_seconds(timeout) * 1000), target]

    def build_shutdown_command(self) -> List[str]:
        return ["shutdown", "-h", "now"]


class WindowsCommands(PlatformCommands):
    name = "windows"

    def build_probe_command(self, target: str, timeout: float) -> List[str]:
        # -w takes milliseconds on Windows
        return ["ping", "-n", "1", "-w", str(_whole_seconds(timeout) * 1000), target]

    def build_shutdown_command(self) -> List[str]:
        return ["shutdown", "/s", "/t", "0"]


class UnsupportedPlatform(PlatformCommands):
    """Placeholder for platforms without known commands."""

    supported = False

    def __init__(self, name: str):
        self.name = name

    def build_probe_command(self, target: str, timeout: float) -> List[str]:
        raise UnsupportedPlatformError(f"Probing is not supported on platform '{self.name}'")

    def build_shutdown_command(self) -> List[str]:
        raise UnsupportedPlatformError(f"Shutdown is not supported on platform '{self.name}'")


PLATFORM_COMMANDS = {
    "linux": LinuxCommands,
    "darwin": DarwinCommands,
    "win32": WindowsCommands,
    "cygwin": WindowsCommands,
}


def get_platform_commands(platform: Optional[str] = None) -> PlatformCommands:
    """
    Select the command provider for a platform.

    Args:
        platform: A sys.platform style name (current platform if None)

    Returns:
        The matching provider, or an UnsupportedPlatform instance
    """
    platform = platform or sys.platform
    for prefix, provider in PLATFORM_COMMANDS.items():
        if platform.startswith(prefix):
            return provider()
    return UnsupportedPlatform(platform)
