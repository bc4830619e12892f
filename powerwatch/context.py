"""
Process-wide watchdog context.

Built once at startup from Settings and the loaded configuration file,
then handed to the controller and CLI explicitly.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from powerwatch.config import Settings, WatchdogConfig, load_config
from powerwatch.probe.platform import PlatformCommands, get_platform_commands


@dataclass(frozen=True)
class WatchdogContext:
    """Everything the watchdog needs for its lifetime."""

    config: WatchdogConfig
    config_path: Path
    log_path: Optional[Path] = None
    commands: PlatformCommands = field(default_factory=get_platform_commands)
    dry_run: bool = False

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        dry_run: bool = False,
        commands: Optional[PlatformCommands] = None,
    ) -> "WatchdogContext":
        """
        Load the configuration file named by settings.

        Raises:
            ConfigError: If the configuration is missing or invalid
        """
        config_path = Path(settings.CONFIG_PATH)
        return cls(
            config=load_config(config_path),
            config_path=config_path,
            log_path=Path(settings.LOG_PATH) if settings.LOG_PATH else None,
            commands=commands or get_platform_commands(),
            dry_run=dry_run,
        )

    @property
    def targets(self):
        return self.config.ping_params.target_ips

    @property
    def interval(self) -> float:
        return self.config.ping_params.interval_seconds

    @property
    def timeout(self) -> float:
        return self.config.ping_params.timeout_seconds

    @property
    def retries(self) -> int:
        return self.config.ping_params.retry_count

    @property
    def wait_time(self) -> float:
        return self.config.wait_seconds
