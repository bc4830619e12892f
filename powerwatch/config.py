"""
Configuration management for powerwatch.

Process-level settings (where the config and log files live, log level
and format) come from environment variables through Pydantic's
BaseSettings. The watchdog parameters themselves live in a YAML file
that is created with defaults on first start.
"""
import logging
from pathlib import Path
from typing import List, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from powerwatch.errors import ConfigError
from powerwatch.utils.timeparse import parse_duration

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Process settings.

    These settings are loaded from environment variables.
    """

    CONFIG_PATH: str = "config.yml"
    LOG_PATH: str = "log.txt"
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        env_prefix="POWERWATCH_",
        extra="ignore",
    )


def _positive_duration(value: str) -> str:
    try:
        seconds = parse_duration(value)
    except ValueError as e:
        raise ValueError(f"invalid duration {value!r}: {e}") from e
    if seconds <= 0:
        raise ValueError(f"duration {value!r} must be greater than zero")
    return value


class PingParams(BaseModel):
    """Reachability probe parameters."""

    model_config = ConfigDict(frozen=True)

    interval_time: str = "30s"
    retry_count: int = Field(default=1, ge=1)
    timeout: str = "1s"
    target_ips: List[str] = Field(default_factory=lambda: ["8.8.8.8"], min_length=1)

    check_durations = field_validator("interval_time", "timeout")(_positive_duration)

    @field_validator("target_ips")
    @classmethod
    def strip_targets(cls, value: List[str]) -> List[str]:
        targets = [t.strip() for t in value]
        if any(not t for t in targets):
            raise ValueError("target addresses must not be empty")
        return targets

    @property
    def interval_seconds(self) -> float:
        return parse_duration(self.interval_time)

    @property
    def timeout_seconds(self) -> float:
        return parse_duration(self.timeout)


class HostParams(BaseModel):
    """A remote machine to shut down on failover."""

    model_config = ConfigDict(frozen=True)

    host: str
    port: int = Field(default=22, ge=1, le=65535)
    hostname: str = ""
    username: str
    password: str

    @property
    def display_name(self) -> str:
        return self.hostname or self.host

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


class WatchdogConfig(BaseModel):
    """Contents of the watchdog configuration file."""

    model_config = ConfigDict(frozen=True)

    ping_params: PingParams = Field(default_factory=PingParams)
    wait_time: str = "5m"
    shutdown_delay: str = "3s"
    host_params: List[HostParams] = Field(default_factory=list)

    check_durations = field_validator("wait_time", "shutdown_delay")(_positive_duration)

    @property
    def wait_seconds(self) -> float:
        return parse_duration(self.wait_time)

    @property
    def shutdown_delay_seconds(self) -> float:
        return parse_duration(self.shutdown_delay)


def default_config() -> WatchdogConfig:
    """Configuration written on first start, meant to be edited."""
    return WatchdogConfig(
        host_params=[
            HostParams(
                host="192.168.1.1",
                port=22,
                hostname="centos7",
                username="root",
                password="password",
            )
        ],
    )


def ensure_config(path: Union[str, Path]) -> bool:
    """
    Create the configuration file with defaults if it does not exist.

    Args:
        path: Location of the configuration file

    Returns:
        True if the file was created, False if one already existed
        (an existing file is never modified)

    Raises:
        ConfigError: If the default file cannot be written
    """
    config_path = Path(path)
    if config_path.exists():
        return False

    data = default_config().model_dump(mode="json")
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "x", encoding="utf-8") as f:
            yaml.safe_dump(data, f, sort_keys=False, allow_unicode=True)
    except FileExistsError:
        return False
    except OSError as e:
        raise ConfigError(f"Unable to create configuration file {config_path}: {e}") from e

    logger.info(f"Created default configuration at {config_path}")
    return True


def load_config(path: Union[str, Path]) -> WatchdogConfig:
    """
    Read and validate the configuration file.

    Raises:
        ConfigError: If the file cannot be read, parsed or validated
    """
    config_path = Path(path)
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Unable to read configuration file {config_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Unable to parse configuration file {config_path}: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Configuration file {config_path} must contain a mapping")

    try:
        return WatchdogConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {config_path}: {e}") from e
