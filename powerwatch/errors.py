"""Exception hierarchy for powerwatch."""


class PowerwatchError(Exception):
    """Base exception for powerwatch errors."""
    pass


class ConfigError(PowerwatchError):
    """Configuration file could not be read, parsed or validated."""
    pass


class UnsupportedPlatformError(PowerwatchError):
    """No probe or shutdown command is known for this platform."""
    pass


class FailoverCompletedError(PowerwatchError):
    """The controller already ran its failover sequence."""
    pass
