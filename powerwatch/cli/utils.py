import asyncio
import functools
import sys
from rich.console import Console
from rich.markup import escape

from powerwatch.config import Settings
from powerwatch.context import WatchdogContext
from powerwatch.errors import ConfigError, PowerwatchError, UnsupportedPlatformError
from powerwatch.probe.platform import PLATFORM_COMMANDS

console = Console()

# Conventional status for termination by SIGINT
EXIT_INTERRUPTED = 130


def load_context(settings: Settings, dry_run: bool = False) -> WatchdogContext:
    """Build the watchdog context, refusing platforms without ping/shutdown commands."""
    context = WatchdogContext.from_settings(settings, dry_run=dry_run)
    if not context.commands.supported:
        raise UnsupportedPlatformError(f"Platform '{context.commands.name}' is not supported")
    return context


def handle_async_command(async_func):
    """Run an async CLI command, turning startup failures into a message and exit code."""
    @functools.wraps(async_func)
    def wrapper(*args, **kwargs):
        try:
            return asyncio.run(async_func(*args, **kwargs))
        except KeyboardInterrupt:
            console.print("\n[yellow]Monitoring stopped by user[/yellow]")
            sys.exit(EXIT_INTERRUPTED)
        except ConfigError as e:
            console.print(f"[red]Error: {escape(str(e))}[/red]")
            console.print("Run 'powerwatch validate' to check the configuration or 'powerwatch init' to create one.")
            sys.exit(1)
        except UnsupportedPlatformError as e:
            console.print(f"[red]Error: {escape(str(e))}[/red]")
            console.print(f"Supported platforms: {', '.join(sorted(PLATFORM_COMMANDS))}")
            sys.exit(1)
        except PowerwatchError as e:
            console.print(f"[red]Error: {escape(str(e))}[/red]")
            sys.exit(1)
    return wrapper
