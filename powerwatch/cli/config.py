import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from powerwatch.config import WatchdogConfig, ensure_config, load_config
from powerwatch.errors import ConfigError
from powerwatch.utils.timeparse import format_duration

console = Console()


def print_parameters(config: WatchdogConfig) -> None:
    """Show the resolved watchdog parameters."""
    ping = config.ping_params
    console.print(f"[cyan]Interval[/cyan]: {format_duration(ping.interval_seconds)}")
    console.print(f"[cyan]Timeout[/cyan]: {format_duration(ping.timeout_seconds)}")
    console.print(f"[cyan]Retries[/cyan]: {ping.retry_count}")
    console.print(f"[cyan]Wait Time[/cyan]: {format_duration(config.wait_seconds)}")
    console.print(f"[cyan]Shutdown Delay[/cyan]: {format_duration(config.shutdown_delay_seconds)}")
    console.print(f"[cyan]Targets[/cyan]: {', '.join(ping.target_ips)}")


@click.command()
@click.pass_context
def init(ctx) -> None:
    """Creates the configuration file with defaults if it is missing."""
    settings = ctx.obj['SETTINGS']
    try:
        created = ensure_config(settings.CONFIG_PATH)
    except ConfigError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        ctx.exit(1)

    if created:
        console.print(f"[green]Created {settings.CONFIG_PATH} with default configuration.[/green]")
    else:
        console.print(f"[yellow]{settings.CONFIG_PATH} already exists, left unchanged.[/yellow]")


@click.command()
@click.pass_context
def validate(ctx) -> None:
    """Validates the configuration file."""
    settings = ctx.obj['SETTINGS']
    console.print("[bold blue]Validating Configuration[/bold blue]")
    try:
        config = load_config(settings.CONFIG_PATH)
    except ConfigError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        ctx.exit(1)

    print_parameters(config)

    table = Table(title="Remote Hosts")
    table.add_column("Name", style="cyan")
    table.add_column("Address")
    table.add_column("User")
    for host in config.host_params:
        table.add_row(escape(host.display_name), host.address, escape(host.username))
    console.print(table)
    console.print("[green]Configuration is valid.[/green]")
