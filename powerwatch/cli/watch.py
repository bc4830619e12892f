import click
import logging
from rich.console import Console

from powerwatch.config import ensure_config
from powerwatch.controller import FailoverController
from powerwatch.errors import ConfigError
from powerwatch.probe.prober import Prober
from powerwatch.probe.quorum import QuorumChecker
from powerwatch.utils.logging import setup_logging

from .config import print_parameters
from .utils import handle_async_command, load_context

logger = logging.getLogger(__name__)
console = Console()

# Exit code of `check` when no target answers
EXIT_UNREACHABLE = 2


@click.command()
@click.option('--dry-run', is_flag=True, help='Log shutdown commands instead of executing them.')
@click.pass_context
@handle_async_command
async def run(ctx, dry_run: bool) -> None:
    """Starts monitoring and shuts everything down on sustained power loss."""
    settings = ctx.obj['SETTINGS']

    if ensure_config(settings.CONFIG_PATH):
        console.print(f"Created {settings.CONFIG_PATH} with default configuration.")
        console.print("Edit it and start powerwatch again.")
        return

    context = load_context(settings, dry_run=dry_run)

    try:
        setup_logging(
            level=settings.LOG_LEVEL,
            fmt=settings.LOG_FORMAT,
            log_file=context.log_path,
            force=True,
        )
    except OSError as e:
        raise ConfigError(f"Unable to open log file {context.log_path}: {e}") from e

    console.print("[bold blue]powerwatch started[/bold blue]")
    print_parameters(context.config)
    console.print(f"[cyan]Remote Hosts[/cyan]: {len(context.config.host_params)}")
    if dry_run:
        console.print("[yellow]Dry run: no shutdown commands will be executed[/yellow]")
    console.print("Monitoring.")

    ping = context.config.ping_params
    logger.info(
        f"powerwatch started: interval={ping.interval_time} timeout={ping.timeout} "
        f"retries={ping.retry_count} wait={context.config.wait_time} "
        f"targets={ping.target_ips} hosts={len(context.config.host_params)} dry_run={dry_run}"
    )

    controller = FailoverController.from_context(context)
    await controller.run()


@click.command()
@click.pass_context
@handle_async_command
async def check(ctx) -> None:
    """Runs a single reachability check against the configured targets."""
    settings = ctx.obj['SETTINGS']
    context = load_context(settings)

    console.print("[bold blue]Reachability Check[/bold blue]")
    quorum = QuorumChecker(Prober(context.commands))
    reachable = await quorum.any_reachable(context.targets, context.timeout, context.retries)

    for result in quorum.last_results:
        status = "[green]OK[/green]" if result.succeeded else "[red]FAIL[/red]"
        console.print(f"[cyan]{result.target}[/cyan] attempt {result.attempt_index}: {status}")

    if reachable:
        answered = quorum.first_success()
        console.print(f"[green]Network reachable[/green] ({answered.target} answered)")
    else:
        console.print("[red]All targets unreachable[/red]")
        ctx.exit(EXIT_UNREACHABLE)
