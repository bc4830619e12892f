import click

from powerwatch.config import Settings

from .config import init, validate
from .watch import check, run


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enables verbose mode.')
@click.option('--quiet', '-q', is_flag=True, help='Enables quiet mode.')
@click.option('--config', 'config_path', type=click.Path(dir_okay=False), help='Path to the configuration file.')
@click.option('--log-file', 'log_path', type=click.Path(dir_okay=False), help='Path to the log file.')
@click.pass_context
def app(ctx, verbose, quiet, config_path, log_path):
    """
    powerwatch power-loss watchdog CLI.
    """
    ctx.ensure_object(dict)

    overrides = {}
    if config_path:
        overrides['CONFIG_PATH'] = config_path
    if log_path:
        overrides['LOG_PATH'] = log_path
    if verbose:
        overrides['LOG_LEVEL'] = 'DEBUG'
    elif quiet:
        overrides['LOG_LEVEL'] = 'ERROR'

    ctx.obj['SETTINGS'] = Settings(**overrides)
    ctx.obj['VERBOSE'] = verbose
    ctx.obj['QUIET'] = quiet

# Add subcommands
app.add_command(run, name='run')
app.add_command(check, name='check')
app.add_command(init, name='init')
app.add_command(validate, name='validate')

if __name__ == '__main__':
    app()
