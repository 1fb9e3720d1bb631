"""lcov-bridge CLI."""

import click

from lcovbridge.cli.find import find_command
from lcovbridge.cli.inspect import inspect_command
from lcovbridge.cli.load import load_command
from lcovbridge.cli.watch import watch_command
from lcovbridge.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="lcov-bridge")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """lcov-bridge - map LCOV coverage reports onto workspace files."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(load_command, name="load")
cli.add_command(find_command, name="find")
cli.add_command(inspect_command, name="inspect")
cli.add_command(watch_command, name="watch")


if __name__ == "__main__":
    cli()
