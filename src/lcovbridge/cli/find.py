"""lcov-bridge find command - locate LCOV reports in a workspace."""

import sys
from pathlib import Path

import click
import questionary

from lcovbridge.cli.load import report_result
from lcovbridge.cli.utils import build_service, track_steps
from lcovbridge.core.progress import pluralize, spinner, status


def _choose(files: list[Path], root: Path) -> Path | None:
    """Ask which report to load when several match."""
    choices = []
    for file in files:
        try:
            label = file.relative_to(root).as_posix()
        except ValueError:
            label = str(file)
        choices.append(questionary.Choice(label, value=file))
    return questionary.select("Select an LCOV file to load", choices=choices).ask()


@click.command()
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    help="Workspace root (default: current directory)",
)
@click.option("--pattern", default=None, help="Glob for reports (default: from config)")
@click.option("--load", "load_report", is_flag=True, help="Load a matching report")
@click.option("--first", is_flag=True, help="With --load, take the first match without asking")
def find_command(root: Path, pattern: str | None, load_report: bool, first: bool) -> None:
    """Find LCOV reports in the workspace, optionally loading one."""
    service = build_service(root)
    pattern = pattern or service.config.coverage.lcov_file_path
    with spinner("Searching for LCOV files"):
        files = service.find_lcov_files(pattern)

    if not files:
        raise click.ClickException(f"No LCOV files found matching pattern: {pattern}")

    if not load_report:
        for file in files:
            click.echo(file)
        return

    selected: Path | None = files[0]
    if len(files) > 1:
        if first or not sys.stdin.isatty():
            status(f"Found {pluralize(len(files), 'LCOV file')}. Using: {files[0].name}")
        else:
            selected = _choose(files, service.workspace_root)
    if selected is None:
        return

    result = service.load_coverage(selected, track=track_steps)
    if service.last_error:
        raise click.ClickException(service.last_error)
    report_result(result, service.workspace_root, error=None, as_json=False)
