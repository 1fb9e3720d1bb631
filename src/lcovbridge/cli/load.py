"""lcov-bridge load command - reconcile an LCOV report with a workspace."""

import json
from pathlib import Path

import click

from lcovbridge.cli.utils import build_service, print_result, result_to_dict, track_steps
from lcovbridge.core.progress import pluralize, status
from lcovbridge.reconcile.session import LoadResult


def report_result(result: LoadResult, root: Path, *, error: str | None, as_json: bool) -> None:
    """Print a load outcome in the requested format."""
    if as_json:
        payload = result_to_dict(result, root)
        payload["error"] = error
        click.echo(json.dumps(payload, indent=2))
        return

    if error:
        status(error, style="error")
        return
    if result.cancelled:
        status("Coverage load cancelled", style="warning")
    if not result.handles:
        status("No coverage data matched files in the workspace", style="warning")
        return

    print_result(result, root)
    totals = result.totals
    status(
        f"Coverage loaded: {totals.percentage:.2f}% "
        f"({totals.covered_lines}/{totals.total_lines} lines)",
        style="success",
    )
    if result.unresolved:
        status(f"Skipped {pluralize(result.unresolved, 'record')} with no matching file")


@click.command()
@click.argument("lcov_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    help="Workspace root (default: current directory)",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def load_command(lcov_file: Path, root: Path, as_json: bool) -> None:
    """Load LCOV_FILE and show per-file coverage for the workspace."""
    service = build_service(root)
    result = service.load_coverage(lcov_file.resolve(), track=None if as_json else track_steps)
    error = service.last_error
    if error is None or as_json:
        report_result(result, service.workspace_root, error=error, as_json=as_json)
    if error:
        raise click.ClickException(error)
