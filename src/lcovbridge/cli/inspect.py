"""lcov-bridge inspect command - show line, branch and function detail for one file."""

import json
from pathlib import Path

import click

from lcovbridge.cli.utils import build_service, detail_to_dict, format_detail
from lcovbridge.core.progress import get_console


@click.command()
@click.argument("file", type=click.Path(path_type=Path))
@click.option(
    "--lcov",
    "lcov_file",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="LCOV report to read",
)
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    help="Workspace root (default: current directory)",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def inspect_command(file: Path, lcov_file: Path, root: Path, as_json: bool) -> None:
    """Show the coverage detail LCOV_FILE holds for FILE."""
    service = build_service(root)
    service.load_coverage(lcov_file.resolve())
    if service.last_error:
        raise click.ClickException(service.last_error)

    target = file if file.is_absolute() else Path.cwd() / file
    inspection = service.inspect(target)
    if inspection is None:
        raise click.ClickException(f"No coverage record found for {file}")

    record = inspection.record
    if as_json:
        click.echo(
            json.dumps(
                {
                    "path": inspection.identity.path,
                    "reported_path": record.reported_path,
                    "lines": [record.lines.hit, record.lines.found],
                    "functions": [record.functions.hit, record.functions.found],
                    "branches": [record.branches.hit, record.branches.found],
                    "details": [detail_to_dict(item) for item in inspection.details],
                },
                indent=2,
            )
        )
        return

    console = get_console()
    console.print(f"[bold]{inspection.identity.path}[/bold]", highlight=False)
    console.print(f"  reported as {record.reported_path}", highlight=False)
    console.print(
        f"  lines {record.lines.hit}/{record.lines.found}, "
        f"functions {record.functions.hit}/{record.functions.found}, "
        f"branches {record.branches.hit}/{record.branches.found}",
        highlight=False,
    )
    if not inspection.details:
        console.print("  (no line-level detail in report)")
    for item in inspection.details:
        console.print(format_detail(item), highlight=False)
