"""lcov-bridge watch command - reload coverage whenever the report changes."""

import asyncio
from pathlib import Path

import click

from lcovbridge.cli.load import report_result
from lcovbridge.cli.utils import build_service
from lcovbridge.core.progress import status
from lcovbridge.reconcile.session import LoadResult


@click.command()
@click.argument("lcov_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    help="Workspace root (default: current directory)",
)
def watch_command(lcov_file: Path, root: Path) -> None:
    """Load LCOV_FILE, then reload it on every change until interrupted."""
    service = build_service(root)
    if not service.config.coverage.watch_lcov_file:
        raise click.ClickException(
            "Watching is disabled (coverage.watch_lcov_file is false in config)"
        )

    lcov_path = lcov_file.resolve()
    result = service.load_coverage(lcov_path)
    report_result(result, service.workspace_root, error=service.last_error, as_json=False)

    def _on_reload(reloaded: LoadResult) -> None:
        status(f"Reloaded: {service.status_text} ({service.status_tooltip})", style="info")
        if service.last_error:
            status(service.last_error, style="error")
        elif reloaded.unresolved:
            status(f"{reloaded.unresolved} unresolved", style="warning")

    status(f"Watching {lcov_path} (Ctrl+C to stop)")
    try:
        asyncio.run(service.watch(lcov_path, on_reload=_on_reload))
    except KeyboardInterrupt:
        status("Stopped watching", style="info")
