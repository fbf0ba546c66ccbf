"""enumsync sync command - regenerate TypeScript enum modules."""

import json

import click
from rich.table import Table

from enumsync.cli.utils import fail, load_project_config
from enumsync.core.errors import EnumSyncError
from enumsync.core.formatting import display_path
from enumsync.core.progress import get_console, status
from enumsync.sync.ops import SyncOps, SyncResult

_ACTION_STYLES = {
    "generated": "[green]generated[/green]",
    "would_generate": "[yellow]would generate[/yellow]",
    "skipped": "[dim]unchanged[/dim]",
}


def _print_result(result: SyncResult) -> None:
    console = get_console()
    table = Table(show_edge=False)
    table.add_column("Enum", style="cyan")
    table.add_column("File")
    table.add_column("Status")
    for outcome in result.outcomes:
        table.add_row(outcome.qualified_name, outcome.file, _ACTION_STYLES[outcome.action])
    console.print(table)
    console.print()

    for name in result.deleted:
        status(f"Removed orphaned {name}", style="warning")

    verb = "Would generate" if result.dry_run else "Generated"
    status(
        f"{verb} {result.generated}, unchanged {result.skipped} ({result.total} total)",
        style="success",
    )


@click.command()
@click.option("--force", is_flag=True, help="Regenerate every file even when unchanged")
@click.option("--dry-run", is_flag=True, help="Show what would be generated without writing")
@click.option("--only", metavar="FQN", default=None, help="Regenerate one enum by qualified name")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    show_default=True,
    help="Output format",
)
@click.option("-q", "--quiet", is_flag=True, help="Suppress output except errors")
@click.pass_context
def sync_command(
    ctx: click.Context,
    force: bool,
    dry_run: bool,
    only: str | None,
    output_format: str,
    quiet: bool,
) -> None:
    """Generate TypeScript modules for every discovered enum.

    Unchanged enums are skipped based on the manifest hashes unless --force
    is given.
    """
    config = load_project_config(ctx)
    ops = SyncOps(config)

    try:
        result = ops.sync(force=force, dry_run=dry_run, only=only)
    except EnumSyncError as e:
        raise fail(e) from e

    if output_format == "json":
        click.echo(json.dumps(result.to_dict(), indent=2))
        return
    if quiet:
        return

    _print_result(result)
    if not dry_run:
        status(f"Output: {display_path(config.output_path, config.project_root)}", style="info")
