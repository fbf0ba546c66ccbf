"""enumsync CLI - enumsync command."""

from pathlib import Path

import click

from enumsync import __version__
from enumsync.cli.refactor import refactor_command
from enumsync.cli.sync import sync_command
from enumsync.core.logging import configure_logging, set_run_id


@click.group()
@click.version_option(version=__version__, prog_name="enumsync")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Project root (default: current directory)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, root: Path | None) -> None:
    """enumsync - Generate TypeScript enums from Python enums and refactor hardcoded values."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["root"] = (root or Path.cwd()).resolve()
    configure_logging(level="DEBUG" if verbose else "WARNING")
    set_run_id()


cli.add_command(sync_command, name="sync")
cli.add_command(refactor_command, name="refactor")


if __name__ == "__main__":
    cli()
