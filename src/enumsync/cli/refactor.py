"""enumsync refactor command - find and replace hardcoded enum values."""

import json
from collections import Counter
from pathlib import Path

import click
from rich.markup import escape
from rich.table import Table

from enumsync.cli.utils import fail, load_project_config
from enumsync.core.errors import DiscoveryError, EnumSyncError
from enumsync.core.progress import get_console, make_count_table, status
from enumsync.refactor.keys import KeyNormalizationIssue
from enumsync.refactor.ops import RefactorOps
from enumsync.refactor.reports import export_report, group_by_file, summary_json
from enumsync.refactor.scanner import MATCH_MODES, ScanIssue
from enumsync.refactor.suggestions import generate_suggestion


def _print_summary(issues: list[ScanIssue], enums_loaded: int, detailed: bool) -> None:
    console = get_console()
    if not issues:
        status(f"No hardcoded enum values found ({enums_loaded} enums loaded)", style="success")
        return

    status(f"Found {len(issues)} hardcoded enum values", style="warning")
    console.print()
    console.print(
        make_count_table("By enum", dict(Counter(i.enum for i in issues)), label="Enum")
    )
    console.print()
    console.print(
        make_count_table("By file", dict(Counter(i.file for i in issues)), label="File")
    )

    if detailed:
        for file, file_issues in group_by_file(issues).items():
            console.print()
            console.print(f"[bold]{file}[/bold]", highlight=False)
            for issue in file_issues:
                console.print(
                    f"  {issue.line}: [red]{escape(issue.code)}[/red] -> "
                    f"[green]{escape(generate_suggestion(issue))}[/green]",
                    highlight=False,
                )


def _print_preview(ops: RefactorOps, issues: list[ScanIssue]) -> None:
    console = get_console()
    table = Table(show_edge=False)
    table.add_column("Location", style="cyan")
    table.add_column("Current")
    table.add_column("Proposed", style="green")
    for change in ops.proposed_changes(issues):
        table.add_row(f"{change.file}:{change.line}", escape(change.old), escape(change.new))
    console.print(table)
    status(f"{len(issues)} changes would be applied (dry run)", style="info")


def _print_backups(backups: dict[str, str]) -> None:
    if backups:
        first = next(iter(backups.values()))
        status(f"Backups written to {Path(first).parent}", style="info")


def _run_key_normalization(
    ops: RefactorOps,
    enum_name: str | None,
    path: str | None,
    fix: bool,
    dry_run: bool,
    backup: bool,
    as_json: bool,
) -> None:
    enums = ops.load_enums(enum_name)
    if not enums:
        raise DiscoveryError.no_enums_found(ops.enum_paths)
    issues: list[KeyNormalizationIssue] = ops.normalize_keys(enums, path)

    if as_json:
        click.echo(json.dumps([issue.to_dict() for issue in issues], indent=2))
        return
    if not issues:
        status("All enum keys are already UPPERCASE", style="success")
        return

    console = get_console()
    table = Table(show_edge=False)
    table.add_column("Enum", style="cyan")
    table.add_column("Key")
    table.add_column("New key", style="green")
    table.add_column("References", justify="right")
    for issue in issues:
        table.add_row(issue.enum, issue.old_key, issue.new_key, str(len(issue.references)))
    console.print(table)

    if not fix or dry_run:
        status(f"{len(issues)} keys would be renamed", style="info")
        return

    result = ops.apply_key_normalization(issues, with_backup=backup)
    status(
        f"Renamed {result.keys_changed} keys, updated {result.references_updated} "
        f"references in {result.files_changed} files",
        style="success",
    )
    _print_backups(result.backups)


@click.command()
@click.option("--fix", is_flag=True, help="Apply the suggested replacements")
@click.option("--dry-run", is_flag=True, help="Preview replacements without writing")
@click.option("--enum", "enum_name", metavar="NAME", default=None, help="Only this enum")
@click.option("--path", default=None, help="Directory to scan (default: refactor.path)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--backup", is_flag=True, help="Back up files before modifying them")
@click.option("--exclude", multiple=True, help="Skip paths containing this fragment")
@click.option(
    "--report",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Export a report (.json, .csv or .md)",
)
@click.option("--detailed", is_flag=True, help="List every issue with its suggestion")
@click.option("--normalize-keys", is_flag=True, help="Rename enum keys to UPPERCASE")
@click.option(
    "--mode",
    type=click.Choice(MATCH_MODES),
    default=None,
    help="Matching mode (default: refactor.match_mode)",
)
@click.pass_context
def refactor_command(
    ctx: click.Context,
    fix: bool,
    dry_run: bool,
    enum_name: str | None,
    path: str | None,
    as_json: bool,
    backup: bool,
    exclude: tuple[str, ...],
    report: Path | None,
    detailed: bool,
    normalize_keys: bool,
    mode: str | None,
) -> None:
    """Find hardcoded values that should reference enum members.

    Scans by default; --dry-run previews the rewrite and --fix applies it.
    """
    config = load_project_config(ctx)
    ops = RefactorOps(config)

    try:
        if normalize_keys:
            _run_key_normalization(ops, enum_name, path, fix, dry_run, backup, as_json)
            return

        enums = ops.load_enums(enum_name)
        if not enums:
            raise DiscoveryError.no_enums_found(ops.enum_paths)
        issues = ops.scan(
            path=path,
            exclude=exclude,
            target_enums=[enum_name] if enum_name else None,
            match_mode=mode,  # type: ignore[arg-type]
        )
    except EnumSyncError as e:
        raise fail(e) from e

    if report is not None:
        written = export_report(report, issues, len(enums))
        if not as_json:
            status(f"Report written to {written}", style="success")

    if as_json:
        click.echo(json.dumps(summary_json(issues, len(enums)), indent=2))
        return

    _print_summary(issues, len(enums), detailed)
    if not issues:
        return

    if dry_run:
        _print_preview(ops, issues)
    elif fix:
        result = ops.apply_fixes(issues, with_backup=backup)
        status(
            f"Applied {result.changes_applied} changes in {result.files_changed} files",
            style="success",
        )
        _print_backups(result.backups)
    else:
        status("Run with --dry-run to preview or --fix to apply", style="info")
