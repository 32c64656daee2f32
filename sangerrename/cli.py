"""CLI entrypoints."""

import logging
from datetime import date
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from sangerrename.config import RenameConfig, parse_alias
from sangerrename.dates import format_yymmdd, parse_yymmdd
from sangerrename.display import display_name, printable
from sangerrename.exceptions import ConfigurationError, ValidationError
from sangerrename.models.extraction import Vendor
from sangerrename.models.rename import OutcomeStatus, RenameOutcome
from sangerrename.processors.rename_executor import RenameExecutor
from sangerrename.processors.vendor_registry import DEFAULT_SAMPLE_SIZE, VendorRegistry
from sangerrename.prompter import ConsolePrompter
from sangerrename.workflow import RenameWorkflow


console = Console()

STATUS_STYLES = {
    OutcomeStatus.RENAMED: "green",
    OutcomeStatus.SKIPPED: "yellow",
    OutcomeStatus.FAILED: "red",
}


def setup_logging(verbose: bool) -> None:
    """Route log records through rich. Warnings only, unless verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=verbose)],
        force=True,
    )


def _unique_paths(input_files: tuple[str, ...]) -> list[Path]:
    """Drop repeated paths while keeping the order they were given in."""
    seen: set[Path] = set()
    paths: list[Path] = []
    for name in input_files:
        path = Path(name)
        key = path.resolve()
        if key in seen:
            continue
        seen.add(key)
        paths.append(path)
    return paths


def _parse_vendor(ctx: click.Context, param: click.Parameter, value: str | None) -> Vendor | None:
    if value is None:
        return None
    try:
        return Vendor.from_name(value)
    except ConfigurationError as e:
        raise click.BadParameter(str(e)) from e


def _parse_date(ctx: click.Context, param: click.Parameter, value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return parse_yymmdd(value)
    except ValidationError as e:
        raise click.BadParameter(str(e)) from e


def _parse_aliases(ctx: click.Context, param: click.Parameter, value: tuple[str, ...]) -> dict[str, str]:
    aliases: dict[str, str] = {}
    for text in value:
        try:
            old, new = parse_alias(text)
        except ValidationError as e:
            raise click.BadParameter(str(e)) from e
        aliases[old] = new
    return aliases


def summary_table(outcomes: list[RenameOutcome]) -> Table:
    """End-of-run report with one row per file."""
    table = Table(show_header=True, header_style="bold", title="Summary")
    table.add_column("Original", style="cyan")
    table.add_column("New Name", style="green")
    table.add_column("Status", justify="right")
    table.add_column("Reason", style="dim")

    for outcome in outcomes:
        style = STATUS_STYLES[outcome.status]
        table.add_row(
            escape(display_name(outcome.source_path)),
            escape(display_name(outcome.target_path)),
            f"[{style}]{outcome.status.value}[/{style}]",
            escape(printable(outcome.reason)),
        )

    return table


@click.command(context_settings=dict(show_default=True))
@click.argument("input_files", type=click.Path(exists=True, dir_okay=False), nargs=-1, required=True)
@click.option(
    "--vendor",
    type=click.Choice([vendor.value for vendor in Vendor], case_sensitive=False),
    default=None,
    envvar="SANGER_RENAME_VENDOR",
    callback=_parse_vendor,
    help="Vendor to suggest instead of detecting it. Still confirmed interactively.",
)
@click.option(
    "--date",
    "default_date",
    type=str,
    default=None,
    envvar="SANGER_RENAME_DATE",
    callback=_parse_date,
    help="Date (YYMMDD) offered by default. Defaults to today.",
)
@click.option(
    "--primer-alias",
    "primer_aliases",
    multiple=True,
    callback=_parse_aliases,
    help="Rename an extracted primer before editing, as OLD=NEW. Repeatable.",
)
@click.option(
    "--sample-size",
    type=click.IntRange(min=1),
    default=DEFAULT_SAMPLE_SIZE,
    help="Number of files inspected when detecting the vendor.",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Show debug logging.")
def cli(
    input_files: tuple[str, ...],
    vendor: Vendor | None,
    default_date: date | None,
    primer_aliases: dict[str, str],
    sample_size: int,
    verbose: bool,
) -> None:
    """sanger-rename - Standardize Sanger sequencing result filenames.

    Renames vendor files such as .ab1 and .seq to YYMMDD.TEMPLATE.PRIMER.ext
    after walking you through vendor, name and date selection.

    Examples:

        sanger-rename *.ab1

        sanger-rename --vendor genewiz --date 250601 TL1-T25_A01.ab1
    """
    setup_logging(verbose)

    paths = _unique_paths(input_files)
    config = RenameConfig(
        today=default_date or date.today(),
        vendor=vendor,
        sample_size=sample_size,
        primer_aliases=primer_aliases,
    )
    console.print(
        f"Renaming [bold cyan]{len(paths)}[/bold cyan] file(s), "
        f"default date [bold magenta]{format_yymmdd(config.today)}[/bold magenta]"
    )
    console.print()

    workflow = RenameWorkflow(paths, prompter=ConsolePrompter(console), config=config, registry=VendorRegistry())
    try:
        batch = workflow.run()
    except ConfigurationError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise SystemExit(1) from e

    if batch is None:
        console.print("[yellow]Aborted. No files were renamed.[/yellow]")
        return

    console.print("[cyan]Applying renames...[/cyan]")
    outcomes = RenameExecutor().execute(batch)

    console.print()
    console.print(summary_table(outcomes))

    renamed = sum(1 for outcome in outcomes if outcome.status is OutcomeStatus.RENAMED)
    skipped = sum(1 for outcome in outcomes if outcome.status is OutcomeStatus.SKIPPED)
    failed = sum(1 for outcome in outcomes if outcome.status is OutcomeStatus.FAILED)
    console.print(
        f"[bold green]Renamed {renamed}[/bold green], "
        f"[yellow]skipped {skipped}[/yellow], "
        f"[red]failed {failed}[/red] of {len(outcomes)} file(s)."
    )

    if failed:
        raise SystemExit(1)
