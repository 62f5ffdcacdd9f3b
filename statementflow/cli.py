"""Typer CLI interface for StatementFlow."""

import json
import logging
from enum import StrEnum
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from statementflow.config import DEFAULT_DB_PATH, Settings
from statementflow.exceptions import RequestValidationError, StatementFlowError
from statementflow.models.enums import SourceId
from statementflow.models.results import ETLResult

app = typer.Typer(
    name="statementflow",
    help="StatementFlow: unified income statements from QuickBooks and Rootfi.",
)

console = Console()
err_console = Console(stderr=True)


class SourceChoice(StrEnum):
    QUICKBOOKS = "quickbooks"
    ROOTFI = "rootfi"
    ALL = "all"


class OutputFormat(StrEnum):
    TABLE = "table"
    JSON = "json"
    TEXT = "text"


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        envvar="STATEMENTFLOW_LOG_LEVEL",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    ),
) -> None:
    """StatementFlow: unified income statements from QuickBooks and Rootfi."""
    _configure_logging(log_level)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


_DB_OPTION = typer.Option(
    None,
    "--db",
    help=f"Path to the SQLite database file [default: {DEFAULT_DB_PATH}]",
)


def _settings(
    db: Path | None,
    quickbooks_url: str | None = None,
    rootfi_url: str | None = None,
) -> Settings:
    settings = Settings.from_env()
    if db is not None:
        settings.db_path = db
    if quickbooks_url:
        settings.quickbooks.location = quickbooks_url
    if rootfi_url:
        settings.rootfi.location = rootfi_url
    return settings


def _open_orchestrator(settings: Settings):
    """Open the database and build an orchestrator. Returns (conn, orchestrator)."""
    from statementflow.db.repository import StatementRepository
    from statementflow.db.schema import create_schema
    from statementflow.pipeline.orchestrator import ETLOrchestrator

    settings.db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = create_schema(settings.db_path)
    return conn, ETLOrchestrator(settings, StatementRepository(conn))


def _print_result(result: ETLResult) -> None:
    if result.success:
        console.print(f"[green]{result.message}[/green]")
    else:
        err_console.print(f"[red]{escape(result.message)}[/red]")
        for error in result.errors or []:
            err_console.print(f"  - {escape(error)}")
    if result.results is not None:
        tbl = Table(title="Processed", show_header=True)
        tbl.add_column("Companies", justify="right")
        tbl.add_column("Report Periods", justify="right")
        tbl.add_column("Categories", justify="right")
        tbl.add_column("Line Items", justify="right")
        counts = result.results
        tbl.add_row(
            str(counts.companies),
            str(counts.report_periods),
            str(counts.categories),
            str(counts.line_items),
        )
        console.print(tbl)


@app.command()
def process(
    source: SourceChoice = typer.Argument(SourceChoice.ALL, help="Source to process"),
    db: Path | None = _DB_OPTION,
    quickbooks_url: str | None = typer.Option(
        None, "--quickbooks-url", help="QuickBooks report URL or JSON file (env: QUICKBOOKS_URL)"
    ),
    rootfi_url: str | None = typer.Option(
        None, "--rootfi-url", help="Rootfi export URL or JSON file (env: ROOTFI_URL)"
    ),
    refresh: bool = typer.Option(
        False, "--refresh", help="Clear all stored data before processing every source"
    ),
) -> None:
    """Fetch, normalize and store income statements.

    \b
    Sources:
      quickbooks   Hierarchical QuickBooks profit-and-loss report
      rootfi       Flat Rootfi income statement export
      all          Both, QuickBooks first
    """
    settings = _settings(db, quickbooks_url, rootfi_url)
    conn, orchestrator = _open_orchestrator(settings)
    try:
        if refresh:
            result = orchestrator.refresh()
        elif source is SourceChoice.ALL:
            result = orchestrator.process_all()
        else:
            result = orchestrator.process_source(SourceId(source.value))
    finally:
        conn.close()

    _print_result(result)
    if not result.success:
        raise typer.Exit(1)


@app.command()
def merge(
    start: str = typer.Option(..., "--start", help="Period start date (YYYY-MM-DD)"),
    end: str = typer.Option(..., "--end", help="Period end date (YYYY-MM-DD)"),
    db: Path | None = _DB_OPTION,
    fmt: OutputFormat = typer.Option(OutputFormat.TABLE, "--format", "-f", help="Output format"),
) -> None:
    """Merge same-named categories across companies for an exact period."""
    settings = _settings(db)
    conn, orchestrator = _open_orchestrator(settings)
    try:
        merged = orchestrator.merge_categories_by_date_range(start, end)
    except RequestValidationError as exc:
        err_console.print(f"[red]Invalid date format:[/red] {escape(str(exc))}")
        raise typer.Exit(2)
    finally:
        conn.close()

    if fmt is OutputFormat.JSON:
        typer.echo(json.dumps([m.model_dump(mode="json") for m in merged], indent=2))
        return
    if fmt is OutputFormat.TEXT:
        from statementflow.reports.merged_categories import MergedCategoryReportGenerator

        typer.echo(MergedCategoryReportGenerator().render(start, end, merged))
        return

    if not merged:
        console.print(f"No categories found for {start} to {end}")
        return
    tbl = Table(title=f"Merged Categories {start} to {end}", show_header=True)
    tbl.add_column("Category")
    tbl.add_column("Type")
    tbl.add_column("Value", justify="right")
    tbl.add_column("Line Items", justify="right")
    tbl.add_column("Companies")
    for category in merged:
        tbl.add_row(
            category.name,
            category.category_type or "",
            f"{category.value:,.2f}",
            str(len(category.line_items)),
            ", ".join(c.name for c in category.companies),
        )
    console.print(tbl)


@app.command()
def stats(db: Path | None = _DB_OPTION) -> None:
    """Show entity counts in the database."""
    from statementflow.reports.merged_categories import StatisticsReportGenerator

    settings = _settings(db)
    conn, orchestrator = _open_orchestrator(settings)
    try:
        counts = orchestrator.get_statistics()
    finally:
        conn.close()
    typer.echo(StatisticsReportGenerator().render(counts))


@app.command()
def periods(db: Path | None = _DB_OPTION) -> None:
    """List stored report periods by start date."""
    settings = _settings(db)
    conn, orchestrator = _open_orchestrator(settings)
    try:
        report_periods = orchestrator.get_report_dates()
    finally:
        conn.close()

    tbl = Table(title="Report Periods", show_header=True)
    tbl.add_column("ID", justify="right")
    tbl.add_column("Start")
    tbl.add_column("End")
    tbl.add_column("Company")
    for period in report_periods:
        tbl.add_row(str(period.id), period.start_date, period.end_date, period.company.name)
    console.print(tbl)


@app.command()
def categories(
    report_period_id: int = typer.Argument(..., help="Report period ID (see `periods`)"),
    db: Path | None = _DB_OPTION,
) -> None:
    """Show the categories and line items of one report period."""
    settings = _settings(db)
    conn, orchestrator = _open_orchestrator(settings)
    try:
        rows = orchestrator.get_categories_by_report_period(report_period_id)
    finally:
        conn.close()

    if not rows:
        err_console.print(f"No categories for report period {report_period_id}")
        raise typer.Exit(1)
    tbl = Table(title=f"Report Period {report_period_id}", show_header=True)
    tbl.add_column("Category")
    tbl.add_column("Line Item")
    tbl.add_column("Value", justify="right")
    for category in rows:
        tbl.add_row(f"[bold]{category.name}[/bold]", "", f"{category.value:,.2f}")
        for item in category.line_items:
            tbl.add_row("", item.name, f"{item.value:,.2f}")
    console.print(tbl)


@app.command()
def clear(
    db: Path | None = _DB_OPTION,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
) -> None:
    """Delete all stored companies, periods, categories and line items."""
    if not yes:
        typer.confirm("Delete all stored data?", abort=True)
    settings = _settings(db)
    conn, orchestrator = _open_orchestrator(settings)
    try:
        orchestrator.clear_all_data()
    finally:
        conn.close()
    typer.echo("All data cleared")


@app.command()
def inspect(
    source: SourceId = typer.Argument(..., help="Document format"),
    location: str = typer.Argument(..., help="URL or JSON file to inspect"),
) -> None:
    """Parse a source document without storing it and show what it contains."""
    from statementflow.ingestion.fetch import fetch_json
    from statementflow.normalization.base import UnmappedGroup
    from statementflow.normalization.quickbooks import QuickBooksNormalizer
    from statementflow.normalization.rootfi import RootfiNormalizer

    settings = _settings(None)
    unmapped: list[UnmappedGroup] = []
    if source is SourceId.QUICKBOOKS:
        normalizer = QuickBooksNormalizer(
            default_group=settings.default_group, on_unmapped=unmapped.append
        )
    else:
        normalizer = RootfiNormalizer(on_unmapped=unmapped.append)

    try:
        raw = fetch_json(location, timeout=settings.fetch_timeout)
        errors = normalizer.validate(raw)
        if errors:
            for error in errors:
                err_console.print(f"[red]{escape(error)}[/red]")
            raise typer.Exit(1)
        document = normalizer.parse(raw)
        records = normalizer.normalize(document)
    except StatementFlowError as exc:
        err_console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(1)

    typer.echo(f"Periods: {len(records)}")
    if records:
        typer.echo(f"First: {records[0].start_date} to {records[0].end_date}")
        typer.echo(f"Last:  {records[-1].start_date} to {records[-1].end_date}")
    if isinstance(normalizer, QuickBooksNormalizer):
        typer.echo(f"Groups: {', '.join(normalizer.groups(document)) or '(none)'}")
    else:
        summary = normalizer.statistics(document)
        typer.echo(f"Companies: {', '.join(str(c) for c in summary.companies) or '(none)'}")
    if unmapped:
        typer.echo(f"Unmapped rows dropped: {len(unmapped)}")
        for gap in unmapped:
            typer.echo(f"  - [{gap.group}] {gap.label} ({gap.kind})")
