"""
Command-line interface for the ledger reconciliation tool.
"""

from datetime import date, datetime
from pathlib import Path
from typing import Optional
import logging
import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from . import __version__
from .config import load_config, generate_default_config
from .models.report import ReconciliationReport
from .parsers.bank_parser import BankStatementParser
from .parsers.repository import CSVTransactionRepository
from .parsers.system_parser import SystemTransactionParser
from .reports.excel_generator import ExcelReportGenerator
from .reports.json_writer import write_json_report
from .service import ReconciliationService
from .utils.logging_config import setup_logging

# stdout carries the JSON report; everything human-facing goes to stderr
console = Console(stderr=True)

DATE_TYPE = click.DateTime(formats=["%Y-%m-%d"])


@click.group()
@click.version_option(version=__version__)
def main():
    """System ledger vs. bank statement reconciliation tool."""
    pass


@main.command()
@click.option(
    "-s",
    "--system",
    "system_file",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to the system transactions CSV file",
)
@click.option(
    "-b",
    "--bank",
    "bank_files",
    required=True,
    multiple=True,
    help="Bank statement CSV file(s); repeat the option or separate paths with commas",
)
@click.option("--start", "start", required=True, type=DATE_TYPE, help="Start date (YYYY-MM-DD)")
@click.option("--end", "end", required=True, type=DATE_TYPE, help="End date (YYYY-MM-DD)")
@click.option(
    "-c",
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file (YAML)",
)
@click.option("-o", "--output", type=click.Path(path_type=Path), help="Write the JSON report to a file")
@click.option("--excel", type=click.Path(path_type=Path), help="Also write an Excel report")
@click.option("--include-matches", is_flag=True, help="List every matched pair in the JSON report")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
def reconcile(
    system_file: Path,
    bank_files: tuple[str, ...],
    start: datetime,
    end: datetime,
    config: Optional[Path],
    output: Optional[Path],
    excel: Optional[Path],
    include_matches: bool,
    verbose: bool,
):
    """
    Reconcile system transactions against one or more bank statements.
    """
    start_date: date = start.date()
    end_date: date = end.date()
    if start_date > end_date:
        raise click.BadParameter("start date must not be after end date", param_hint="'--start'")

    bank_paths = _split_bank_paths(bank_files)
    if not bank_paths:
        raise click.BadParameter("at least one bank statement file is required", param_hint="'--bank'")

    try:
        recon_config = load_config(config)
        log_file = Path(recon_config.logging.file) if recon_config.logging.file else None
        setup_logging(
            logging.DEBUG if verbose else recon_config.logging.level,
            log_file=log_file,
            log_format=recon_config.logging.format,
        )

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task("Running reconciliation...", total=None)
            service = ReconciliationService(CSVTransactionRepository(recon_config), recon_config)
            report = service.reconcile(system_file, bank_paths, start_date, end_date)
            progress.update(task, completed=True)

        _display_summary(report)

        json_config = recon_config.output.json_report
        content = write_json_report(
            report,
            output_path=output,
            indent=json_config.indent,
            include_matches=include_matches or json_config.include_matches,
        )
        if output is None:
            click.echo(content)
        else:
            console.print(f"[green]Report written: {output}[/green]")

        if excel is not None:
            report_path = ExcelReportGenerator(recon_config).generate_report(report, excel)
            console.print(f"[green]Excel report generated: {report_path}[/green]")

    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]", soft_wrap=True)
        if verbose:
            console.print_exception()
        sys.exit(1)


@main.command("parse-system")
@click.argument("system_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-c", "--config", type=click.Path(exists=True, path_type=Path))
def parse_system(system_file: Path, config: Optional[Path]):
    """
    Parse a system transactions file and display a preview.

    SYSTEM_FILE: Path to the system transactions CSV file
    """
    try:
        parser = SystemTransactionParser(load_config(config))
        transactions = parser.parse_file(system_file)
    except Exception as e:
        console.print(f"[red]Error parsing file: {escape(str(e))}[/red]", soft_wrap=True)
        sys.exit(1)

    table = Table(title=f"System Transactions: {system_file.name}")
    table.add_column("trxID")
    table.add_column("Amount", justify="right")
    table.add_column("Type")
    table.add_column("Transaction Time")

    for txn in transactions[:20]:  # Show first 20
        table.add_row(
            txn.trx_id,
            f"{txn.amount:,.2f}",
            txn.type.value,
            txn.transaction_time.isoformat(),
        )

    console.print(table)
    if len(transactions) > 20:
        console.print(f"\n... and {len(transactions) - 20} more transactions")
    console.print(f"\nTotal transactions: {len(transactions)}")


@main.command("parse-bank")
@click.argument(
    "bank_files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option("-c", "--config", type=click.Path(exists=True, path_type=Path))
def parse_bank(bank_files: tuple[Path, ...], config: Optional[Path]):
    """
    Parse bank statement files and display a preview.

    BANK_FILES: Paths to bank statement CSV files
    """
    try:
        parser = BankStatementParser(load_config(config))
        transactions = parser.parse_files(bank_files)
    except Exception as e:
        console.print(f"[red]Error parsing file: {escape(str(e))}[/red]", soft_wrap=True)
        sys.exit(1)

    table = Table(title="Bank Transactions")
    table.add_column("Source")
    table.add_column("Identifier")
    table.add_column("Date")
    table.add_column("Amount", justify="right")
    table.add_column("Type")
    table.add_column("Description")

    for txn in transactions[:20]:  # Show first 20
        table.add_row(
            txn.bank_source,
            txn.unique_identifier,
            str(txn.date),
            f"{txn.amount:,.2f}",
            txn.type.value,
            txn.description[:40] + "..." if len(txn.description) > 40 else txn.description,
        )

    console.print(table)
    if len(transactions) > 20:
        console.print(f"\n... and {len(transactions) - 20} more transactions")
    console.print(f"\nTotal transactions: {len(transactions)}")


@main.command("init-config")
@click.option(
    "-o", "--output", type=click.Path(path_type=Path), default=Path("config.yaml")
)
def init_config(output: Path):
    """Generate a sample configuration file."""
    generate_default_config(output)
    console.print(f"[green]Configuration file generated: {output}[/green]")


def _split_bank_paths(values: tuple[str, ...]) -> list[Path]:
    """Flatten repeated and comma-separated --bank values."""
    paths: list[Path] = []
    for value in values:
        for part in value.split(","):
            part = part.strip()
            if part:
                paths.append(Path(part))
    return paths


def _display_summary(report: ReconciliationReport) -> None:
    """Display reconciliation summary in console."""
    summary = report.reconciliation_summary
    discrepancies = report.discrepant_transactions
    unmatched = report.unmatched_transactions

    table = Table(title="Reconciliation Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Period", f"{summary.timeframe_start} to {summary.timeframe_end}")
    table.add_row("System Transactions", str(summary.total_system_transactions_processed))
    table.add_row("Bank Transactions", str(summary.total_bank_transactions_processed))
    table.add_row("Matched", str(summary.matched_transactions))
    for match_pass, count in summary.matches_by_pass.items():
        table.add_row(f"  via {match_pass}", str(count))
    table.add_row("Discrepancies", str(discrepancies.count))
    table.add_row("Total Discrepancy", f"{discrepancies.total_discrepancy_value:,.2f}")
    table.add_row("System Only", str(len(unmatched.system_missing_from_bank)))
    table.add_row("Bank Only", str(unmatched.count - len(unmatched.system_missing_from_bank)))
    table.add_row("System Match Rate", f"{summary.match_rate_system:.1f}%")
    table.add_row("Bank Match Rate", f"{summary.match_rate_bank:.1f}%")

    console.print(table)


if __name__ == "__main__":
    main()
