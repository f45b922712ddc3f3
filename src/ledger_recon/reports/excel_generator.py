"""
Excel report generator for reconciliation results.
Creates a multi-sheet workbook from a ReconciliationReport.
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Sequence
import logging

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.worksheet.worksheet import Worksheet

from ..config import ReconConfig, SheetConfig
from ..models.report import ReconciliationReport
from ..models.transaction import BankTransaction, SystemTransaction
from ..utils.exceptions import ReportGenerationError

logger = logging.getLogger(__name__)

# Style definitions
HEADER_FILL = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
HEADER_FONT = Font(color="FFFFFF", bold=True)
MATCH_FILL = PatternFill(start_color="C6EFCE", end_color="C6EFCE", fill_type="solid")
VARIANCE_FILL = PatternFill(start_color="FFEB9C", end_color="FFEB9C", fill_type="solid")
UNMATCHED_FILL = PatternFill(start_color="FFC7CE", end_color="FFC7CE", fill_type="solid")
THIN_BORDER = Border(
    left=Side(style="thin"),
    right=Side(style="thin"),
    top=Side(style="thin"),
    bottom=Side(style="thin"),
)

SYSTEM_HEADERS = ["trxID", "Amount", "Type", "Transaction Time"]
BANK_HEADERS = ["Bank Source", "Identifier", "Date", "Raw Amount", "Normalized Amount", "Type", "Description"]


class ExcelReportGenerator:
    """Generates Excel reconciliation reports with one sheet per section."""

    def __init__(self, config: ReconConfig):
        """
        Initialize the report generator.

        Args:
            config: Application configuration
        """
        self.config = config
        self.sheet_config = config.output.sheets

    def generate_report(self, report: ReconciliationReport, output_path: Path) -> Path:
        """
        Write the complete reconciliation workbook.

        Args:
            report: Reconciliation report to render
            output_path: Path for the .xlsx file

        Returns:
            Path to the generated workbook

        Raises:
            ReportGenerationError: If the workbook cannot be written
        """
        logger.info(f"Generating Excel report: {output_path}")

        wb = Workbook()
        if wb.active:
            wb.remove(wb.active)

        sheets = self.sheet_config
        if sheets.summary.enabled:
            self._create_summary_sheet(wb, sheets.summary, report)
        if sheets.matched.enabled:
            self._create_matched_sheet(wb, sheets.matched, report)
        if sheets.discrepancies.enabled:
            self._create_discrepancy_sheet(wb, sheets.discrepancies, report)
        if sheets.system_only.enabled:
            self._create_system_only_sheet(wb, sheets.system_only, report)
        if sheets.bank_only.enabled:
            self._create_bank_only_sheet(wb, sheets.bank_only, report)

        # openpyxl refuses to save a workbook without sheets
        if not wb.sheetnames:
            wb.create_sheet("Report")

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            wb.save(output_path)
        except OSError as e:
            raise ReportGenerationError(f"Failed to save Excel report {output_path}: {e}") from e

        logger.info(f"Report saved: {output_path}")
        return output_path

    def _create_summary_sheet(
        self, wb: Workbook, sheet: SheetConfig, report: ReconciliationReport
    ) -> None:
        """Create the summary sheet with key metrics."""
        ws = wb.create_sheet(sheet.name)
        summary = report.reconciliation_summary
        discrepancies = report.discrepant_transactions
        unmatched = report.unmatched_transactions

        ws["A1"] = "Ledger Reconciliation Summary"
        ws["A1"].font = Font(size=16, bold=True)
        ws.merge_cells("A1:D1")

        rows: list[tuple[str, Any]] = [
            ("Generated At:", datetime.now().strftime("%Y-%m-%d %H:%M:%S")),
            ("Period:", f"{summary.timeframe_start} to {summary.timeframe_end}"),
            ("", ""),
            ("System Transactions Processed:", summary.total_system_transactions_processed),
            ("Bank Transactions Processed:", summary.total_bank_transactions_processed),
            ("Matched Transactions:", summary.matched_transactions),
            ("Discrepancies:", discrepancies.count),
            ("Total Discrepancy Value:", float(discrepancies.total_discrepancy_value)),
            ("System Only (Unmatched):", len(unmatched.system_missing_from_bank)),
            ("Bank Only (Unmatched):", unmatched.count - len(unmatched.system_missing_from_bank)),
            ("System Match Rate:", f"{summary.match_rate_system:.1f}%"),
            ("Bank Match Rate:", f"{summary.match_rate_bank:.1f}%"),
        ]

        row = 3
        for label, value in rows:
            ws[f"A{row}"] = label
            ws[f"B{row}"] = value
            ws[f"B{row}"].alignment = Alignment(horizontal="right")
            row += 1

        row += 1
        ws[f"A{row}"] = "Matches by Pass"
        ws[f"A{row}"].font = Font(bold=True)
        for match_pass, count in summary.matches_by_pass.items():
            row += 1
            ws[f"A{row}"] = match_pass
            ws[f"B{row}"] = count

        ws.column_dimensions["A"].width = 34
        ws.column_dimensions["B"].width = 30

    def _create_matched_sheet(
        self, wb: Workbook, sheet: SheetConfig, report: ReconciliationReport
    ) -> None:
        """Create the matched pairs sheet."""
        ws = wb.create_sheet(sheet.name)
        tolerance = self.config.matching.discrepancy_tolerance
        self._write_headers(ws, SYSTEM_HEADERS + BANK_HEADERS + ["Match Pass", "Difference"])

        for row_num, pair in enumerate(report.matched_pairs, start=2):
            difference = pair.amount_difference
            fill = VARIANCE_FILL if difference > tolerance else MATCH_FILL
            values = (
                self._system_row(pair.system_transaction)
                + self._bank_row(pair.bank_transaction)
                + [pair.match_pass.value, float(difference)]
            )
            self._write_row(ws, row_num, values, fill)

        self._auto_fit_columns(ws)

    def _create_discrepancy_sheet(
        self, wb: Workbook, sheet: SheetConfig, report: ReconciliationReport
    ) -> None:
        """Create the discrepancies sheet."""
        ws = wb.create_sheet(sheet.name)
        self._write_headers(ws, SYSTEM_HEADERS + BANK_HEADERS + ["Difference"])

        for row_num, detail in enumerate(report.discrepant_transactions.details, start=2):
            values = (
                self._system_row(detail.system_transaction)
                + self._bank_row(detail.bank_transaction)
                + [float(detail.difference)]
            )
            self._write_row(ws, row_num, values, VARIANCE_FILL)

        self._auto_fit_columns(ws)

    def _create_system_only_sheet(
        self, wb: Workbook, sheet: SheetConfig, report: ReconciliationReport
    ) -> None:
        """Create the system-only transactions sheet."""
        ws = wb.create_sheet(sheet.name)
        self._write_headers(ws, SYSTEM_HEADERS)

        system_only = report.unmatched_transactions.system_missing_from_bank
        for row_num, txn in enumerate(system_only, start=2):
            self._write_row(ws, row_num, self._system_row(txn), UNMATCHED_FILL)

        self._auto_fit_columns(ws)

    def _create_bank_only_sheet(
        self, wb: Workbook, sheet: SheetConfig, report: ReconciliationReport
    ) -> None:
        """Create the bank-only transactions sheet, grouped by statement file."""
        ws = wb.create_sheet(sheet.name)
        self._write_headers(ws, BANK_HEADERS)

        row_num = 2
        for txns in report.unmatched_transactions.bank_missing_from_system.values():
            for txn in txns:
                self._write_row(ws, row_num, self._bank_row(txn), UNMATCHED_FILL)
                row_num += 1

        self._auto_fit_columns(ws)

    def _system_row(self, txn: SystemTransaction) -> list[Any]:
        time = txn.transaction_time
        if time.tzinfo is not None:
            # Excel cells cannot hold timezone-aware datetimes
            time = time.isoformat()
        return [txn.trx_id, float(txn.amount), txn.type.value, time]

    def _bank_row(self, txn: BankTransaction) -> list[Any]:
        return [
            txn.bank_source,
            txn.unique_identifier,
            txn.date,
            float(txn.amount),
            float(txn.normalized_amount),
            txn.type.value,
            txn.description,
        ]

    def _write_headers(self, ws: Worksheet, headers: Sequence[str]) -> None:
        for col, header in enumerate(headers, start=1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.fill = HEADER_FILL
            cell.font = HEADER_FONT
            cell.border = THIN_BORDER

    def _write_row(
        self, ws: Worksheet, row_num: int, values: Sequence[Any], fill: Optional[PatternFill]
    ) -> None:
        for col, value in enumerate(values, start=1):
            cell = ws.cell(row=row_num, column=col, value=value)
            cell.border = THIN_BORDER
            if fill is not None:
                cell.fill = fill

    def _auto_fit_columns(self, ws: Worksheet) -> None:
        """Auto-fit column widths based on content."""
        for column_cells in ws.columns:
            max_length = max(
                (len(str(cell.value)) for cell in column_cells if cell.value is not None),
                default=0,
            )
            column = column_cells[0].column_letter
            ws.column_dimensions[column].width = min(max_length + 2, 50)
