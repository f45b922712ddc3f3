"""Tests for the Excel report generator."""

from __future__ import annotations


import pytest
from openpyxl import load_workbook

from ledger_recon.config import ReconConfig
from ledger_recon.matching.engine import ReconciliationEngine
from ledger_recon.reports.assembler import ReportAssembler
from ledger_recon.reports.excel_generator import ExcelReportGenerator
from ledger_recon.utils.exceptions import ReportGenerationError
from conftest import day


@pytest.fixture
def report(config, make_system, make_bank):
    system = [
        make_system("TRX001", "100.00", offset=1),
        make_system("TRX003", "100.00", offset=1),
        make_system("TRX009", "9.00", offset=2),
    ]
    bank = [
        make_bank("BANK001", "-100.00", offset=1, description="trxID:TRX001"),
        make_bank("BANK003", "-99.95", offset=1, description="trxID:TRX003"),
        make_bank("BANK007", "7.00", offset=2, source="bank_B.csv"),
    ]
    outcome = ReconciliationEngine(config).match(system, bank)
    return ReportAssembler().assemble(day(0), day(7), system, bank, outcome)


class TestExcelReportGenerator:
    def test_writes_all_sheets(self, config, report, tmp_path):
        path = ExcelReportGenerator(config).generate_report(report, tmp_path / "out" / "report.xlsx")

        wb = load_workbook(path)
        assert wb.sheetnames == [
            "Summary",
            "Matched Transactions",
            "Discrepancies",
            "System Only",
            "Bank Only",
        ]
        assert wb["Matched Transactions"].max_row == 3
        assert wb["Discrepancies"].max_row == 2
        assert wb["Discrepancies"]["A2"].value == "TRX003"
        assert wb["System Only"]["A2"].value == "TRX009"
        assert wb["Bank Only"]["A2"].value == "bank_B.csv"

    def test_disabled_and_renamed_sheets(self, report, tmp_path):
        config = ReconConfig()
        config.output.sheets.matched.enabled = False
        config.output.sheets.bank_only.name = "Statement Only"

        path = ExcelReportGenerator(config).generate_report(report, tmp_path / "report.xlsx")

        sheetnames = load_workbook(path).sheetnames
        assert "Matched Transactions" not in sheetnames
        assert "Statement Only" in sheetnames

    def test_unwritable_path(self, config, report, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x")

        with pytest.raises(ReportGenerationError):
            ExcelReportGenerator(config).generate_report(report, blocker / "report.xlsx")
