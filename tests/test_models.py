"""Tests for transaction and report models."""

from __future__ import annotations

import dataclasses
from datetime import date
from decimal import Decimal

import pytest

from ledger_recon.models import (
    BankTransaction,
    MatchedPair,
    MatchPass,
    ReconciliationReport,
    ReconciliationSummary,
    TransactionType,
)


class TestBankTransaction:
    def test_negative_amount_is_debit(self, make_bank):
        txn = make_bank("BANK001", "-100.00")

        assert txn.type is TransactionType.DEBIT
        assert txn.normalized_amount == Decimal("100.00")
        assert txn.amount == Decimal("-100.00")

    def test_positive_amount_is_credit(self, make_bank):
        txn = make_bank("BANK002", "250.50")

        assert txn.type is TransactionType.CREDIT
        assert txn.normalized_amount == Decimal("250.50")

    def test_zero_amount_is_credit(self, make_bank):
        assert make_bank("BANK003", "0").type is TransactionType.CREDIT

    def test_float_amount_is_coerced_to_decimal(self):
        txn = BankTransaction("B1", -12.5, date(2025, 1, 1), "", "a.csv")

        assert txn.amount == Decimal("-12.5")
        assert txn.normalized_amount == Decimal("12.5")

    def test_derived_fields_cannot_be_overridden(self, make_bank):
        txn = make_bank("BANK001", "-100.00")

        with pytest.raises(dataclasses.FrozenInstanceError):
            txn.type = TransactionType.CREDIT  # type: ignore[misc]
        with pytest.raises(dataclasses.FrozenInstanceError):
            txn.normalized_amount = Decimal("1")  # type: ignore[misc]

    def test_claim_key_includes_source_file(self, make_bank):
        a = make_bank("BANK001", "10", source="bank_A.csv")
        b = make_bank("BANK001", "10", source="bank_B.csv")

        assert a.claim_key != b.claim_key

    def test_to_dict_uses_raw_amount(self, make_bank):
        data = make_bank("BANK001", "-100.00", description="Purchase").to_dict()

        assert data == {
            "unique_identifier": "BANK001",
            "amount": -100.0,
            "date": "2025-01-01",
            "description": "Purchase",
            "bank_source": "bank_A.csv",
        }


class TestSystemTransaction:
    def test_day_drops_time_of_day(self, make_system):
        txn = make_system("TRX001", "100.00", offset=1, hour=23)

        assert txn.day == date(2025, 1, 2)

    def test_to_dict(self, make_system):
        data = make_system("TRX001", "100.00", TransactionType.CREDIT).to_dict()

        assert data["trxID"] == "TRX001"
        assert data["amount"] == 100.0
        assert data["type"] == "CREDIT"
        assert data["transactionTime"].startswith("2025-01-01T00:00:00")


class TestMatchedPair:
    def test_amount_difference_uses_normalized_bank_amount(self, make_system, make_bank):
        pair = MatchedPair(
            make_system("TRX003", "100.00"),
            make_bank("BANK003", "-99.95"),
            MatchPass.REFERENCE,
        )

        assert pair.amount_difference == Decimal("0.05")


class TestReconciliationReport:
    def test_empty_report_has_empty_containers(self):
        report = ReconciliationReport(ReconciliationSummary("2025-01-01", "2025-01-31"))

        data = report.to_dict()

        assert data["discrepant_transactions"] == {
            "count": 0,
            "total_discrepancy_value": 0.0,
            "details": [],
        }
        assert data["unmatched_transactions"] == {
            "count": 0,
            "system_missing_from_bank": [],
            "bank_missing_from_system": {},
        }
        assert "matched_pairs" not in data

    def test_include_matches(self, make_system, make_bank):
        pair = MatchedPair(make_system("T1", "5"), make_bank("B1", "-5"), MatchPass.EXACT)
        report = ReconciliationReport(
            ReconciliationSummary("2025-01-01", "2025-01-31"), matched_pairs=[pair]
        )

        data = report.to_dict(include_matches=True)

        assert data["matched_pairs"][0]["match_pass"] == "exact"

    def test_match_rates_with_no_transactions(self):
        summary = ReconciliationSummary("2025-01-01", "2025-01-31")

        assert summary.match_rate_system == 0.0
        assert summary.match_rate_bank == 0.0
