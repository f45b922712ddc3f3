"""Tests for the DiscrepancyEvaluator."""

from __future__ import annotations

from decimal import Decimal

import pytest

from ledger_recon.matching.discrepancy import DiscrepancyEvaluator
from ledger_recon.models import MatchedPair, MatchPass


def _pair(make_system, make_bank, system_amount: str, bank_amount: str) -> MatchedPair:
    return MatchedPair(
        make_system("TRX", system_amount),
        make_bank("BANK", bank_amount),
        MatchPass.REFERENCE,
    )


class TestDiscrepancyEvaluator:
    def test_clean_match_records_nothing(self, make_system, make_bank):
        evaluator = DiscrepancyEvaluator()

        assert evaluator.evaluate(_pair(make_system, make_bank, "100.00", "-100.00")) is False
        assert evaluator.result.count == 0
        assert evaluator.result.details == []

    @pytest.mark.parametrize("bank_amount", ["-100.001", "-99.999"])
    def test_difference_at_tolerance_is_clean(self, make_system, make_bank, bank_amount):
        evaluator = DiscrepancyEvaluator()

        assert evaluator.evaluate(_pair(make_system, make_bank, "100.000", bank_amount)) is False

    def test_difference_above_tolerance_is_flagged(self, make_system, make_bank):
        evaluator = DiscrepancyEvaluator()

        flagged = evaluator.evaluate(_pair(make_system, make_bank, "100.00", "-99.95"))

        assert flagged is True
        assert evaluator.result.count == 1
        assert evaluator.result.total_discrepancy_value == Decimal("0.05")
        assert evaluator.result.details[0].difference == Decimal("0.05")

    def test_total_is_sum_of_absolute_differences(self, make_system, make_bank):
        pairs = [
            _pair(make_system, make_bank, "100.00", "-99.95"),
            _pair(make_system, make_bank, "250.50", "251.00"),
            _pair(make_system, make_bank, "10.00", "-10.0005"),
        ]

        result = DiscrepancyEvaluator().evaluate_all(pairs)

        assert result.count == 2
        assert result.total_discrepancy_value == Decimal("0.55")
        assert len(result.details) == 2

    def test_custom_tolerance(self, make_system, make_bank):
        evaluator = DiscrepancyEvaluator(tolerance=Decimal("0.10"))

        assert evaluator.evaluate(_pair(make_system, make_bank, "100.00", "-99.95")) is False

    def test_reused_evaluator_does_not_double_count(self, make_system, make_bank):
        evaluator = DiscrepancyEvaluator()
        pairs = [_pair(make_system, make_bank, "100.00", "-99.95")]

        first = evaluator.evaluate_all(pairs)
        second = evaluator.evaluate_all(pairs)

        assert second.count == 1
        assert second.total_discrepancy_value == Decimal("0.05")
        assert first.count == 1
