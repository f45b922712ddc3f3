"""Unit tests for the individual matching passes."""

from __future__ import annotations

from decimal import Decimal

import pytest

from ledger_recon.models import MatchPass, TransactionType
from ledger_recon.matching.strategies import (
    ClaimSet,
    GroupKey,
    GroupedExactStrategy,
    ReferenceMatchStrategy,
    group_key,
    quantize_amount,
)
from conftest import day

DEBIT = TransactionType.DEBIT
CREDIT = TransactionType.CREDIT


# ------------------------------------------------------------------
# Quantization
# ------------------------------------------------------------------


class TestQuantizeAmount:
    @pytest.mark.parametrize(
        "amount, expected",
        [
            ("100", 10000),
            ("100.00", 10000),
            ("250.5", 25050),
            ("0.004", 0),
            ("0.005", 1),
            ("99.999", 10000),
            ("-12.345", -1235),
        ],
    )
    def test_rounds_to_cents(self, amount, expected):
        assert quantize_amount(Decimal(amount)) == expected

    def test_custom_precision(self):
        assert quantize_amount(Decimal("1.23456"), precision=4) == 12346
        assert quantize_amount(Decimal("7.6"), precision=0) == 8


class TestGroupKey:
    def test_bank_key_uses_normalized_amount(self, make_bank):
        key = group_key(make_bank("B1", "-100.001", offset=2))

        assert key == GroupKey(day(2), DEBIT, 10000)

    def test_system_key_uses_calendar_day(self, make_system):
        key = group_key(make_system("T1", "100", CREDIT, offset=2, hour=18))

        assert key == GroupKey(day(2), CREDIT, 10000)


# ------------------------------------------------------------------
# Pass 1: reference matching
# ------------------------------------------------------------------


class TestReferenceMatchStrategy:
    def test_matches_on_reference_token(self, make_system, make_bank):
        claims = ClaimSet()
        system = [make_system("TRX001", "100.00")]
        bank = [make_bank("BANK001", "-100.00", description="Purchase trxID:TRX001")]

        pairs = ReferenceMatchStrategy().find_matches(system, bank, claims)

        assert len(pairs) == 1
        assert pairs[0].match_pass is MatchPass.REFERENCE
        assert claims.system_ids == {"TRX001"}
        assert claims.bank_keys == {("bank_A.csv", "BANK001")}

    def test_ignores_amount_type_and_date(self, make_system, make_bank):
        system = [make_system("TRX003", "100.00", DEBIT, offset=1)]
        bank = [make_bank("BANK003", "55.00", offset=5, description="trxID:TRX003")]

        pairs = ReferenceMatchStrategy().find_matches(system, bank, ClaimSet())

        assert len(pairs) == 1

    def test_bare_identifier_is_not_a_reference(self, make_system, make_bank):
        system = [make_system("TRX001", "100.00")]
        bank = [make_bank("BANK001", "-100.00", description="Payment TRX001")]

        assert ReferenceMatchStrategy().find_matches(system, bank, ClaimSet()) == []

    def test_first_bank_record_wins_duplicate_reference(self, make_system, make_bank):
        system = [make_system("TRX001", "100.00")]
        bank = [
            make_bank("BANK001", "-100.00", description="trxID:TRX001"),
            make_bank("BANK002", "-100.00", description="again trxID:TRX001"),
        ]

        pairs = ReferenceMatchStrategy().find_matches(system, bank, ClaimSet())

        assert [p.bank_transaction.unique_identifier for p in pairs] == ["BANK001"]

    def test_substring_ids_pair_with_first_system_record_in_order(self, make_system, make_bank):
        # "trxID:TRX1" is a substring of "trxID:TRX10"
        system = [make_system("TRX1", "1"), make_system("TRX10", "1")]
        bank = [make_bank("B1", "1", description="trxID:TRX10")]

        pairs = ReferenceMatchStrategy().find_matches(system, bank, ClaimSet())

        assert pairs[0].system_transaction.trx_id == "TRX1"

    def test_skips_claimed_records(self, make_system, make_bank):
        system = [make_system("TRX001", "100.00")]
        bank = [make_bank("BANK001", "-100.00", description="trxID:TRX001")]
        claims = ClaimSet(system_ids={"TRX001"})

        assert ReferenceMatchStrategy().find_matches(system, bank, claims) == []

    def test_custom_prefix(self, make_system, make_bank):
        system = [make_system("TRX001", "100.00")]
        bank = [make_bank("BANK001", "-100.00", description="ref=TRX001")]

        pairs = ReferenceMatchStrategy(reference_prefix="ref=").find_matches(
            system, bank, ClaimSet()
        )

        assert len(pairs) == 1


# ------------------------------------------------------------------
# Pass 2/3: grouped exact matching
# ------------------------------------------------------------------


class TestGroupedExactStrategy:
    def test_one_to_one_exact_match(self, make_system, make_bank):
        system = [make_system("TRX002", "250.50", CREDIT, offset=2, hour=9)]
        bank = [make_bank("BANK002", "250.50", offset=2)]

        pairs = GroupedExactStrategy().find_matches(system, bank, ClaimSet())

        assert len(pairs) == 1
        assert pairs[0].match_pass is MatchPass.EXACT

    def test_equal_groups_pair_by_position(self, make_system, make_bank):
        system = [make_system("S1", "10"), make_system("S2", "10")]
        bank = [make_bank("B1", "-10"), make_bank("B2", "-10")]

        pairs = GroupedExactStrategy().find_matches(system, bank, ClaimSet())

        assert [(p.system_transaction.trx_id, p.bank_transaction.unique_identifier) for p in pairs] == [
            ("S1", "B1"),
            ("S2", "B2"),
        ]
        assert all(p.match_pass is MatchPass.GROUP for p in pairs)

    def test_unequal_groups_stay_unmatched(self, make_system, make_bank):
        claims = ClaimSet()
        system = [make_system("S1", "10"), make_system("S2", "10")]
        bank = [make_bank("B1", "-10")]

        assert GroupedExactStrategy().find_matches(system, bank, claims) == []
        assert claims.system_ids == set()
        assert claims.bank_keys == set()

    def test_type_must_agree(self, make_system, make_bank):
        system = [make_system("S1", "10", DEBIT)]
        bank = [make_bank("B1", "10")]  # positive -> CREDIT

        assert GroupedExactStrategy().find_matches(system, bank, ClaimSet()) == []

    def test_day_must_agree(self, make_system, make_bank):
        system = [make_system("S1", "10", offset=1)]
        bank = [make_bank("B1", "-10", offset=2)]

        assert GroupedExactStrategy().find_matches(system, bank, ClaimSet()) == []

    def test_amounts_equal_after_rounding(self, make_system, make_bank):
        system = [make_system("S1", "10.001")]
        bank = [make_bank("B1", "-10.004")]

        assert len(GroupedExactStrategy().find_matches(system, bank, ClaimSet())) == 1

    def test_same_identifier_in_two_files_are_distinct(self, make_system, make_bank):
        system = [make_system("S1", "10"), make_system("S2", "10")]
        bank = [
            make_bank("BANK001", "-10", source="bank_A.csv"),
            make_bank("BANK001", "-10", source="bank_B.csv"),
        ]

        pairs = GroupedExactStrategy().find_matches(system, bank, ClaimSet())

        assert [p.bank_transaction.bank_source for p in pairs] == ["bank_A.csv", "bank_B.csv"]
