"""Date filtering, matching passes and discrepancy evaluation."""

from .discrepancy import DiscrepancyEvaluator
from .engine import MatchOutcome, ReconciliationEngine
from .filters import filter_by_date
from .strategies import (
    ClaimSet,
    GroupKey,
    GroupedExactStrategy,
    MatchingStrategy,
    ReferenceMatchStrategy,
)

__all__ = [
    "DiscrepancyEvaluator",
    "MatchOutcome",
    "ReconciliationEngine",
    "filter_by_date",
    "ClaimSet",
    "GroupKey",
    "GroupedExactStrategy",
    "MatchingStrategy",
    "ReferenceMatchStrategy",
]
