"""Heuristic default and refinance scoring for a finished path."""
from __future__ import annotations

from collections.abc import Sequence

_DTI_THRESHOLD = 0.4  # Annualized payment / income above this flags the month

# (minimum rate drop in percentage points, refinance probability), checked in order
_REFINANCE_TIERS: tuple[tuple[float, float], ...] = (
    (0.5, 0.8),
    (0.25, 0.6),
    (0.1, 0.4),
)
_REFINANCE_FLOOR = 0.2


def default_probability(payments: Sequence[float], incomes: Sequence[float]) -> float:
    """Fraction of months whose payment-to-income ratio exceeds 40%."""
    if not payments:
        return 0.0
    flagged = sum(
        1 for payment, income in zip(payments, incomes)
        if (payment * 12.0) / income > _DTI_THRESHOLD
    )
    return flagged / len(payments)


def refinance_probability(final_rate: float, original_rate: float) -> float:
    """Step function on how far the rate fell below the original rate."""
    rate_drop = original_rate - final_rate
    for threshold, probability in _REFINANCE_TIERS:
        if rate_drop > threshold:
            return probability
    return _REFINANCE_FLOOR


def score(
    payments: Sequence[float],
    incomes: Sequence[float],
    final_rate: float,
    original_rate: float,
) -> tuple[float, float]:
    """Return (default_probability, refinance_probability) for one path."""
    return (
        default_probability(payments, incomes),
        refinance_probability(final_rate, original_rate),
    )
