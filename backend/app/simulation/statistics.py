"""Reduce per-iteration results into a SimulationSummary."""
from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Optional

from app.models.simulation import (
    Percentiles,
    SimulationResult,
    SimulationStatistics,
    SimulationSummary,
    SimulationType,
    StressImpact,
    StressTestResults,
)
from app.simulation.errors import SimulationValidationError

# Fixed headline shocks reported with every summary
_RATE_SHOCK_PCT_POINTS = 2.0    # +200 bps
_PROPERTY_DECLINE = -0.1
_INCOME_REDUCTION = -0.2


def percentiles(values: Sequence[float]) -> Percentiles:
    """Mean, median, p10, p90, min, max using index-floor percentiles.

    p = sorted[int(n * q)], no interpolation.
    """
    if not values:
        raise SimulationValidationError("Cannot compute percentiles of an empty sample")
    ordered = sorted(values)
    n = len(ordered)
    return Percentiles(
        mean=sum(values) / n,
        median=ordered[n // 2],
        p10=ordered[int(n * 0.1)],
        p90=ordered[int(n * 0.9)],
        min=ordered[0],
        max=ordered[-1],
    )


def rate_shock_impact(shock_pct_points: float) -> float:
    """10% impact per 100 bps."""
    return shock_pct_points * 0.1


def property_decline_impact(decline: float) -> float:
    return decline * 0.8


def income_reduction_impact(reduction: float) -> float:
    return abs(reduction) * 0.5


def stress_test_results() -> StressTestResults:
    """Headline impact figures. These are fixed heuristics, not read from any run."""
    return StressTestResults(
        rate_shock=StressImpact(
            scenario="Rate +200 bps",
            impact=rate_shock_impact(_RATE_SHOCK_PCT_POINTS),
        ),
        property_decline=StressImpact(
            scenario="Property -10%",
            impact=property_decline_impact(_PROPERTY_DECLINE),
        ),
        income_reduction=StressImpact(
            scenario="Income -20%",
            impact=income_reduction_impact(_INCOME_REDUCTION),
        ),
    )


def summarize(
    simulation_id: str,
    simulation_type: SimulationType,
    results: Sequence[SimulationResult],
    iterations: Optional[int] = None,
) -> SimulationSummary:
    """Flatten every iteration's monthly series and compute distribution stats.

    Default and refinance rates average the per-iteration probabilities,
    one value per iteration. ``iterations`` defaults to ``len(results)``.
    """
    if not results:
        raise SimulationValidationError("Cannot summarize an empty result set")

    all_payments = [p for r in results for p in r.monthly_payments]
    all_values = [v for r in results for v in r.property_values]
    all_equity = [e for r in results for e in r.equity]

    statistics = SimulationStatistics(
        monthly_payment=percentiles(all_payments),
        property_value=percentiles(all_values),
        equity=percentiles(all_equity),
        default_rate=sum(r.default_probability for r in results) / len(results),
        refinance_rate=sum(r.refinance_probability for r in results) / len(results),
    )

    return SimulationSummary(
        simulation_id=simulation_id,
        simulation_type=simulation_type,
        iterations=iterations if iterations is not None else len(results),
        results=statistics,
        stress_test_results=stress_test_results(),
        computed_at=datetime.now(timezone.utc),
    )
