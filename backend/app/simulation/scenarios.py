"""Scenario definitions: default stress ladders and per-family parameters.

Each ladder family varies one volatility while holding the others at the
baseline defaults. Ladder magnitudes are used as the volatility of the
varied driver for a single-iteration run per named point.
"""
from __future__ import annotations

from dataclasses import dataclass

from app.models.scenario import NamedScenario
from app.models.simulation import SimulationType

BASELINE_RATE_VOLATILITY = 0.02
BASELINE_PROPERTY_VOLATILITY = 0.1
BASELINE_INCOME_VOLATILITY = 0.05
BASELINE_TIME_HORIZON_MONTHS = 60


@dataclass(frozen=True)
class LadderFamily:
    """A stress ladder: which volatility it varies and its default points."""
    simulation_type: SimulationType
    varied_field: str
    default_points: tuple[NamedScenario, ...]


_LADDERS: dict[SimulationType, LadderFamily] = {
    SimulationType.rate_shock: LadderFamily(
        simulation_type=SimulationType.rate_shock,
        varied_field="rate_volatility",
        default_points=(
            NamedScenario(name="Mild Shock", magnitude=1.0),
            NamedScenario(name="Moderate Shock", magnitude=2.0),
            NamedScenario(name="Severe Shock", magnitude=3.0),
        ),
    ),
    SimulationType.property_decline: LadderFamily(
        simulation_type=SimulationType.property_decline,
        varied_field="property_volatility",
        default_points=(
            NamedScenario(name="Mild Decline", magnitude=-0.05),
            NamedScenario(name="Moderate Decline", magnitude=-0.10),
            NamedScenario(name="Severe Decline", magnitude=-0.20),
        ),
    ),
    SimulationType.income_variance: LadderFamily(
        simulation_type=SimulationType.income_variance,
        varied_field="income_volatility",
        default_points=(
            NamedScenario(name="Income Reduction", magnitude=-0.10),
            NamedScenario(name="Severe Income Reduction", magnitude=-0.20),
            NamedScenario(name="Income Growth", magnitude=0.10),
        ),
    ),
}


def get_ladder(simulation_type: SimulationType) -> LadderFamily:
    """Return the ladder family for a simulation type. Raises KeyError for non-ladder types."""
    return _LADDERS[SimulationType(simulation_type)]


def default_ladder(simulation_type: SimulationType) -> list[NamedScenario]:
    """Default named points for a ladder family."""
    return list(get_ladder(simulation_type).default_points)


def list_ladder_types() -> list[SimulationType]:
    """Return the ladder families in comprehensive-run order."""
    return list(_LADDERS.keys())
