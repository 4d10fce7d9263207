"""Fixed-rate amortization helpers."""
from __future__ import annotations

from app.simulation.errors import SimulationValidationError


def calculate_monthly_payment(principal: float, annual_rate: float, term_years: int) -> float:
    """Standard PMT formula for a fixed-rate amortizing loan.

    ``annual_rate`` is a percentage (6.0 = 6%).

    PMT = P * r(1+r)^n / ((1+r)^n - 1)
    """
    n = term_years * 12
    if n <= 0:
        raise SimulationValidationError(f"term_years must be at least 1, got {term_years}")
    r = annual_rate / 100.0 / 12.0
    if r == 0:
        return principal / n
    growth = (1.0 + r) ** n
    return principal * (r * growth) / (growth - 1.0)
