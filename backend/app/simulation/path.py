"""Single-path projector: advances one mortgage scenario month by month.

Each month the rate, property value, and income take a random-walk step,
then the payment is re-amortized on the outstanding balance at the new
rate. The path is scored for default and refinance risk once it finishes.
"""
from __future__ import annotations

import random
from dataclasses import dataclass

from app.models.scenario import BaseScenario
from app.models.simulation import SimulationParameters, SimulationResult
from app.simulation import random_walk, risk
from app.simulation.cash_flow import calculate_monthly_payment

DEFAULT_INCOME = 75_000.0
RATE_FLOOR = 0.01           # Annual %, rates never walk below this
PROPERTY_DRIFT = 0.001      # Monthly appreciation drift
INCOME_DRIFT = 0.002        # Monthly income growth drift


@dataclass
class PathState:
    """Mutable state of one iteration, never shared across iterations."""
    rate: float
    property_value: float
    income: float
    balance: float


def _initial_state(scenario: BaseScenario) -> PathState:
    return PathState(
        rate=scenario.interest_rate,
        property_value=scenario.property_price,
        income=scenario.income or DEFAULT_INCOME,
        balance=scenario.principal,
    )


def simulate_path(
    scenario: BaseScenario,
    params: SimulationParameters,
    rng: random.Random,
    iteration: int = 0,
) -> SimulationResult:
    """Run one Monte Carlo iteration and return its monthly series.

    Every random draw comes from ``rng``, so the same scenario, parameters,
    and seed always reproduce the same result.
    """
    state = _initial_state(scenario)

    payments: list[float] = []
    property_values: list[float] = []
    rates: list[float] = []
    incomes: list[float] = []
    equity: list[float] = []

    for _ in range(params.time_horizon_months):
        state.rate = max(RATE_FLOOR, state.rate + random_walk.sample(rng, 0.0, params.rate_volatility))
        state.property_value *= 1.0 + random_walk.sample(rng, PROPERTY_DRIFT, params.property_volatility)
        state.income *= 1.0 + random_walk.sample(rng, INCOME_DRIFT, params.income_volatility)

        payment = calculate_monthly_payment(state.balance, state.rate, scenario.term_years)
        payments.append(payment)
        property_values.append(state.property_value)
        rates.append(state.rate)
        incomes.append(state.income)
        equity.append(state.property_value - state.balance)

        # Simplified amortization: interest at the current rate, remainder to principal
        principal_portion = payment - state.balance * state.rate / 100.0 / 12.0
        state.balance = max(0.0, state.balance - principal_portion)

    default_prob, refinance_prob = risk.score(payments, incomes, state.rate, scenario.interest_rate)

    return SimulationResult(
        iteration=iteration,
        monthly_payments=payments,
        property_values=property_values,
        interest_rates=rates,
        incomes=incomes,
        equity=equity,
        default_probability=default_prob,
        refinance_probability=refinance_prob,
    )
