"""Tests for the simulation building blocks: random walk, PMT, path projection, risk scoring."""
import math
import random

import pytest

from app.models.scenario import BaseScenario
from app.models.simulation import SimulationParameters
from app.simulation.cash_flow import calculate_monthly_payment
from app.simulation.errors import SimulationValidationError
from app.simulation.path import DEFAULT_INCOME, simulate_path
from app.simulation.random_walk import sample
from app.simulation.risk import default_probability, refinance_probability, score


class _ScriptedRng:
    """Returns a fixed sequence of uniform draws."""

    def __init__(self, draws):
        self._draws = list(draws)
        self.calls = 0

    def random(self):
        self.calls += 1
        return self._draws.pop(0)


def _make_scenario(**overrides) -> BaseScenario:
    defaults = dict(
        interest_rate=5.0,
        property_price=500_000.0,
        down_payment=100_000.0,
        term_years=30,
        income=100_000.0,
    )
    defaults.update(overrides)
    return BaseScenario(**defaults)


def _make_params(**overrides) -> SimulationParameters:
    defaults = dict(
        iterations=1,
        rate_volatility=0.02,
        property_volatility=0.1,
        income_volatility=0.05,
        time_horizon_months=60,
    )
    defaults.update(overrides)
    return SimulationParameters(**defaults)


# --- Random walk tests ---


def test_random_walk_box_muller_value():
    # u1 = e^-0.5 gives sqrt(-2 ln u1) == 1, u2 = 0 gives cos == 1
    rng = _ScriptedRng([math.exp(-0.5), 0.0])
    assert sample(rng, 1.0, 2.0) == pytest.approx(3.0)
    assert rng.calls == 2


def test_random_walk_resamples_zero_u1():
    rng = _ScriptedRng([0.0, 0.0, math.exp(-0.5), 0.0])
    assert sample(rng, 0.0, 1.0) == pytest.approx(1.0)
    assert rng.calls == 4


def test_random_walk_zero_volatility_returns_drift():
    rng = random.Random(3)
    for _ in range(20):
        assert sample(rng, 0.002, 0.0) == 0.002


def test_random_walk_distribution_moments():
    rng = random.Random(11)
    draws = [sample(rng, 0.5, 2.0) for _ in range(20_000)]
    mean = sum(draws) / len(draws)
    var = sum((d - mean) ** 2 for d in draws) / len(draws)
    assert abs(mean - 0.5) < 0.1
    assert abs(math.sqrt(var) - 2.0) < 0.1


# --- PMT formula tests ---


def test_pmt_known_value():
    # $400k at 6% for 30 years ≈ $2,398.20
    pmt = calculate_monthly_payment(400_000, 6.0, 30)
    assert abs(pmt - 2398.20) < 0.01


def test_pmt_zero_rate():
    assert calculate_monthly_payment(120_000, 0.0, 10) == 1000.0


def test_pmt_zero_balance():
    assert calculate_monthly_payment(0, 5.0, 30) == 0.0


def test_pmt_zero_term_fails_fast():
    with pytest.raises(SimulationValidationError):
        calculate_monthly_payment(100_000, 5.0, 0)


# --- Risk scoring tests ---


def test_refinance_tiers():
    assert refinance_probability(4.0, 5.0) == 0.8
    assert refinance_probability(4.7, 5.0) == 0.6
    assert refinance_probability(4.8, 5.0) == 0.4
    assert refinance_probability(4.95, 5.0) == 0.2
    assert refinance_probability(6.0, 5.0) == 0.2


def test_refinance_thresholds_are_strict():
    assert refinance_probability(4.5, 5.0) == 0.6  # drop of exactly 0.5
    assert refinance_probability(2.0, 2.0) == 0.2


def test_default_probability_counts_high_dti_months():
    payments = [1000.0, 4000.0, 2000.0, 5000.0]
    incomes = [100_000.0] * 4
    # Annualized: 12k, 48k, 24k, 60k -> two months above 40%
    assert default_probability(payments, incomes) == 0.5


def test_default_probability_threshold_is_strict():
    # 40% exactly is not flagged
    assert default_probability([1000.0], [30_000.0]) == 0.0


def test_score_returns_both_probabilities():
    assert score([4000.0], [100_000.0], 4.0, 5.0) == (1.0, 0.8)


# --- Path projection tests ---


def test_path_series_lengths():
    result = simulate_path(_make_scenario(), _make_params(time_horizon_months=36), random.Random(1))
    for series in (result.monthly_payments, result.property_values, result.interest_rates,
                   result.incomes, result.equity):
        assert len(series) == 36


def test_path_deterministic_single_month():
    scenario = _make_scenario()
    params = _make_params(rate_volatility=0, property_volatility=0, income_volatility=0,
                          time_horizon_months=1)
    result = simulate_path(scenario, params, random.Random(0))
    assert result.interest_rates == [5.0]
    assert result.monthly_payments == [calculate_monthly_payment(400_000, 5.0, 30)]
    assert result.property_values[0] == pytest.approx(500_000 * 1.001)
    assert result.incomes[0] == pytest.approx(100_000 * 1.002)
    assert result.equity[0] == pytest.approx(500_000 * 1.001 - 400_000)
    assert result.default_probability == 0.0
    assert result.refinance_probability == 0.2


def test_path_reproducible_with_seed():
    scenario = _make_scenario()
    params = _make_params()
    r1 = simulate_path(scenario, params, random.Random(42))
    r2 = simulate_path(scenario, params, random.Random(42))
    assert r1 == r2


def test_path_different_seeds_differ():
    scenario = _make_scenario()
    params = _make_params()
    r1 = simulate_path(scenario, params, random.Random(1))
    r2 = simulate_path(scenario, params, random.Random(2))
    assert r1.interest_rates != r2.interest_rates


def test_path_rate_floor():
    # Huge rate volatility drives the walk into the floor
    scenario = _make_scenario(interest_rate=0.5)
    params = _make_params(rate_volatility=5.0, time_horizon_months=120)
    result = simulate_path(scenario, params, random.Random(5))
    assert min(result.interest_rates) >= 0.01
    assert 0.01 in result.interest_rates


def test_path_missing_income_uses_default():
    scenario = _make_scenario(income=None)
    params = _make_params(rate_volatility=0, property_volatility=0, income_volatility=0,
                          time_horizon_months=1)
    result = simulate_path(scenario, params, random.Random(0))
    assert result.incomes[0] == pytest.approx(DEFAULT_INCOME * 1.002)


def test_path_balance_amortizes_with_flat_rate():
    # With no rate movement, equity rises by at least the appreciation each month
    params = _make_params(rate_volatility=0, property_volatility=0, income_volatility=0,
                          time_horizon_months=12)
    result = simulate_path(_make_scenario(), params, random.Random(0))
    for i in range(1, len(result.equity)):
        assert result.equity[i] > result.equity[i - 1]
    # Re-amortizing a shrinking balance over the full term lowers the payment
    assert result.monthly_payments[-1] < result.monthly_payments[0] + 1e-6


def test_path_iteration_index_recorded():
    result = simulate_path(_make_scenario(), _make_params(), random.Random(1), iteration=7)
    assert result.iteration == 7
