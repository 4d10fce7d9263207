"""Tests for percentile extraction and summary aggregation."""
import pytest

from app.models.simulation import SimulationResult, SimulationType
from app.simulation.errors import SimulationValidationError
from app.simulation.statistics import percentiles, stress_test_results, summarize


def _make_result(iteration=0, payments=None, values=None, equity=None,
                 default_probability=0.0, refinance_probability=0.2) -> SimulationResult:
    payments = payments or [1000.0, 1100.0]
    n = len(payments)
    return SimulationResult(
        iteration=iteration,
        monthly_payments=payments,
        property_values=values or [500_000.0] * n,
        interest_rates=[5.0] * n,
        incomes=[100_000.0] * n,
        equity=equity or [100_000.0] * n,
        default_probability=default_probability,
        refinance_probability=refinance_probability,
    )


# --- Percentile tests ---


def test_percentiles_index_floor():
    values = [float(v) for v in range(10, 0, -1)]  # 10..1, unsorted input
    p = percentiles(values)
    assert p.mean == 5.5
    assert p.median == 6.0   # sorted[5]
    assert p.p10 == 2.0      # sorted[1]
    assert p.p90 == 10.0     # sorted[9]
    assert p.min == 1.0
    assert p.max == 10.0


def test_percentiles_single_value():
    p = percentiles([42.0])
    assert p.mean == p.median == p.p10 == p.p90 == p.min == p.max == 42.0


def test_percentiles_no_interpolation():
    p = percentiles([1.0, 2.0, 3.0, 4.0])
    assert p.median == 3.0   # sorted[2], not 2.5
    assert p.p10 == 1.0      # sorted[0]
    assert p.p90 == 4.0      # sorted[3]


def test_percentiles_ordering():
    values = [3.2, -1.0, 8.5, 0.0, 2.2, 2.2, 7.1, 100.0, -50.0, 4.4, 6.6]
    p = percentiles(values)
    assert p.min <= p.p10 <= p.median <= p.p90 <= p.max


def test_percentiles_empty_raises():
    with pytest.raises(SimulationValidationError):
        percentiles([])


# --- Summary tests ---


def test_summarize_flattens_monthly_series():
    results = [
        _make_result(0, payments=[1.0, 2.0]),
        _make_result(1, payments=[3.0, 4.0]),
    ]
    summary = summarize("sim-1", SimulationType.stress_test, results)
    assert summary.results.monthly_payment.mean == 2.5
    assert summary.results.monthly_payment.min == 1.0
    assert summary.results.monthly_payment.max == 4.0
    assert summary.iterations == 2


def test_summarize_averages_probabilities_per_iteration():
    results = [
        _make_result(0, default_probability=0.0, refinance_probability=0.2),
        _make_result(1, default_probability=0.5, refinance_probability=0.8),
    ]
    summary = summarize("sim-2", SimulationType.stress_test, results)
    assert summary.results.default_rate == 0.25
    assert summary.results.refinance_rate == pytest.approx(0.5)


def test_summarize_iterations_override():
    summary = summarize("sim-3", SimulationType.rate_shock, [_make_result()], iterations=1000)
    assert summary.iterations == 1000
    assert summary.simulation_id == "sim-3"
    assert summary.simulation_type == SimulationType.rate_shock


def test_summarize_empty_raises():
    with pytest.raises(SimulationValidationError):
        summarize("sim-4", SimulationType.stress_test, [])


def test_stress_test_results_fixed_heuristics():
    block = stress_test_results()
    assert block.rate_shock.scenario == "Rate +200 bps"
    assert block.rate_shock.impact == pytest.approx(0.2)
    assert block.property_decline.scenario == "Property -10%"
    assert block.property_decline.impact == pytest.approx(-0.08)
    assert block.income_reduction.scenario == "Income -20%"
    assert block.income_reduction.impact == pytest.approx(0.1)


def test_stress_test_results_independent_of_data():
    low = summarize("a", SimulationType.stress_test, [_make_result(payments=[1.0])])
    high = summarize("b", SimulationType.stress_test, [_make_result(payments=[1e9])])
    assert low.stress_test_results == high.stress_test_results
