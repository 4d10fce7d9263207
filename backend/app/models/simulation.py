from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class SimulationType(str, Enum):
    """Stress scenario families a caller can request."""
    stress_test = "stress_test"
    rate_shock = "rate_shock"
    property_decline = "property_decline"
    income_variance = "income_variance"
    comprehensive = "comprehensive"


class SimulationParameters(BaseModel):
    """Configuration for one Monte Carlo run.

    Volatilities are standard deviations of the monthly random walk for
    each driver: absolute percentage points for the rate, fractional
    change for property value and income.
    """
    iterations: int = Field(default=1000, ge=1)
    rate_volatility: float = Field(default=0.02, ge=0, allow_inf_nan=False)
    property_volatility: float = Field(default=0.1, ge=0, allow_inf_nan=False)
    income_volatility: float = Field(default=0.05, ge=0, allow_inf_nan=False)
    time_horizon_months: int = Field(default=60, ge=1)

    model_config = {"frozen": True}


class SimulationResult(BaseModel):
    """Monthly series and risk scores for a single Monte Carlo iteration."""
    iteration: int
    monthly_payments: list[float]
    property_values: list[float]
    interest_rates: list[float]
    incomes: list[float]
    equity: list[float]
    default_probability: float
    refinance_probability: float

    model_config = {"frozen": True}


class Percentiles(BaseModel):
    mean: float
    median: float
    p10: float
    p90: float
    min: float
    max: float

    model_config = {"frozen": True}


class SimulationStatistics(BaseModel):
    """Distribution statistics across every month of every iteration."""
    monthly_payment: Percentiles
    property_value: Percentiles
    equity: Percentiles
    default_rate: float
    refinance_rate: float

    model_config = {"frozen": True}


class StressImpact(BaseModel):
    scenario: str
    impact: float

    model_config = {"frozen": True}


class StressTestResults(BaseModel):
    rate_shock: StressImpact
    property_decline: StressImpact
    income_reduction: StressImpact

    model_config = {"frozen": True}


class SimulationSummary(BaseModel):
    """Aggregated output of one scenario family."""
    simulation_id: str
    simulation_type: SimulationType
    iterations: int
    results: SimulationStatistics
    stress_test_results: StressTestResults
    computed_at: datetime

    model_config = {"frozen": True}


class SimulationRecord(BaseModel):
    """A persisted run: the summary plus the raw per-iteration results."""
    simulation_id: str
    user_id: str
    simulation_type: SimulationType
    iterations: int
    results: list[SimulationResult]
    summary: SimulationSummary
    created_at: datetime
