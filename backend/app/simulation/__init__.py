"""Simulation engine: random walks, amortization, path projection, Monte Carlo, and aggregation."""
from app.simulation.errors import SimulationError, SimulationValidationError, SimulationCancelledError
from app.simulation.random_walk import sample
from app.simulation.cash_flow import calculate_monthly_payment
from app.simulation.path import simulate_path, PathState
from app.simulation.risk import default_probability, refinance_probability
from app.simulation.engine import run_iterations, seeded_rng_factory, validate_inputs
from app.simulation.statistics import percentiles, summarize
from app.simulation.scenarios import LadderFamily, default_ladder, get_ladder, list_ladder_types

__all__ = [
    "SimulationError",
    "SimulationValidationError",
    "SimulationCancelledError",
    "sample",
    "calculate_monthly_payment",
    "PathState",
    "simulate_path",
    "default_probability",
    "refinance_probability",
    "run_iterations",
    "seeded_rng_factory",
    "validate_inputs",
    "percentiles",
    "summarize",
    "LadderFamily",
    "default_ladder",
    "get_ladder",
    "list_ladder_types",
]
