"""Monte Carlo simulation engine.

Runs N independent path simulations for a base scenario. Iteration k draws
from its own ``random.Random`` supplied by an RNG factory, so iterations
share no mutable state and can be fanned out across a thread pool without
changing the output.
"""
from __future__ import annotations

import logging
import math
import random
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from app.config import settings
from app.models.scenario import BaseScenario
from app.models.simulation import SimulationParameters, SimulationResult
from app.simulation.errors import SimulationCancelledError, SimulationValidationError
from app.simulation.path import simulate_path

logger = logging.getLogger(__name__)

RngFactory = Callable[[int], random.Random]


def seeded_rng_factory(seed: Optional[int]) -> RngFactory:
    """Iteration k gets ``random.Random(seed + k)``; unseeded runs use fresh entropy."""
    if seed is None:
        return lambda _k: random.Random()
    return lambda k: random.Random(seed + k)


def validate_inputs(scenario: BaseScenario, params: SimulationParameters) -> None:
    """Reject anything that would make a path meaningless, before any work starts."""
    if params.iterations < 1:
        raise SimulationValidationError(f"iterations must be at least 1, got {params.iterations}")
    if params.iterations > settings.MAX_ITERATIONS:
        raise SimulationValidationError(
            f"iterations must be at most {settings.MAX_ITERATIONS}, got {params.iterations}"
        )
    if params.time_horizon_months < 1:
        raise SimulationValidationError(
            f"time_horizon_months must be at least 1, got {params.time_horizon_months}"
        )
    for name in ("rate_volatility", "property_volatility", "income_volatility"):
        value = getattr(params, name)
        if not math.isfinite(value) or value < 0:
            raise SimulationValidationError(f"{name} must be finite and non-negative, got {value}")
    if scenario.term_years < 1:
        raise SimulationValidationError(f"term_years must be at least 1, got {scenario.term_years}")
    if not math.isfinite(scenario.interest_rate) or scenario.interest_rate <= 0:
        raise SimulationValidationError(
            f"interest_rate must be finite and positive, got {scenario.interest_rate}"
        )
    if not scenario.property_price > scenario.down_payment >= 0:
        raise SimulationValidationError(
            "property_price must exceed down_payment and down_payment must be non-negative"
        )


def _chunks(n: int, n_chunks: int) -> list[range]:
    """Split range(n) into at most n_chunks contiguous, near-equal ranges."""
    n_chunks = max(1, min(n_chunks, n))
    size, extra = divmod(n, n_chunks)
    ranges = []
    start = 0
    for i in range(n_chunks):
        stop = start + size + (1 if i < extra else 0)
        ranges.append(range(start, stop))
        start = stop
    return ranges


def run_iterations(
    scenario: BaseScenario,
    params: SimulationParameters,
    rng_factory: Optional[RngFactory] = None,
    *,
    max_workers: Optional[int] = None,
    cancel_event: Optional[threading.Event] = None,
) -> list[SimulationResult]:
    """Run ``params.iterations`` independent paths and return them in iteration order.

    Args:
        scenario: Base loan terms, read-only.
        params: Volatilities, horizon, and iteration count.
        rng_factory: Maps iteration index to its RNG. Defaults to unseeded.
        max_workers: Thread pool size. ``1`` runs inline. Defaults to
            ``settings.SIMULATION_MAX_WORKERS``.
        cancel_event: Checked before every iteration; once set, the run
            raises SimulationCancelledError.

    Returns:
        List of SimulationResult, index k holding iteration k.
    """
    validate_inputs(scenario, params)
    factory = rng_factory or seeded_rng_factory(None)
    workers = max_workers if max_workers is not None else settings.SIMULATION_MAX_WORKERS

    results: list[Optional[SimulationResult]] = [None] * params.iterations

    abort = threading.Event()

    def _run_chunk(indices: range) -> None:
        for k in indices:
            if abort.is_set():
                return
            if cancel_event is not None and cancel_event.is_set():
                raise SimulationCancelledError(f"Simulation cancelled before iteration {k}")
            results[k] = simulate_path(scenario, params, factory(k), iteration=k)

    chunks = _chunks(params.iterations, workers)
    if len(chunks) == 1:
        _run_chunk(chunks[0])
    else:
        with ThreadPoolExecutor(max_workers=len(chunks), thread_name_prefix="mc-worker") as pool:
            futures = [pool.submit(_run_chunk, chunk) for chunk in chunks]
            try:
                for future in futures:
                    future.result()
            except BaseException:
                abort.set()
                for future in futures:
                    future.cancel()
                raise

    logger.debug("Completed %d iterations across %d worker(s)", params.iterations, len(chunks))
    return results  # type: ignore[return-value]
