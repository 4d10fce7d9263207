"""Stress scenario orchestration service.

Runs the four stress families (baseline stress test, rate-shock ladder,
property-decline ladder, income-variance ladder) against a base scenario,
reduces each family to a SimulationSummary, and hands it to a result sink.
"""
from __future__ import annotations

import logging
import threading
import time
import uuid
from collections.abc import Sequence
from typing import Optional, Union

from pydantic import ValidationError

from app.config import settings
from app.models.scenario import BaseScenario, NamedScenario
from app.models.simulation import SimulationParameters, SimulationResult, SimulationSummary, SimulationType
from app.services.result_store import ResultSink
from app.simulation.engine import run_iterations, seeded_rng_factory, validate_inputs
from app.simulation.errors import SimulationValidationError
from app.simulation.scenarios import (
    BASELINE_INCOME_VOLATILITY,
    BASELINE_PROPERTY_VOLATILITY,
    BASELINE_RATE_VOLATILITY,
    BASELINE_TIME_HORIZON_MONTHS,
    default_ladder,
    get_ladder,
    list_ladder_types,
)
from app.simulation.statistics import summarize

logger = logging.getLogger(__name__)

_FAMILY_SEED_STRIDE = 1_000_003  # Keeps per-family seed ranges disjoint in a comprehensive run


def _family_seed(seed: Optional[int], family_index: int) -> Optional[int]:
    return seed + family_index * _FAMILY_SEED_STRIDE if seed is not None else None


def make_simulation_id(simulation_type: SimulationType, user_id: str) -> str:
    """``{type}_{user}_{epoch_ms}_{suffix}``; the suffix keeps same-millisecond runs distinct."""
    millis = int(time.time() * 1000)
    return f"{SimulationType(simulation_type).value}_{user_id}_{millis}_{uuid.uuid4().hex[:8]}"


def baseline_parameters(iterations: Optional[int] = None) -> SimulationParameters:
    """Default stress-test parameters."""
    return _build_parameters(
        iterations=iterations if iterations is not None else settings.DEFAULT_ITERATIONS,
        time_horizon_months=settings.DEFAULT_TIME_HORIZON_MONTHS,
    )


def _build_parameters(**overrides) -> SimulationParameters:
    values = dict(
        iterations=1,
        rate_volatility=BASELINE_RATE_VOLATILITY,
        property_volatility=BASELINE_PROPERTY_VOLATILITY,
        income_volatility=BASELINE_INCOME_VOLATILITY,
        time_horizon_months=BASELINE_TIME_HORIZON_MONTHS,
    )
    values.update(overrides)
    try:
        return SimulationParameters(**values)
    except ValidationError as e:
        raise SimulationValidationError(f"Invalid simulation parameters: {e}") from e


class StressScenarioRunner:
    """Runs stress scenario families and persists each summary through a sink."""

    def __init__(self, result_sink: ResultSink, *, max_workers: Optional[int] = None):
        self._sink = result_sink
        self._max_workers = max_workers

    # ------------------------------------------------------------------ families

    def run_stress_test(
        self,
        user_id: str,
        scenario: BaseScenario,
        params: Optional[SimulationParameters] = None,
        *,
        seed: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> SimulationSummary:
        """Full Monte Carlo run of ``params.iterations`` paths."""
        params = params or baseline_parameters()
        simulation_id = make_simulation_id(SimulationType.stress_test, user_id)
        logger.info(
            "Running stress test %s: %d iterations x %d months",
            simulation_id, params.iterations, params.time_horizon_months,
        )
        results = run_iterations(
            scenario, params, seeded_rng_factory(seed),
            max_workers=self._max_workers, cancel_event=cancel_event,
        )
        return self._finish(simulation_id, user_id, SimulationType.stress_test, results, params.iterations)

    def run_rate_shock(
        self,
        user_id: str,
        scenario: BaseScenario,
        shocks: Optional[Sequence[NamedScenario]] = None,
        *,
        seed: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> SimulationSummary:
        return self._run_ladder(SimulationType.rate_shock, user_id, scenario, shocks, seed, cancel_event)

    def run_property_decline(
        self,
        user_id: str,
        scenario: BaseScenario,
        declines: Optional[Sequence[NamedScenario]] = None,
        *,
        seed: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> SimulationSummary:
        return self._run_ladder(SimulationType.property_decline, user_id, scenario, declines, seed, cancel_event)

    def run_income_variance(
        self,
        user_id: str,
        scenario: BaseScenario,
        variances: Optional[Sequence[NamedScenario]] = None,
        *,
        seed: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> SimulationSummary:
        return self._run_ladder(SimulationType.income_variance, user_id, scenario, variances, seed, cancel_event)

    def run_comprehensive(
        self,
        user_id: str,
        scenario: BaseScenario,
        *,
        iterations: Optional[int] = None,
        seed: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> list[SimulationSummary]:
        """All four families in order: stress test, rate shock, property decline, income variance.

        Family i is seeded with ``seed + i * _FAMILY_SEED_STRIDE`` so the
        families never consume the same random draws.
        """
        logger.info("Running comprehensive stress test for user %s", user_id)
        seeds = [_family_seed(seed, i) for i in range(4)]
        return [
            self.run_stress_test(
                user_id, scenario, baseline_parameters(iterations),
                seed=seeds[0], cancel_event=cancel_event,
            ),
            self.run_rate_shock(user_id, scenario, seed=seeds[1], cancel_event=cancel_event),
            self.run_property_decline(user_id, scenario, seed=seeds[2], cancel_event=cancel_event),
            self.run_income_variance(user_id, scenario, seed=seeds[3], cancel_event=cancel_event),
        ]

    def run(
        self,
        user_id: str,
        simulation_type: SimulationType,
        scenario: BaseScenario,
        *,
        iterations: Optional[int] = None,
        scenarios: Optional[Sequence[NamedScenario]] = None,
        seed: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> Union[SimulationSummary, list[SimulationSummary]]:
        """Dispatch a request to the matching family.

        ``iterations`` applies only to stress_test and comprehensive;
        ``scenarios`` only to the ladder families. Supplying either to a
        family that cannot use it is rejected.
        """
        simulation_type = SimulationType(simulation_type)
        is_ladder = simulation_type in list_ladder_types()
        if scenarios is not None and not is_ladder:
            raise SimulationValidationError(
                f"scenarios cannot be supplied for {simulation_type.value}; "
                f"they apply only to {', '.join(t.value for t in list_ladder_types())}"
            )
        if iterations is not None and is_ladder:
            raise SimulationValidationError(
                f"iterations cannot be supplied for {simulation_type.value}; "
                "ladder families run one iteration per named scenario"
            )

        if simulation_type == SimulationType.comprehensive:
            return self.run_comprehensive(
                user_id, scenario, iterations=iterations, seed=seed, cancel_event=cancel_event,
            )
        if simulation_type == SimulationType.stress_test:
            return self.run_stress_test(
                user_id, scenario, baseline_parameters(iterations),
                seed=seed, cancel_event=cancel_event,
            )
        return self._run_ladder(simulation_type, user_id, scenario, scenarios, seed, cancel_event)

    # ------------------------------------------------------------------ internals

    def _run_ladder(
        self,
        simulation_type: SimulationType,
        user_id: str,
        scenario: BaseScenario,
        points: Optional[Sequence[NamedScenario]],
        seed: Optional[int],
        cancel_event: Optional[threading.Event],
    ) -> SimulationSummary:
        """One single-iteration run per named point, summarized together.

        The point's magnitude becomes the volatility of the varied driver.
        Every point's parameters are validated before the first one runs.
        """
        family = get_ladder(simulation_type)
        points = list(points) if points is not None else default_ladder(simulation_type)
        if not points:
            raise SimulationValidationError(f"{simulation_type.value} requires at least one named scenario")

        point_params = [
            _build_parameters(**{family.varied_field: abs(point.magnitude)})
            for point in points
        ]
        for params in point_params:
            validate_inputs(scenario, params)

        simulation_id = make_simulation_id(simulation_type, user_id)
        logger.info("Running %s %s over %d named scenarios", simulation_type.value, simulation_id, len(points))

        results: list[SimulationResult] = []
        for k, (point, params) in enumerate(zip(points, point_params)):
            point_seed = seed + k if seed is not None else None
            logger.debug("%s point %r: %s=%s", simulation_type.value, point.name, family.varied_field,
                         getattr(params, family.varied_field))
            result = run_iterations(
                scenario, params, seeded_rng_factory(point_seed),
                max_workers=1, cancel_event=cancel_event,
            )[0]
            results.append(result.model_copy(update={"iteration": k}))

        return self._finish(simulation_id, user_id, simulation_type, results, len(results))

    def _finish(
        self,
        simulation_id: str,
        user_id: str,
        simulation_type: SimulationType,
        results: list[SimulationResult],
        iterations: int,
    ) -> SimulationSummary:
        summary = summarize(simulation_id, simulation_type, results, iterations)
        self._sink.save(simulation_id, user_id, simulation_type, results, summary)
        logger.info(
            "Finished %s: default_rate=%.4f refinance_rate=%.4f",
            simulation_id, summary.results.default_rate, summary.results.refinance_rate,
        )
        return summary
