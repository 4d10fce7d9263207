"""Stress simulation API: run scenario families and read back stored summaries."""
from __future__ import annotations

from typing import Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from app.api.deps import get_result_store, get_runner
from app.config import settings
from app.models.scenario import BaseScenario, NamedScenario
from app.models.simulation import SimulationRecord, SimulationSummary, SimulationType
from app.services.result_store import ResultSink
from app.services.simulation_service import StressScenarioRunner
from app.simulation.errors import SimulationValidationError

router = APIRouter(tags=["simulations"])


class SimulationRequest(BaseModel):
    """Request body for a stress run against an inline base scenario."""
    user_id: str = Field(min_length=1)
    simulation_type: SimulationType
    base_scenario: BaseScenario
    iterations: Optional[int] = Field(default=None, ge=1, le=settings.MAX_ITERATIONS)
    seed: Optional[int] = None
    scenarios: Optional[list[NamedScenario]] = None


class SimulationResponse(BaseModel):
    result: Union[SimulationSummary, list[SimulationSummary]]


class SimulationListResponse(BaseModel):
    results: list[SimulationSummary]


@router.post("/simulations/run", response_model=SimulationResponse)
def run_simulation_endpoint(
    request: SimulationRequest,
    runner: StressScenarioRunner = Depends(get_runner),
):
    """Run one stress family, or all four for ``comprehensive``.

    Ladder families use the supplied named scenarios, or the defaults when
    none are given.
    """
    try:
        result = runner.run(
            request.user_id,
            request.simulation_type,
            request.base_scenario,
            iterations=request.iterations,
            scenarios=request.scenarios,
            seed=request.seed,
        )
    except SimulationValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"result": result}


@router.get("/simulations", response_model=SimulationListResponse)
def list_simulations(
    user_id: str = Query(..., min_length=1),
    simulation_type: Optional[SimulationType] = None,
    store: ResultSink = Depends(get_result_store),
):
    """Stored summaries for a user, newest first."""
    return {"results": store.list_summaries(user_id, simulation_type)}


@router.get("/simulations/{simulation_id}", response_model=SimulationRecord)
def get_simulation(simulation_id: str, store: ResultSink = Depends(get_result_store)):
    """A stored run including its raw per-iteration results."""
    record = store.get(simulation_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Simulation {simulation_id} not found")
    return record
