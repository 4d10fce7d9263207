from app.config import settings
from app.services.result_store import ResultSink, result_store
from app.services.simulation_service import StressScenarioRunner


def get_result_store() -> ResultSink:
    """FastAPI dependency returning the process-wide result sink."""
    return result_store


def get_runner() -> StressScenarioRunner:
    """FastAPI dependency returning a runner bound to the result sink."""
    return StressScenarioRunner(get_result_store(), max_workers=settings.SIMULATION_MAX_WORKERS)
