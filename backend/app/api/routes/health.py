from fastapi import APIRouter

from app.config import settings
from app.services.result_store import result_store

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check():
    return {
        "status": "ok",
        "stored_simulations": len(result_store),
        "max_workers": settings.SIMULATION_MAX_WORKERS,
    }
