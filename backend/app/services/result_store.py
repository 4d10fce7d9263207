"""Result sink: where finished simulation runs are handed for persistence.

The simulation core only needs ``save``; listing and lookup back the
read-side API. ``InMemoryResultStore`` is the default process-local sink.
"""
from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Optional, Protocol, Sequence

from app.config import settings
from app.models.simulation import (
    SimulationRecord,
    SimulationResult,
    SimulationSummary,
    SimulationType,
)

logger = logging.getLogger(__name__)


class ResultSink(Protocol):
    def save(
        self,
        simulation_id: str,
        user_id: str,
        simulation_type: SimulationType,
        results: Sequence[SimulationResult],
        summary: SimulationSummary,
    ) -> None: ...

    def get(self, simulation_id: str) -> Optional[SimulationRecord]: ...

    def list_summaries(
        self, user_id: str, simulation_type: Optional[SimulationType] = None,
    ) -> list[SimulationSummary]: ...


class InMemoryResultStore:
    """Thread-safe result sink holding the most recent ``max_records`` runs.

    Once the cap is passed the oldest record is dropped.
    """

    def __init__(self, max_records: Optional[int] = None):
        self._max_records = max_records if max_records is not None else settings.RESULT_STORE_MAX_RECORDS
        if self._max_records < 1:
            raise ValueError(f"max_records must be at least 1, got {self._max_records}")
        self._records: OrderedDict[str, SimulationRecord] = OrderedDict()
        self._lock = threading.Lock()

    @property
    def max_records(self) -> int:
        return self._max_records

    def save(
        self,
        simulation_id: str,
        user_id: str,
        simulation_type: SimulationType,
        results: Sequence[SimulationResult],
        summary: SimulationSummary,
    ) -> None:
        record = SimulationRecord(
            simulation_id=simulation_id,
            user_id=user_id,
            simulation_type=simulation_type,
            iterations=len(results),
            results=list(results),
            summary=summary,
            created_at=datetime.now(timezone.utc),
        )
        evicted: list[str] = []
        with self._lock:
            if simulation_id in self._records:
                raise ValueError(f"Simulation {simulation_id} already stored")
            self._records[simulation_id] = record
            while len(self._records) > self._max_records:
                oldest_id, _ = self._records.popitem(last=False)
                evicted.append(oldest_id)
        logger.info("Stored simulation %s (%d results)", simulation_id, len(results))
        for oldest_id in evicted:
            logger.debug("Evicted simulation %s (store capped at %d)", oldest_id, self._max_records)

    def get(self, simulation_id: str) -> Optional[SimulationRecord]:
        with self._lock:
            return self._records.get(simulation_id)

    def list_summaries(
        self, user_id: str, simulation_type: Optional[SimulationType] = None,
    ) -> list[SimulationSummary]:
        """Summaries for a user, newest first, optionally filtered by type."""
        with self._lock:
            return [
                r.summary for r in reversed(self._records.values())
                if r.user_id == user_id
                and (simulation_type is None or r.simulation_type == simulation_type)
            ]

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


result_store = InMemoryResultStore()
