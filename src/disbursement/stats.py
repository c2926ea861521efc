"""
Run Statistics

Counters for the most recent disbursement run, plus the lock-guarded
holder the dashboard reads from and the guard that keeps runs serial.
"""

import logging
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, Optional

from pydantic import BaseModel

from ..errors import RunInProgressError

logger = logging.getLogger(__name__)


class RunStatistics(BaseModel):
    """Counters for one disbursement run."""
    mode: str = "standard"
    total_events: int = 0
    events_with_amount: int = 0
    total_amount: float = 0.0
    planned_amount: float = 0.0
    disbursements_created: int = 0
    processed_count: int = 0
    failed_count: int = 0
    last_run: Optional[datetime] = None
    in_progress: bool = False


class RunResult(BaseModel):
    """Aggregate outcome returned by a run."""
    created: int = 0
    processed: int = 0
    failed: int = 0


class StatsHolder:
    """Process-wide, lock-guarded home of the latest RunStatistics."""

    def __init__(self):
        self._lock = threading.Lock()
        self._stats = RunStatistics()

    def snapshot(self) -> RunStatistics:
        with self._lock:
            return self._stats.model_copy()

    def publish(self, stats: RunStatistics) -> None:
        with self._lock:
            self._stats = stats.model_copy()


class RunGuard:
    """Admits at most one disbursement run at a time."""

    def __init__(self):
        self._lock = threading.Lock()

    @contextmanager
    def hold(self) -> Iterator[None]:
        """
        Hold the guard for the duration of a run.

        Raises:
            RunInProgressError: If another run already holds the guard
        """
        if not self._lock.acquire(blocking=False):
            logger.warning("Rejected disbursement trigger: a run is already in progress")
            raise RunInProgressError("A disbursement run is already in progress")
        try:
            yield
        finally:
            self._lock.release()
