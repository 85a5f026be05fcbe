"""Best-effort recompute of a property's income / nights-booked stats.

Enqueued after every reservation create, update and delete. Each enqueue
runs at most once and is never retried; a failure is logged and recorded
as a failed ``StatsTaskResult`` instead of reaching the request.

Backend selection via STATS_TASKS_BACKEND:
- "background" (default): scheduled on the running event loop
- "inline": awaited before enqueue() returns (tests, scripts)
"""

from __future__ import annotations

import asyncio
import uuid
from collections import deque
from dataclasses import dataclass
from datetime import date
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from naturenest.core.config import settings
from naturenest.db import crud_properties, crud_reservations
from naturenest.domain.stats import PropertyStats, compute_property_stats
from naturenest.observability.logging import get_logger

logger = get_logger(__name__)

BACKENDS = ("background", "inline")


@dataclass(frozen=True)
class StatsTaskResult:
    task_id: str
    property_id: int
    ok: bool
    stats: PropertyStats | None = None
    error: str | None = None


async def recompute_property_stats(
    db: AsyncSession,
    property_id: int,
    *,
    today: date | None = None,
) -> PropertyStats:
    today = today or date.today()
    completed = await crud_reservations.list_completed_reservations(db, property_id, today)
    stats = compute_property_stats(completed, today=today)
    prop = await crud_properties.update_property_stats(
        db,
        property_id,
        total_nights_booked=stats.total_nights_booked,
        total_income=stats.total_income,
    )
    if prop is None:
        raise LookupError(f"Property id {property_id} not found")
    return stats


class StatsTaskQueue:
    """Fire-and-forget queue for property stats recomputes.

    Every task opens its own session from ``session_factory`` since the
    request session is closed by the time a background task runs.
    """

    def __init__(
        self,
        session_factory: Callable[[], AsyncSession],
        backend: str | None = None,
        history: int = 100,
    ) -> None:
        backend = backend or settings.STATS_TASKS_BACKEND
        if backend not in BACKENDS:
            raise ValueError(f"Unknown STATS_TASKS_BACKEND: {backend}")
        self._session_factory = session_factory
        self._backend = backend
        self._pending: set[asyncio.Task] = set()
        self._results: deque[StatsTaskResult] = deque(maxlen=history)

    @property
    def backend(self) -> str:
        return self._backend

    async def enqueue(self, property_id: int) -> str:
        """Schedule a recompute and return its task id."""
        task_id = f"property-stats:{property_id}:{uuid.uuid4().hex[:12]}"

        if self._backend == "inline":
            await self._run(task_id, property_id)
        else:
            task = asyncio.create_task(self._run(task_id, property_id))
            # keep a reference so the task isn't garbage collected mid-flight
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

        return task_id

    async def _run(self, task_id: str, property_id: int) -> StatsTaskResult:
        try:
            async with self._session_factory() as db:
                stats = await recompute_property_stats(db, property_id)
        except Exception as exc:
            logger.exception(
                "property stats recompute failed",
                extra={
                    "extra_fields": {
                        "task_id": task_id,
                        "property_id": property_id,
                    }
                },
            )
            result = StatsTaskResult(
                task_id=task_id,
                property_id=property_id,
                ok=False,
                error=f"{type(exc).__name__}: {exc}",
            )
        else:
            result = StatsTaskResult(
                task_id=task_id,
                property_id=property_id,
                ok=True,
                stats=stats,
            )
        self._results.append(result)
        return result

    def results(self) -> list[StatsTaskResult]:
        """Most recent results, oldest first."""
        return list(self._results)

    def get_result(self, task_id: str) -> StatsTaskResult | None:
        for result in self._results:
            if result.task_id == task_id:
                return result
        return None

    async def drain(self) -> None:
        """Wait for in-flight background tasks (used on shutdown)."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
