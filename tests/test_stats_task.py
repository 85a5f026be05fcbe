"""Property stats recompute queue, run against a per-test SQLite database."""

import asyncio
from datetime import date, timedelta
from decimal import Decimal

import pytest

from helpers import seed_property

from naturenest.db import crud_properties, crud_reservations
from naturenest.db import session as db_session
from naturenest.tasks.stats import StatsTaskQueue, recompute_property_stats


def run(coro):
    return asyncio.run(coro)


async def _seed(factory) -> int:
    """One property (capacity 4) with two completed and one upcoming stay."""
    owner_id, prop_id = await seed_property(factory)
    today = date.today()
    async with factory() as db:
        for start, end, price in [
            # completed: 3 nights
            (today - timedelta(days=10), today - timedelta(days=8), Decimal("600.00")),
            # completed, ends today: 2 nights
            (today - timedelta(days=1), today, Decimal("200.00")),
            # upcoming: not counted
            (today + timedelta(days=5), today + timedelta(days=6), Decimal("400.00")),
        ]:
            await crud_reservations.create_reservation(
                db,
                user_id=owner_id,
                property_id=prop_id,
                start_date=start,
                end_date=end,
                number_of_guests=1,
                total_price=price,
            )
    return prop_id


async def _load(factory, prop_id):
    async with factory() as db:
        return await crud_properties.get_property(db, prop_id)


def test_recompute_writes_totals_of_completed_reservations(session_factory):
    async def scenario():
        prop_id = await _seed(session_factory)
        async with session_factory() as db:
            stats = await recompute_property_stats(db, prop_id)
        return stats, await _load(session_factory, prop_id)

    stats, prop = run(scenario())

    assert stats.completed_reservations == 2
    assert stats.total_nights_booked == 5
    assert stats.total_income == Decimal("800.00")
    assert prop.total_nights_booked == 5
    assert Decimal(prop.total_income) == Decimal("800.00")


def test_inline_backend_records_ok_result(session_factory):
    queue = StatsTaskQueue(session_factory, backend="inline")

    async def scenario():
        prop_id = await _seed(session_factory)
        task_id = await queue.enqueue(prop_id)
        return prop_id, task_id

    prop_id, task_id = run(scenario())

    result = queue.get_result(task_id)
    assert result is not None
    assert result.ok
    assert result.property_id == prop_id
    assert result.stats.total_nights_booked == 5
    assert task_id.startswith(f"property-stats:{prop_id}:")


def test_missing_property_is_recorded_not_raised(session_factory):
    queue = StatsTaskQueue(session_factory, backend="inline")

    async def scenario():
        await db_session.init_models()
        return await queue.enqueue(999)

    task_id = run(scenario())

    result = queue.get_result(task_id)
    assert not result.ok
    assert result.stats is None
    assert "LookupError" in result.error


def test_background_backend_completes_after_drain(session_factory):
    queue = StatsTaskQueue(session_factory, backend="background")

    async def scenario():
        prop_id = await _seed(session_factory)
        task_id = await queue.enqueue(prop_id)
        await queue.drain()
        return prop_id, task_id, await _load(session_factory, prop_id)

    prop_id, task_id, prop = run(scenario())

    assert queue.backend == "background"
    assert queue.get_result(task_id).ok
    assert prop.total_nights_booked == 5


def test_history_is_bounded(session_factory):
    queue = StatsTaskQueue(session_factory, backend="inline", history=2)

    async def scenario():
        await db_session.init_models()
        return [await queue.enqueue(pid) for pid in (101, 102, 103)]

    ids = run(scenario())

    assert [r.task_id for r in queue.results()] == ids[1:]
    assert queue.get_result(ids[0]) is None


def test_unknown_backend_rejected(session_factory):
    with pytest.raises(ValueError, match="STATS_TASKS_BACKEND"):
        StatsTaskQueue(session_factory, backend="celery")
