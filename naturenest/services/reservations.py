"""Reservation create / update / delete.

Every write goes validate -> availability -> price -> persist, then a
best-effort stats recompute is enqueued for the property.

Check-and-insert for one property is serialised by an in-process lock per
property plus a row lock on the property (SELECT ... FOR UPDATE) inside the
same transaction, so two bookings racing for the last free slots can't both
pass the availability check.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from datetime import date
from typing import AsyncIterator, Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from naturenest.core.errors import NotFoundError, ValidationError
from naturenest.db import crud_properties, crud_reservations
from naturenest.db.models import Property, Reservation
from naturenest.domain.availability import (
    DayAvailability,
    OverlapQuery,
    check_availability,
    validate_dates,
    validate_guests,
)
from naturenest.domain.pricing import calculate_price
from naturenest.observability.logging import get_logger
from naturenest.schemas.reservation import ReservationCreate, ReservationUpdate
from naturenest.tasks.stats import StatsTaskQueue

logger = get_logger(__name__)


class PropertyLocks:
    """One asyncio.Lock per property id.

    A lock exists only while some coroutine holds or waits on it; the
    entry is dropped when the last one leaves.
    """

    def __init__(self) -> None:
        self._locks: dict[int, asyncio.Lock] = {}
        self._users: dict[int, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, property_id: int) -> AsyncIterator[None]:
        lock = self._locks.setdefault(property_id, asyncio.Lock())
        self._users[property_id] = self._users.get(property_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[property_id] -= 1
            if not self._users[property_id]:
                del self._users[property_id]
                del self._locks[property_id]


class ReservationService:
    def __init__(
        self,
        stats_queue: StatsTaskQueue,
        locks: PropertyLocks | None = None,
    ) -> None:
        self._stats = stats_queue
        self._locks = locks if locks is not None else PropertyLocks()

    async def _lock_property(self, db: AsyncSession, property_id: int) -> Property:
        prop = await crud_properties.get_property_for_update(db, property_id)
        if prop is None:
            raise NotFoundError(f"Property id {property_id} not found")
        return prop

    async def check_availability(
        self,
        db: AsyncSession,
        prop: Property,
        *,
        start_date: date,
        end_date: date,
        number_of_guests: int,
        exclude_id: int | None = None,
    ) -> Mapping[date, DayAvailability]:
        existing = await crud_reservations.find_overlapping(
            db,
            OverlapQuery(
                property_id=prop.id,
                start_date=start_date,
                end_date=end_date,
                exclude_id=exclude_id,
            ),
        )
        return check_availability(
            capacity=prop.guests,
            start_date=start_date,
            end_date=end_date,
            number_of_guests=number_of_guests,
            existing=existing,
        )

    async def create(
        self,
        db: AsyncSession,
        *,
        user_id: int,
        data: ReservationCreate,
        today: date | None = None,
    ) -> Reservation:
        validate_guests(data.number_of_guests)
        validate_dates(data.start_date, data.end_date, today=today)

        async with self._locks.hold(data.property_id):
            prop = await self._lock_property(db, data.property_id)
            await self.check_availability(
                db,
                prop,
                start_date=data.start_date,
                end_date=data.end_date,
                number_of_guests=data.number_of_guests,
            )
            total_price = calculate_price(
                start_date=data.start_date,
                end_date=data.end_date,
                price_per_night=prop.price,
                number_of_guests=data.number_of_guests,
            )
            reservation = await crud_reservations.create_reservation(
                db,
                user_id=user_id,
                property_id=prop.id,
                start_date=data.start_date,
                end_date=data.end_date,
                number_of_guests=data.number_of_guests,
                total_price=total_price,
            )

        logger.info(
            "reservation created",
            extra={
                "extra_fields": {
                    "reservation_id": reservation.id,
                    "property_id": reservation.property_id,
                    "nights": (reservation.end_date - reservation.start_date).days + 1,
                    "number_of_guests": reservation.number_of_guests,
                }
            },
        )
        await self._stats.enqueue(reservation.property_id)
        return reservation

    async def update(
        self,
        db: AsyncSession,
        reservation: Reservation,
        data: ReservationUpdate,
        *,
        today: date | None = None,
    ) -> Reservation:
        fields = data.model_dump(exclude_unset=True, exclude_none=True)
        start_date = fields.get("start_date", reservation.start_date)
        end_date = fields.get("end_date", reservation.end_date)
        number_of_guests = fields.get("number_of_guests", reservation.number_of_guests)

        validate_guests(number_of_guests)
        if "start_date" in fields:
            validate_dates(start_date, end_date, today=today)
        elif "end_date" in fields:
            # stay may already be under way: only the new end is checked
            today = today or date.today()
            if end_date < start_date:
                raise ValidationError("end_date must be on or after start_date")
            if end_date < today:
                raise ValidationError("end_date cannot be in the past")

        async with self._locks.hold(reservation.property_id):
            prop = await self._lock_property(db, reservation.property_id)
            await self.check_availability(
                db,
                prop,
                start_date=start_date,
                end_date=end_date,
                number_of_guests=number_of_guests,
                exclude_id=reservation.id,
            )
            total_price = calculate_price(
                start_date=start_date,
                end_date=end_date,
                price_per_night=prop.price,
                number_of_guests=number_of_guests,
            )
            updated = await crud_reservations.update_reservation(
                db,
                reservation,
                {
                    "start_date": start_date,
                    "end_date": end_date,
                    "number_of_guests": number_of_guests,
                    "total_price": total_price,
                },
            )

        logger.info(
            "reservation updated",
            extra={
                "extra_fields": {
                    "reservation_id": updated.id,
                    "property_id": updated.property_id,
                    "changed": sorted(fields),
                }
            },
        )
        await self._stats.enqueue(updated.property_id)
        return updated

    async def delete(self, db: AsyncSession, reservation: Reservation) -> None:
        property_id = reservation.property_id
        reservation_id = reservation.id
        await crud_reservations.delete_reservation(db, reservation)
        logger.info(
            "reservation deleted",
            extra={
                "extra_fields": {
                    "reservation_id": reservation_id,
                    "property_id": property_id,
                }
            },
        )
        await self._stats.enqueue(property_id)
