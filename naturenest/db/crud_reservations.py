# naturenest/db/crud_reservations.py

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from naturenest.db.models import Property, Reservation
from naturenest.domain.availability import OverlapQuery


@dataclass(frozen=True)
class ReservationFilter:
    """GET /reservations: one of the two is always set by the router."""

    property_id: Optional[int] = None
    user_id: Optional[int] = None


def _detail_options():
    return (
        selectinload(Reservation.property).selectinload(Property.creator),
        selectinload(Reservation.user),
    )


async def list_reservations(db: AsyncSession, filters: ReservationFilter) -> List[Reservation]:
    stmt = select(Reservation).options(*_detail_options())
    if filters.property_id is not None:
        stmt = stmt.where(Reservation.property_id == filters.property_id)
    if filters.user_id is not None:
        stmt = stmt.where(Reservation.user_id == filters.user_id)
    res = await db.execute(stmt.order_by(Reservation.start_date, Reservation.id))
    return list(res.scalars().all())


async def get_reservation(db: AsyncSession, reservation_id: int) -> Reservation | None:
    res = await db.execute(
        select(Reservation)
        .options(*_detail_options())
        .where(Reservation.id == reservation_id)
        .execution_options(populate_existing=True)
    )
    return res.scalars().first()


async def find_overlapping(db: AsyncSession, query: OverlapQuery) -> List[Reservation]:
    """
    Inclusive overlap on both ends:
      existing.start_date <= query.end_date AND existing.end_date >= query.start_date
    """
    stmt = select(Reservation).where(
        Reservation.property_id == query.property_id,
        Reservation.start_date <= query.end_date,
        Reservation.end_date >= query.start_date,
    )
    if query.exclude_id is not None:
        stmt = stmt.where(Reservation.id != query.exclude_id)
    res = await db.execute(stmt.order_by(Reservation.start_date))
    return list(res.scalars().all())


async def list_completed_reservations(
    db: AsyncSession,
    property_id: int,
    today: date,
) -> List[Reservation]:
    res = await db.execute(
        select(Reservation).where(
            Reservation.property_id == property_id,
            Reservation.end_date <= today,
        )
    )
    return list(res.scalars().all())


async def create_reservation(
    db: AsyncSession,
    *,
    user_id: int,
    property_id: int,
    start_date: date,
    end_date: date,
    number_of_guests: int,
    total_price: Decimal,
) -> Reservation:
    reservation = Reservation(
        user_id=user_id,
        property_id=property_id,
        start_date=start_date,
        end_date=end_date,
        number_of_guests=number_of_guests,
        total_price=total_price,
    )
    db.add(reservation)
    await db.commit()
    await db.refresh(reservation)
    return reservation


async def update_reservation(db: AsyncSession, reservation: Reservation, data: dict) -> Reservation:
    for k, v in data.items():
        if v is not None:
            setattr(reservation, k, v)
    db.add(reservation)
    await db.commit()
    await db.refresh(reservation)
    return reservation


async def delete_reservation(db: AsyncSession, reservation: Reservation):
    await db.delete(reservation)
    await db.commit()
    return True
