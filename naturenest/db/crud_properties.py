# naturenest/db/crud_properties.py
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from naturenest.db.models import Amenity, Category, Property, Reservation


@dataclass(frozen=True)
class PropertyFilter:
    """Public listing filters (GET /properties)."""

    skip: int = 0
    take: int = 10
    category_name: Optional[str] = None
    property_name: Optional[str] = None


def _public_options():
    return (
        selectinload(Property.category),
        selectinload(Property.amenities),
        selectinload(Property.creator),
    )


def _full_options():
    # async sessions can't lazy-load, so every relationship the
    # full view touches is loaded up front
    return _public_options() + (
        selectinload(Property.reservations).selectinload(Reservation.user),
    )


async def list_properties(db: AsyncSession, filters: PropertyFilter) -> List[Property]:
    stmt = select(Property).options(*_public_options())

    if filters.category_name:
        stmt = stmt.join(Category, Property.category_id == Category.id).where(
            Category.name == filters.category_name
        )
    if filters.property_name:
        stmt = stmt.where(Property.name.ilike(f"%{filters.property_name}%"))

    stmt = stmt.order_by(Property.id.desc()).offset(filters.skip).limit(filters.take)
    res = await db.execute(stmt)
    return list(res.scalars().all())


async def get_property(db: AsyncSession, prop_id: int) -> Property | None:
    res = await db.execute(select(Property).where(Property.id == prop_id))
    return res.scalars().first()


async def get_property_for_update(db: AsyncSession, prop_id: int) -> Property | None:
    """
    Row-locks the property until the surrounding transaction ends
    (no-op on SQLite). Serialises bookings of one property across workers.
    """
    res = await db.execute(
        select(Property).where(Property.id == prop_id).with_for_update()
    )
    return res.scalars().first()


async def get_property_public(db: AsyncSession, prop_id: int) -> Property | None:
    res = await db.execute(
        select(Property).options(*_public_options()).where(Property.id == prop_id)
    )
    return res.scalars().first()


async def get_property_full(db: AsyncSession, prop_id: int) -> Property | None:
    res = await db.execute(
        select(Property)
        .options(*_full_options())
        .where(Property.id == prop_id)
        .execution_options(populate_existing=True)
    )
    return res.scalars().first()


async def list_properties_for_creator(
    db: AsyncSession,
    creator_id: int,
    skip: int = 0,
    take: int = 10,
) -> List[Property]:
    res = await db.execute(
        select(Property)
        .options(*_full_options())
        .where(Property.creator_id == creator_id)
        .order_by(Property.created_at.desc(), Property.id.desc())
        .offset(skip)
        .limit(take)
    )
    return list(res.scalars().all())


async def create_property(
    db: AsyncSession,
    *,
    amenities: Sequence[Amenity] = (),
    **kwargs,
) -> Property:
    prop = Property(**kwargs)
    prop.amenities = list(amenities)
    db.add(prop)
    await db.commit()
    return await get_property_full(db, prop.id)


async def update_property(
    db: AsyncSession,
    prop: Property,
    data: dict,
    amenities: Optional[Sequence[Amenity]] = None,
) -> Property:
    """
    `prop` must come from get_property_full so that replacing the
    amenities collection doesn't trigger a lazy load.
    """
    for k, v in data.items():
        if v is not None:
            setattr(prop, k, v)
    if amenities is not None:
        prop.amenities = list(amenities)
    db.add(prop)
    await db.commit()
    return await get_property_full(db, prop.id)


async def delete_property(db: AsyncSession, prop: Property):
    await db.delete(prop)
    await db.commit()
    return True


async def update_property_stats(
    db: AsyncSession,
    prop_id: int,
    *,
    total_nights_booked: int,
    total_income: Decimal,
) -> Property | None:
    prop = await get_property(db, prop_id)
    if not prop:
        return None
    prop.total_nights_booked = total_nights_booked
    prop.total_income = total_income
    db.add(prop)
    await db.commit()
    return prop
