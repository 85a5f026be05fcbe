# naturenest/db/crud_catalog.py
from typing import List, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from naturenest.db.catalog import AMENITIES, CATEGORIES
from naturenest.db.models import Amenity, Category


async def list_categories(db: AsyncSession, skip: int = 0, take: int = 10) -> List[Category]:
    res = await db.execute(
        select(Category).order_by(Category.id).offset(skip).limit(take)
    )
    return list(res.scalars().all())


async def list_amenities(db: AsyncSession, skip: int = 0, take: int = 10) -> List[Amenity]:
    res = await db.execute(
        select(Amenity).order_by(Amenity.id).offset(skip).limit(take)
    )
    return list(res.scalars().all())


async def get_category(db: AsyncSession, category_id: int) -> Category | None:
    res = await db.execute(select(Category).where(Category.id == category_id))
    return res.scalar_one_or_none()


async def get_amenities_by_ids(db: AsyncSession, ids: Sequence[int]) -> List[Amenity]:
    if not ids:
        return []
    res = await db.execute(select(Amenity).where(Amenity.id.in_(list(ids))))
    return list(res.scalars().all())


async def _sync(db: AsyncSession, model, entries: list[dict]) -> int:
    """
    Insert catalog entries whose name is not in the table yet.
    Existing rows are left untouched. Returns number inserted.
    """
    res = await db.execute(select(model.name))
    existing = set(res.scalars().all())
    missing = [e for e in entries if e["name"] not in existing]
    for entry in missing:
        db.add(model(**entry))
    if missing:
        await db.commit()
    return len(missing)


async def sync_categories(db: AsyncSession) -> int:
    return await _sync(db, Category, CATEGORIES)


async def sync_amenities(db: AsyncSession) -> int:
    return await _sync(db, Amenity, AMENITIES)
