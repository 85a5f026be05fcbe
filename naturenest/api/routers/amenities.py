# naturenest/api/routers/amenities.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from naturenest.api.dependencies import get_db_session
from naturenest.db import crud_catalog
from naturenest.schemas.catalog import AmenityOut

router = APIRouter()


@router.get("", response_model=List[AmenityOut])
async def list_amenities(
    db: AsyncSession = Depends(get_db_session),
    skip: int = Query(0, ge=0),
    take: int = Query(10, ge=1, le=100),
):
    """
    All amenities, paginated with skip/take.
    """
    return await crud_catalog.list_amenities(db, skip=skip, take=take)
