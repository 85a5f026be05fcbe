# naturenest/api/routers/categories.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from naturenest.api.dependencies import get_db_session
from naturenest.db import crud_catalog
from naturenest.schemas.catalog import CategoryOut

router = APIRouter()


@router.get("", response_model=List[CategoryOut])
async def list_categories(
    db: AsyncSession = Depends(get_db_session),
    skip: int = Query(0, ge=0),
    take: int = Query(10, ge=1, le=100),
):
    return await crud_catalog.list_categories(db, skip=skip, take=take)
