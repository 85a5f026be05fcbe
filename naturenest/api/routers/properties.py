# naturenest/api/routers/properties.py
from decimal import Decimal
from typing import List, Optional, Sequence

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from naturenest.api.dependencies import get_current_user, get_db_session
from naturenest.api.guards import get_owned_property
from naturenest.core.errors import NotFoundError, ValidationError
from naturenest.db import crud_catalog, crud_properties
from naturenest.db.crud_properties import PropertyFilter
from naturenest.db.models import Amenity
from naturenest.observability.logging import get_logger
from naturenest.schemas.property import (
    PropertyCreate,
    PropertyFull,
    PropertyPublic,
    PropertyUpdate,
)

router = APIRouter()

logger = get_logger(__name__)


async def _check_category(db: AsyncSession, category_id: int) -> None:
    if not await crud_catalog.get_category(db, category_id):
        raise ValidationError(f"Category id {category_id} not found")


async def _resolve_amenities(db: AsyncSession, ids: Sequence[int]) -> List[Amenity]:
    wanted = list(dict.fromkeys(ids))
    amenities = await crud_catalog.get_amenities_by_ids(db, wanted)
    found = {a.id for a in amenities}
    missing = [i for i in wanted if i not in found]
    if missing:
        raise ValidationError(
            f"Amenities not found: {', '.join(str(i) for i in missing)}",
            {"missing_amenity_ids": missing},
        )
    return amenities


@router.get("", response_model=List[PropertyPublic])
async def list_properties(
    db: AsyncSession = Depends(get_db_session),
    skip: int = Query(0, ge=0),
    take: int = Query(10, ge=1, le=100),
    category_name: Optional[str] = None,
    property_name: Optional[str] = None,
):
    """
    Public listing. property_name matches case-insensitively anywhere in the name.
    """
    filters = PropertyFilter(
        skip=skip,
        take=take,
        category_name=category_name,
        property_name=property_name,
    )
    return await crud_properties.list_properties(db, filters)


@router.post("", response_model=PropertyFull, status_code=status.HTTP_201_CREATED)
async def create_property(
    body: PropertyCreate,
    db: AsyncSession = Depends(get_db_session),
    current_user=Depends(get_current_user),
):
    await _check_category(db, body.category_id)
    amenities = await _resolve_amenities(db, body.amenity_ids or [])

    data = body.model_dump(exclude={"amenity_ids"})
    prop = await crud_properties.create_property(
        db,
        creator_id=current_user.id,
        amenities=amenities,
        total_nights_booked=0,
        total_income=Decimal("0"),
        **data,
    )
    logger.info(
        "property created",
        extra={"extra_fields": {"property_id": prop.id, "creator_id": current_user.id}},
    )
    return prop


@router.get("/my", response_model=List[PropertyFull])
async def my_properties(
    db: AsyncSession = Depends(get_db_session),
    current_user=Depends(get_current_user),
    skip: int = Query(0, ge=0),
    take: int = Query(10, ge=1, le=100),
):
    """
    Creator dashboard: own properties, newest first, with reservations.
    """
    return await crud_properties.list_properties_for_creator(
        db, current_user.id, skip=skip, take=take
    )


@router.get("/{prop_id}", response_model=PropertyPublic)
async def get_property(prop_id: int, db: AsyncSession = Depends(get_db_session)):
    prop = await crud_properties.get_property_public(db, prop_id)
    if not prop:
        raise NotFoundError(f"Property id {prop_id} not found")
    return prop


@router.get("/{prop_id}/full", response_model=PropertyFull)
async def get_property_full(
    prop_id: int,
    db: AsyncSession = Depends(get_db_session),
    current_user=Depends(get_current_user),
):
    return await get_owned_property(db, prop_id, current_user, "view full details of")


@router.patch("/{prop_id}", response_model=PropertyFull)
async def update_property(
    prop_id: int,
    body: PropertyUpdate,
    db: AsyncSession = Depends(get_db_session),
    current_user=Depends(get_current_user),
):
    prop = await get_owned_property(db, prop_id, current_user, "update")

    data = body.model_dump(exclude_unset=True, exclude={"amenity_ids"})
    if data.get("category_id") is not None:
        await _check_category(db, data["category_id"])

    amenities = None
    if body.amenity_ids is not None:
        amenities = await _resolve_amenities(db, body.amenity_ids)

    return await crud_properties.update_property(db, prop, data, amenities=amenities)


@router.delete("/{prop_id}")
async def delete_property(
    prop_id: int,
    db: AsyncSession = Depends(get_db_session),
    current_user=Depends(get_current_user),
):
    prop = await get_owned_property(db, prop_id, current_user, "delete")
    await crud_properties.delete_property(db, prop)
    logger.info(
        "property deleted",
        extra={"extra_fields": {"property_id": prop_id, "creator_id": current_user.id}},
    )
    return {"message": "deleted"}
