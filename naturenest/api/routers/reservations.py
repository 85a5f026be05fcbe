# naturenest/api/routers/reservations.py
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from naturenest.api.dependencies import (
    get_current_user,
    get_db_session,
    get_reservation_service,
)
from naturenest.api.guards import get_accessible_reservation, get_owned_property
from naturenest.db import crud_reservations
from naturenest.db.crud_reservations import ReservationFilter
from naturenest.schemas.reservation import (
    ReservationCreate,
    ReservationDetail,
    ReservationOut,
    ReservationUpdate,
)
from naturenest.services.reservations import ReservationService

router = APIRouter()


@router.get("", response_model=List[ReservationDetail])
async def list_reservations(
    property_id: Optional[int] = None,
    db: AsyncSession = Depends(get_db_session),
    current_user=Depends(get_current_user),
):
    """
    With property_id: every reservation of that property (owner only).
    Without: the caller's own reservations.
    """
    if property_id is not None:
        await get_owned_property(db, property_id, current_user, "view reservations for")
        filters = ReservationFilter(property_id=property_id)
    else:
        filters = ReservationFilter(user_id=current_user.id)
    return await crud_reservations.list_reservations(db, filters)


@router.get("/my", response_model=List[ReservationDetail])
async def my_reservations(
    db: AsyncSession = Depends(get_db_session),
    current_user=Depends(get_current_user),
):
    return await crud_reservations.list_reservations(
        db, ReservationFilter(user_id=current_user.id)
    )


@router.post("", response_model=ReservationOut, status_code=status.HTTP_201_CREATED)
async def create_reservation(
    body: ReservationCreate,
    db: AsyncSession = Depends(get_db_session),
    current_user=Depends(get_current_user),
    service: ReservationService = Depends(get_reservation_service),
):
    return await service.create(db, user_id=current_user.id, data=body)


@router.get("/{reservation_id}", response_model=ReservationDetail)
async def get_reservation(
    reservation_id: int,
    db: AsyncSession = Depends(get_db_session),
    current_user=Depends(get_current_user),
):
    return await get_accessible_reservation(db, reservation_id, current_user, "view")


@router.patch("/{reservation_id}", response_model=ReservationOut)
async def update_reservation(
    reservation_id: int,
    body: ReservationUpdate,
    db: AsyncSession = Depends(get_db_session),
    current_user=Depends(get_current_user),
    service: ReservationService = Depends(get_reservation_service),
):
    reservation = await get_accessible_reservation(db, reservation_id, current_user, "update")
    return await service.update(db, reservation, body)


@router.delete("/{reservation_id}")
async def delete_reservation(
    reservation_id: int,
    db: AsyncSession = Depends(get_db_session),
    current_user=Depends(get_current_user),
    service: ReservationService = Depends(get_reservation_service),
):
    reservation = await get_accessible_reservation(db, reservation_id, current_user, "delete")
    await service.delete(db, reservation)
    return {"message": "deleted"}
