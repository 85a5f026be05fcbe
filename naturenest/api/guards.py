# naturenest/api/guards.py
# Ownership checks shared by the property and reservation routers.
from sqlalchemy.ext.asyncio import AsyncSession

from naturenest.core.errors import AuthorizationError, NotFoundError
from naturenest.db import crud_properties, crud_reservations
from naturenest.db.models import Property, Reservation, User


async def get_owned_property(
    db: AsyncSession,
    prop_id: int,
    user: User,
    action: str,
) -> Property:
    """
    Full property (all relationships loaded) if `user` created it.
    """
    prop = await crud_properties.get_property_full(db, prop_id)
    if not prop:
        raise NotFoundError(f"Property id {prop_id} not found")
    if prop.creator_id != user.id:
        raise AuthorizationError(f"You are not authorized to {action} this property")
    return prop


async def get_accessible_reservation(
    db: AsyncSession,
    reservation_id: int,
    user: User,
    action: str,
) -> Reservation:
    """
    Reservation guest and property owner both pass.
    """
    reservation = await crud_reservations.get_reservation(db, reservation_id)
    if not reservation:
        raise NotFoundError("Reservation not found")
    if user.id not in (reservation.user_id, reservation.property.creator_id):
        raise AuthorizationError(f"You are not authorized to {action} this reservation")
    return reservation
