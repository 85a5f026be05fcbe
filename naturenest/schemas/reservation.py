# naturenest/schemas/reservation.py
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from naturenest.schemas.user import UserContact


class ReservationCreate(BaseModel):
    property_id: int
    # YYYY-MM-DD, both days included in the stay
    start_date: date
    end_date: date
    number_of_guests: int = Field(ge=1)


class ReservationUpdate(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    number_of_guests: Optional[int] = Field(default=None, ge=1)


class ReservationOut(BaseModel):
    id: int
    property_id: int
    user_id: int
    start_date: date
    end_date: date
    number_of_guests: int
    total_price: Decimal
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ReservationProperty(BaseModel):
    id: int
    name: str
    price: Decimal
    cover_url: str
    creator: UserContact

    model_config = {"from_attributes": True}


class ReservationDetail(ReservationOut):
    property: ReservationProperty
    user: UserContact
