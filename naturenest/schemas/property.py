# naturenest/schemas/property.py
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from naturenest.schemas.catalog import AmenityOut, CategoryOut
from naturenest.schemas.user import UserContact, UserPublic


class PropertyCreate(BaseModel):
    name: str = Field(min_length=1)
    tag_line: str = Field(min_length=1, max_length=30)
    description: str = Field(min_length=1)
    # per night
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    category_id: int
    cover_url: str = Field(min_length=1)
    # max guests on any single day
    guests: int = Field(ge=1)
    bedrooms: int = Field(ge=0)
    beds: int = Field(ge=0)
    baths: int = Field(ge=0)
    amenity_ids: Optional[List[int]] = None
    country_code: str = Field(pattern=r"^[A-Z]{2}$")


class PropertyUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    tag_line: Optional[str] = Field(default=None, min_length=1, max_length=30)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    category_id: Optional[int] = None
    cover_url: Optional[str] = None
    guests: Optional[int] = Field(default=None, ge=1)
    bedrooms: Optional[int] = Field(default=None, ge=0)
    beds: Optional[int] = Field(default=None, ge=0)
    baths: Optional[int] = Field(default=None, ge=0)
    amenity_ids: Optional[List[int]] = None
    country_code: Optional[str] = Field(default=None, pattern=r"^[A-Z]{2}$")


class PropertyPublic(BaseModel):
    id: int
    name: str
    tag_line: str
    description: str
    price: Decimal
    cover_url: str
    guests: int
    bedrooms: int
    beds: int
    baths: int
    country_code: str
    category: CategoryOut
    amenities: List[AmenityOut]
    creator: UserPublic

    model_config = {"from_attributes": True}


class PropertyReservation(BaseModel):
    id: int
    start_date: date
    end_date: date
    total_price: Decimal
    number_of_guests: int
    user: UserContact

    model_config = {"from_attributes": True}


class PropertyFull(PropertyPublic):
    """
    Owner view: adds reservations, stats and creator contact.
    """
    creator_id: int
    category_id: int
    creator: UserContact
    total_nights_booked: int
    total_income: Decimal
    reservations: List[PropertyReservation]
    created_at: datetime
    updated_at: datetime
