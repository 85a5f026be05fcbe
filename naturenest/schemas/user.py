# naturenest/schemas/user.py
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class UserPublic(BaseModel):
    """
    What other users may see (property listings).
    """
    id: int
    username: str

    model_config = {"from_attributes": True}


class UserContact(UserPublic):
    """
    Shown to the other side of a reservation (guest <-> owner).
    """
    email: EmailStr


class UserOut(UserContact):
    first_name: str
    last_name: str
    created_at: datetime


class UserCreate(BaseModel):
    email: EmailStr
    username: str = Field(min_length=3, max_length=50)
    password: str = Field(min_length=6)
    password2: str
    first_name: str
    last_name: str


class SignIn(BaseModel):
    email: EmailStr
    password: str


class ResetPassword(BaseModel):
    email: EmailStr
    username: str = Field(min_length=3)
    new_password: str = Field(min_length=6)
    confirm_new_password: str = Field(min_length=6)
