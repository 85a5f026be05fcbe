# naturenest/api/routers/users.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from naturenest.api.dependencies import get_current_user, get_db_session
from naturenest.core.errors import ConflictError, NotFoundError, ValidationError
from naturenest.db import crud_users
from naturenest.db.models import User
from naturenest.schemas.user import ResetPassword, UserCreate, UserOut

router = APIRouter()


async def register_user(db: AsyncSession, payload: UserCreate) -> User:
    """
    Shared by POST /users and POST /auth/register.
    """
    if payload.password != payload.password2:
        raise ValidationError("Passwords do not match")
    if await crud_users.get_user_by_email(db, payload.email):
        raise ConflictError("Email already exists")
    if await crud_users.get_user_by_username(db, payload.username):
        raise ConflictError("Username already exists")

    return await crud_users.create_user(
        db,
        username=payload.username,
        email=payload.email,
        password=payload.password,
        first_name=payload.first_name,
        last_name=payload.last_name,
    )


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
async def create_user(payload: UserCreate, db: AsyncSession = Depends(get_db_session)):
    return await register_user(db, payload)


@router.get("/me", response_model=UserOut)
async def me(current_user=Depends(get_current_user)):
    return current_user


@router.post("/reset-password", response_model=UserOut)
async def reset_password(body: ResetPassword, db: AsyncSession = Depends(get_db_session)):
    user = await crud_users.get_user_by_email(db, body.email)
    if not user:
        raise NotFoundError("No user found with this email")
    if user.username != body.username:
        raise ValidationError("Username does not match with the email")
    if body.new_password != body.confirm_new_password:
        raise ValidationError("Passwords do not match")
    return await crud_users.update_password(db, user, body.new_password)
