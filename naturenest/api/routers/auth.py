# naturenest/api/routers/auth.py
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException, status
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from naturenest.api.dependencies import get_db_session
from naturenest.api.routers.users import register_user
from naturenest.db import crud_users
from naturenest.schemas.auth import LogoutRequest, RefreshRequest, Token
from naturenest.schemas.user import SignIn, UserCreate, UserOut
from naturenest.core.security import (
    create_access_token,
    create_refresh_token,
    token_claims,
    verify_password,
    verify_refresh_token,
)

router = APIRouter()


async def _issue_tokens(db: AsyncSession, user) -> Dict[str, Any]:
    """
    Return a dict matching the Token pydantic model:
    { access_token, refresh_token, token_type, user }
    """
    data = token_claims(user)
    access = create_access_token(data)
    refresh = create_refresh_token(data)
    await crud_users.save_refresh_token(db, user.id, refresh)
    return {
        "access_token": access,
        "refresh_token": refresh,
        "token_type": "bearer",
        "user": UserOut.model_validate(user),
    }


@router.post("/register", response_model=Token)
async def register(payload: UserCreate, db: AsyncSession = Depends(get_db_session)):
    user = await register_user(db, payload)
    return await _issue_tokens(db, user)


@router.post("/sign-in", response_model=Token)
async def sign_in(payload: SignIn, db: AsyncSession = Depends(get_db_session)):
    user = await crud_users.get_user_by_email(db, payload.email)
    if not user or not verify_password(payload.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )
    return await _issue_tokens(db, user)


@router.post("/refresh", response_model=Token)
async def refresh(body: RefreshRequest, db: AsyncSession = Depends(get_db_session)):
    try:
        payload = verify_refresh_token(body.refresh_token)
        uid = int(payload["sub"])
    except (JWTError, KeyError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token",
        )

    if not await crud_users.is_refresh_token_active(db, body.refresh_token):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Refresh token revoked",
        )

    user = await crud_users.get_user(db, uid)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")

    return await _issue_tokens(db, user)


@router.post("/logout")
async def logout(
    body: LogoutRequest | None = Body(None),
    db: AsyncSession = Depends(get_db_session),
):
    # Body is optional; without a token there is nothing to revoke.
    if body and body.refresh_token:
        await crud_users.revoke_refresh_token(db, body.refresh_token)
    return {"ok": True}
