# naturenest/db/crud_users.py

from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from naturenest.db.models import User, UserRefreshToken
from naturenest.core.security import get_password_hash


async def get_user(db: AsyncSession, user_id: int) -> Optional[User]:
    res = await db.execute(select(User).where(User.id == user_id))
    return res.scalar_one_or_none()


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    res = await db.execute(select(User).where(User.email == email))
    return res.scalar_one_or_none()


async def get_user_by_username(db: AsyncSession, username: str) -> Optional[User]:
    res = await db.execute(select(User).where(User.username == username))
    return res.scalar_one_or_none()


async def create_user(
    db: AsyncSession,
    *,
    username: str,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
) -> User:
    """
    Create a user with hashed password.
    Uniqueness of email/username is checked by the caller.
    """
    user = User(
        username=username,
        email=email,
        hashed_password=get_password_hash(password),
        first_name=first_name,
        last_name=last_name,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def update_password(db: AsyncSession, user: User, password: str) -> User:
    user.hashed_password = get_password_hash(password)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def _revoke_where(db: AsyncSession, *criteria) -> None:
    await db.execute(
        update(UserRefreshToken)
        .where(UserRefreshToken.revoked.is_(False), *criteria)
        .values(revoked=True)
    )


async def save_refresh_token(db: AsyncSession, user_id: int, token: str) -> None:
    """
    One live refresh token per user: older ones are revoked in the same commit.
    """
    await _revoke_where(db, UserRefreshToken.user_id == user_id)
    db.add(UserRefreshToken(user_id=user_id, token=token))
    await db.commit()


async def is_refresh_token_active(db: AsyncSession, token: str) -> bool:
    res = await db.execute(
        select(UserRefreshToken.id).where(
            UserRefreshToken.token == token,
            UserRefreshToken.revoked.is_(False),
        )
    )
    return res.first() is not None


async def revoke_refresh_token(db: AsyncSession, token: str) -> None:
    await _revoke_where(db, UserRefreshToken.token == token)
    await db.commit()
