# naturenest/core/security.py

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Tuple

from jose import JWTError, jwt
from passlib.context import CryptContext

from naturenest.core.config import settings

# pbkdf2_sha256: no 72-byte password limit, no bcrypt backend to install
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

ACCESS = "access"
REFRESH = "refresh"


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def _signing(kind: str) -> Tuple[str, timedelta]:
    """Secret and lifetime for a token kind."""
    if kind == ACCESS:
        return (
            settings.JWT_SECRET_KEY,
            timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        )
    if kind == REFRESH:
        return (
            settings.JWT_REFRESH_SECRET_KEY,
            timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        )
    raise ValueError(f"unknown token kind: {kind}")


def _encode(claims: Dict[str, Any], kind: str) -> str:
    secret, lifetime = _signing(kind)
    issued = datetime.now(timezone.utc)
    body = dict(claims)
    body["iat"] = issued
    body["exp"] = issued + lifetime
    body["type"] = kind
    # two tokens minted in the same second must still differ
    body["jti"] = uuid.uuid4().hex
    return jwt.encode(body, secret, algorithm=settings.JWT_ALGORITHM)


def _decode(token: str, kind: str) -> Dict[str, Any]:
    secret, _ = _signing(kind)
    payload = jwt.decode(token, secret, algorithms=[settings.JWT_ALGORITHM])
    if payload.get("type") != kind:
        raise JWTError("Invalid token type")
    if "sub" not in payload:
        raise JWTError("Missing sub in token")
    return payload


def token_claims(user) -> Dict[str, Any]:
    # jose requires "sub" to be a string
    return {"sub": str(user.id), "email": user.email}


def create_access_token(data: Dict[str, Any]) -> str:
    return _encode(data, ACCESS)


def create_refresh_token(data: Dict[str, Any]) -> str:
    return _encode(data, REFRESH)


def verify_access_token(token: str) -> Dict[str, Any]:
    """
    Decode and check an access token (get_current_user).
    Raises JWTError on a bad signature, expiry or wrong token type.
    """
    return _decode(token, ACCESS)


def verify_refresh_token(token: str) -> Dict[str, Any]:
    return _decode(token, REFRESH)
