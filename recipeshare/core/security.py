# security.py
# Signed bearer tokens and password hashing.

import logging
from datetime import timedelta, datetime, timezone
from typing import Any, Dict
from uuid import UUID

from jose import JWTError, jwt
from passlib.context import CryptContext

from recipeshare.core.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Get a logger instance
logger = logging.getLogger(__name__)


class InvalidToken(Exception):
    """Raised when a token is malformed, tampered with, or expired."""


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password):
    return pwd_context.hash(password)


def create_access_token(
    principal_id: UUID,
    claims: Dict[str, Any] | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Issues a signed token for the principal.
    `claims` carries denormalized display data such as handle and email.
    """
    to_encode = dict(claims or {})
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    now = datetime.now(timezone.utc)
    to_encode.update({"sub": str(principal_id), "iat": now, "exp": now + expires_delta})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Verifies signature and expiry and returns the claims.
    Raises InvalidToken on any failure.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.warning(f"Invalid auth token: {e}")
        raise InvalidToken(str(e)) from e

    subject = payload.get("sub")
    try:
        UUID(str(subject))
    except ValueError as e:
        logger.warning("Auth token carries no valid subject")
        raise InvalidToken("Token subject is not a valid id") from e
    return payload
