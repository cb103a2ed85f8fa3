"""Authentication utilities: password hashing and JWT tokens"""
from datetime import datetime, timedelta, timezone
from typing import Optional
import logging

from jose import JWTError, jwt
from passlib.context import CryptContext

from storefront.config import settings
from storefront.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash a password"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password"""
    return pwd_context.verify(plain_password, hashed_password)


def _encode(data: dict, expires_delta: timedelta) -> str:
    to_encode = data.copy()
    to_encode.update({"exp": datetime.now(timezone.utc) + expires_delta})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token"""
    return _encode(
        {**data, "type": ACCESS_TOKEN},
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes),
    )


def create_refresh_token(subject: str, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT refresh token carrying only the subject"""
    return _encode(
        {"sub": subject, "type": REFRESH_TOKEN},
        expires_delta or timedelta(days=settings.refresh_token_expire_days),
    )


def decode_token(token: str, expected_type: str = ACCESS_TOKEN) -> dict:
    """
    Decode and check a token

    Raises UnauthorizedError when the signature, expiry or token type
    does not match.
    """
    try:
        claims = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        logger.warning(f"Rejected token: {e}")
        raise UnauthorizedError("Invalid or expired token") from e

    if claims.get("type") != expected_type or not claims.get("sub"):
        logger.warning(f"Rejected token of type {claims.get('type')}, expected {expected_type}")
        raise UnauthorizedError("Invalid or expired token")
    return claims
