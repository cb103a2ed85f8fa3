"""Shared route dependencies"""
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from storefront.config import settings
from storefront.db.database import get_db
from storefront.exceptions import UnauthorizedError
from storefront.schemas.user import UserResponse
from storefront.services.auth_service import AuthService

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class Pagination:
    page: int
    size: int


def pagination(
    page: int = Query(0, description="Zero-based page number"),
    size: int = Query(settings.default_page_size, description="Page size (1-100)"),
) -> Pagination:
    """Bounds are checked by the repositories so every caller gets the same errors"""
    return Pagination(page=page, size=size)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> UserResponse:
    """Resolve the bearer access token to a user"""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise UnauthorizedError("Authentication required")
    return AuthService.current_user(db, credentials.credentials)
