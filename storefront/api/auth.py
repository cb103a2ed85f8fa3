"""FastAPI routes for authentication"""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user
from storefront.db.database import get_db
from storefront.schemas.common import ApiResponse
from storefront.schemas.user import AuthResponse, LoginRequest, RefreshRequest, UserCreate, UserResponse
from storefront.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=ApiResponse[AuthResponse], status_code=status.HTTP_201_CREATED)
def register(user: UserCreate, db: Session = Depends(get_db)):
    """Create a customer account and return its tokens"""
    logger.info(f"Registering {user.email_address}")
    return ApiResponse.created(AuthService.register(db, user), "User registered successfully")


@router.post("/login", response_model=ApiResponse[AuthResponse])
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    """Exchange email and password for an access and refresh token"""
    return ApiResponse.success(AuthService.login(db, credentials.email, credentials.password), "Login successful")


@router.post("/refresh", response_model=ApiResponse[AuthResponse])
def refresh(request: RefreshRequest, db: Session = Depends(get_db)):
    """Exchange a refresh token for a new token pair"""
    return ApiResponse.success(AuthService.refresh(db, request.refresh_token), "Token refreshed successfully")


@router.get("/me", response_model=ApiResponse[UserResponse])
def me(current_user: UserResponse = Depends(get_current_user)):
    """The user behind the bearer token"""
    return ApiResponse.success(current_user)
