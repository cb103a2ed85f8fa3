"""FastAPI routes for users"""
from uuid import UUID
import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from storefront.api.deps import Pagination, pagination
from storefront.db.database import get_db
from storefront.schemas.common import ApiResponse, PageResponse
from storefront.schemas.user import UserCreate, UserResponse, UserUpdate
from storefront.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("", response_model=ApiResponse[UserResponse], status_code=status.HTTP_201_CREATED)
def create_user(user: UserCreate, db: Session = Depends(get_db)):
    """Create a new user"""
    logger.info(f"Creating user {user.email_address}")
    return ApiResponse.created(UserService.create_user(db, user), "User created successfully")


@router.get("", response_model=ApiResponse[PageResponse[UserResponse]])
def list_users(paging: Pagination = Depends(pagination), db: Session = Depends(get_db)):
    """List users with pagination"""
    return ApiResponse.success(UserService.get_users(db, paging.page, paging.size))


@router.get("/search", response_model=ApiResponse[PageResponse[UserResponse]])
def search_users(
    keyword: str = Query(..., description="Matched against email, first and last name"),
    paging: Pagination = Depends(pagination),
    db: Session = Depends(get_db),
):
    """Search users"""
    return ApiResponse.success(UserService.search_users(db, keyword, paging.page, paging.size))


@router.get("/count", response_model=ApiResponse[int])
def count_users(db: Session = Depends(get_db)):
    return ApiResponse.success(UserService.count_users(db))


@router.get("/email/{email}", response_model=ApiResponse[UserResponse])
def get_user_by_email(email: str, db: Session = Depends(get_db)):
    """Get a user by email address"""
    return ApiResponse.success(UserService.get_user_by_email(db, email))


@router.get("/{user_id}", response_model=ApiResponse[UserResponse])
def get_user(user_id: UUID, db: Session = Depends(get_db)):
    """Get a specific user by ID"""
    return ApiResponse.success(UserService.get_user(db, user_id))


@router.put("/{user_id}", response_model=ApiResponse[UserResponse])
def update_user(user_id: UUID, user: UserUpdate, db: Session = Depends(get_db)):
    """Update a user; omitted fields are left unchanged"""
    return ApiResponse.success(UserService.update_user(db, user_id, user), "User updated successfully")


@router.patch("/{user_id}/activate", response_model=ApiResponse[UserResponse])
def activate_user(user_id: UUID, db: Session = Depends(get_db)):
    return ApiResponse.success(UserService.set_active(db, user_id, True), "User activated successfully")


@router.patch("/{user_id}/deactivate", response_model=ApiResponse[UserResponse])
def deactivate_user(user_id: UUID, db: Session = Depends(get_db)):
    return ApiResponse.success(UserService.set_active(db, user_id, False), "User deactivated successfully")


@router.delete("/{user_id}", response_model=ApiResponse[None])
def delete_user(user_id: UUID, db: Session = Depends(get_db)):
    """Delete a user"""
    UserService.delete_user(db, user_id)
    return ApiResponse.success(message="User deleted successfully")
