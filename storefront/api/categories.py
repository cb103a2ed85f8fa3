"""FastAPI routes for categories"""
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from storefront.db.database import get_db
from storefront.schemas.catalog import CategoryCreate, CategoryResponse, CategoryUpdate
from storefront.schemas.common import ApiResponse
from storefront.services.category_service import CategoryService

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.post("", response_model=ApiResponse[CategoryResponse], status_code=status.HTTP_201_CREATED)
def create_category(category: CategoryCreate, db: Session = Depends(get_db)):
    """Create a new category"""
    return ApiResponse.created(CategoryService.create_category(db, category), "Category created successfully")


@router.get("", response_model=ApiResponse[List[CategoryResponse]])
def list_categories(db: Session = Depends(get_db)):
    """All categories, ordered by name"""
    return ApiResponse.success(CategoryService.get_categories(db))


@router.get("/root", response_model=ApiResponse[List[CategoryResponse]])
def list_root_categories(db: Session = Depends(get_db)):
    """Categories without a parent"""
    return ApiResponse.success(CategoryService.get_root_categories(db))


@router.get("/tree", response_model=ApiResponse[List[CategoryResponse]])
def category_tree(db: Session = Depends(get_db)):
    """All categories nested under their parents"""
    return ApiResponse.success(CategoryService.get_category_tree(db))


@router.get("/{category_id}", response_model=ApiResponse[CategoryResponse])
def get_category(category_id: UUID, db: Session = Depends(get_db)):
    return ApiResponse.success(CategoryService.get_category(db, category_id))


@router.get("/{category_id}/subcategories", response_model=ApiResponse[List[CategoryResponse]])
def list_subcategories(category_id: UUID, db: Session = Depends(get_db)):
    return ApiResponse.success(CategoryService.get_subcategories(db, category_id))


@router.put("/{category_id}", response_model=ApiResponse[CategoryResponse])
def update_category(category_id: UUID, category: CategoryUpdate, db: Session = Depends(get_db)):
    """Rename or move a category"""
    return ApiResponse.success(
        CategoryService.update_category(db, category_id, category), "Category updated successfully"
    )


@router.delete("/{category_id}", response_model=ApiResponse[None])
def delete_category(category_id: UUID, db: Session = Depends(get_db)):
    """Delete a category that has no products or subcategories"""
    CategoryService.delete_category(db, category_id)
    return ApiResponse.success(message="Category deleted successfully")
