"""
Pydantic schemas for categories and products
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from storefront.schemas.common import CamelModel, Money


class CategoryCreate(CamelModel):
    """Schema for creating a category"""
    category_name: str = Field(..., min_length=2, max_length=100)
    parent_category_id: Optional[UUID] = None


class CategoryUpdate(CamelModel):
    """Schema for updating a category"""
    category_name: Optional[str] = Field(None, min_length=2, max_length=100)
    parent_category_id: Optional[UUID] = None


class CategoryResponse(CamelModel):
    """Schema for category response; ``subcategories`` is only filled for the tree"""
    id: UUID
    category_name: str
    parent_category_id: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    subcategories: List["CategoryResponse"] = Field(default_factory=list)


class ProductCreate(CamelModel):
    """Schema for creating a product"""
    category_id: UUID
    sku: Optional[str] = Field(None, max_length=50)
    name: str = Field(..., min_length=2, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    price: Money = Field(..., gt=0, decimal_places=2)
    stock_quantity: int = Field(0, ge=0)
    is_active: bool = True
    images: List[str] = Field(default_factory=list)


class ProductUpdate(CamelModel):
    """Schema for updating a product (all fields optional)"""
    category_id: Optional[UUID] = None
    sku: Optional[str] = Field(None, max_length=50)
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    price: Optional[Money] = Field(None, gt=0, decimal_places=2)
    stock_quantity: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None
    images: Optional[List[str]] = None


class ProductResponse(CamelModel):
    """Schema for product response"""
    id: UUID
    category_id: Optional[UUID] = None
    category_name: Optional[str] = None
    sku: Optional[str] = None
    name: str
    description: Optional[str] = None
    price: Money
    stock_quantity: int
    is_active: bool
    in_stock: bool
    images: List[str] = Field(default_factory=list)
    primary_image: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
