"""Review and wishlist schemas"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from storefront.schemas.common import CamelModel, Money


class ReviewCreate(CamelModel):
    product_id: UUID
    user_id: UUID
    order_item_id: Optional[UUID] = None
    rating: int = Field(..., ge=1, le=5)
    title: Optional[str] = Field(None, max_length=200)
    comment: Optional[str] = Field(None, max_length=2000)


class ReviewUpdate(CamelModel):
    rating: Optional[int] = Field(None, ge=1, le=5)
    title: Optional[str] = Field(None, max_length=200)
    comment: Optional[str] = Field(None, max_length=2000)


class ReviewResponse(CamelModel):
    id: UUID
    product_id: UUID
    user_id: UUID
    user_name: Optional[str] = None
    order_item_id: Optional[UUID] = None
    rating: int
    title: Optional[str] = None
    comment: Optional[str] = None
    is_verified_purchase: bool
    is_approved: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RatingSummary(CamelModel):
    product_id: UUID
    average_rating: float
    review_count: int


class WishlistAdd(CamelModel):
    user_id: UUID
    product_id: UUID


class WishlistItemResponse(CamelModel):
    id: UUID
    user_id: UUID
    product_id: UUID
    product_name: str
    product_price: Money
    primary_image: Optional[str] = None
    in_stock: bool
    created_at: Optional[datetime] = None
