"""Catalog records: categories, products, reviews and wishlist entries"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID


@dataclass
class Category:
    category_name: str
    id: Optional[UUID] = None
    parent_category_id: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class Product:
    """Product model"""
    name: str
    price: Decimal
    id: Optional[UUID] = None
    category_id: Optional[UUID] = None
    category_name: Optional[str] = None
    sku: Optional[str] = None
    description: Optional[str] = None
    stock_quantity: int = 0
    is_active: bool = True
    images: List[str] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def in_stock(self) -> bool:
        return self.stock_quantity > 0

    @property
    def primary_image(self) -> Optional[str]:
        return self.images[0] if self.images else None

    def can_be_ordered(self, quantity: int) -> bool:
        return self.is_active and quantity <= self.stock_quantity

    def __repr__(self):
        return f"<Product(id={self.id}, sku={self.sku}, stock={self.stock_quantity})>"


@dataclass
class ProductReview:
    user_id: UUID
    product_id: UUID
    rating: int
    id: Optional[UUID] = None
    order_item_id: Optional[UUID] = None
    title: Optional[str] = None
    comment: Optional[str] = None
    is_verified_purchase: bool = False
    is_approved: bool = True
    user_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class WishlistItem:
    user_id: UUID
    product_id: UUID
    id: Optional[UUID] = None
    created_at: Optional[datetime] = None
