"""Shopping cart records"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID


@dataclass
class ShoppingCart:
    user_id: UUID
    id: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class CartItem:
    cart_id: UUID
    product_id: UUID
    quantity: int
    id: Optional[UUID] = None
    added_at: Optional[datetime] = None
