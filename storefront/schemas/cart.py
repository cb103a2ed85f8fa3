"""Shopping cart schemas"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from storefront.schemas.common import CamelModel, Money


class CartItemAdd(CamelModel):
    product_id: UUID
    quantity: int = Field(..., ge=1)


class CartItemUpdate(CamelModel):
    quantity: int = Field(..., ge=1)


class CartItemResponse(CamelModel):
    id: UUID
    product_id: UUID
    product_name: str
    product_image: Optional[str] = None
    unit_price: Money
    quantity: int
    subtotal: Money
    in_stock: bool
    available_stock: int
    added_at: Optional[datetime] = None


class CartResponse(CamelModel):
    id: UUID
    user_id: UUID
    total_items: int
    total_value: Money
    created_at: Optional[datetime] = None
    items: List[CartItemResponse] = Field(default_factory=list)
