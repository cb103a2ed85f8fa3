"""
Pydantic schemas for orders
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from storefront.schemas.common import CamelModel, Money


class OrderItemCreate(CamelModel):
    """Schema for creating an order item"""
    product_id: UUID = Field(..., description="Product ID")
    quantity: int = Field(..., ge=1, description="Quantity")


class OrderCreate(CamelModel):
    """Schema for creating an order"""
    user_id: UUID = Field(..., description="User ID")
    payment_method_id: Optional[UUID] = None
    shipping_address_id: Optional[UUID] = None
    shipping_method_id: Optional[UUID] = None
    customer_notes: Optional[str] = Field(None, max_length=1000)
    items: List[OrderItemCreate] = Field(..., min_length=1, description="At least one item required")


class OrderItemUpdate(CamelModel):
    """
    One edit of an order line

    With ``id`` of an existing line: ``quantity`` replaces its quantity,
    a missing or non-positive quantity removes the line. Without a
    matching ``id``: ``product_id`` and a positive ``quantity`` add a line.
    """
    id: Optional[UUID] = None
    product_id: Optional[UUID] = None
    quantity: Optional[int] = None


class OrderUpdate(CamelModel):
    """Schema for updating an order; omitted fields are left unchanged"""
    payment_method_id: Optional[UUID] = None
    shipping_address_id: Optional[UUID] = None
    shipping_method_id: Optional[UUID] = None
    customer_notes: Optional[str] = Field(None, max_length=1000)
    items: Optional[List[OrderItemUpdate]] = None


class OrderItemResponse(CamelModel):
    """Schema for order item response"""
    id: UUID
    product_id: UUID
    product_name: Optional[str] = None
    product_sku: Optional[str] = None
    unit_price: Money
    quantity: int
    total_price: Money


class ShippingAddressResponse(CamelModel):
    id: UUID
    address_line: str
    city: str
    region: Optional[str] = None
    country: str
    postal_code: Optional[str] = None
    full_address: str


class OrderShippingMethodResponse(CamelModel):
    id: UUID
    name: str
    price: Money
    estimated_delivery: Optional[str] = None


class OrderResponse(CamelModel):
    """Schema for order response"""
    id: UUID
    user_id: UUID
    customer_name: Optional[str] = None
    order_number: str
    status: str
    payment_status: str
    payment_method_id: Optional[UUID] = None
    shipping_method_id: Optional[UUID] = None
    subtotal: Money
    shipping_cost: Money
    total: Money
    item_count: int
    customer_notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    items: List[OrderItemResponse] = Field(default_factory=list)
    shipping_address: Optional[ShippingAddressResponse] = None
    shipping_method: Optional[OrderShippingMethodResponse] = None

    @classmethod
    def from_order(cls, order, customer_name=None, shipping_address=None, shipping_method=None) -> "OrderResponse":
        return cls(
            id=order.id,
            user_id=order.user_id,
            customer_name=customer_name,
            order_number=order.order_number,
            status=order.status.value,
            payment_status=order.payment_status.value,
            payment_method_id=order.payment_method_id,
            shipping_method_id=order.shipping_method_id,
            subtotal=order.subtotal,
            shipping_cost=order.shipping_cost,
            total=order.total,
            item_count=order.item_count,
            customer_notes=order.notes,
            created_at=order.created_at,
            updated_at=order.updated_at,
            cancelled_at=order.cancelled_at,
            items=[OrderItemResponse.model_validate(item) for item in order.items],
            shipping_address=(
                ShippingAddressResponse.model_validate(shipping_address) if shipping_address else None
            ),
            shipping_method=(
                OrderShippingMethodResponse.model_validate(shipping_method) if shipping_method else None
            ),
        )
