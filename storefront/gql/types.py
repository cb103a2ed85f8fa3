"""GraphQL object and input types, built from the REST response models"""
import dataclasses
from datetime import datetime
from decimal import Decimal
from typing import Callable, Generic, List, Optional, TypeVar
from uuid import UUID

import strawberry

from storefront.schemas.common import PageResponse

T = TypeVar("T")


def _copy(cls, model, **values):
    """Build strawberry type ``cls`` from the same-named attributes of ``model``"""
    for field in dataclasses.fields(cls):
        if field.name not in values:
            values[field.name] = getattr(model, field.name)
    return cls(**values)


@strawberry.type
class Page(Generic[T]):
    content: List[T]
    page_number: int
    page_size: int
    total_elements: int
    total_pages: int
    first: bool
    last: bool
    has_next: bool
    has_previous: bool


def page_of(page: PageResponse, convert: Callable) -> Page:
    return _copy(Page, page, content=[convert(item) for item in page.content])


@strawberry.type
class OrderItem:
    id: UUID
    product_id: UUID
    product_name: Optional[str]
    product_sku: Optional[str]
    unit_price: Decimal
    quantity: int
    total_price: Decimal


@strawberry.type
class ShippingAddress:
    id: UUID
    address_line: str
    city: str
    region: Optional[str]
    country: str
    postal_code: Optional[str]
    full_address: str


@strawberry.type
class OrderShippingMethod:
    id: UUID
    name: str
    price: Decimal
    estimated_delivery: Optional[str]


@strawberry.type
class Order:
    id: UUID
    user_id: UUID
    customer_name: Optional[str]
    order_number: str
    status: str
    payment_status: str
    payment_method_id: Optional[UUID]
    shipping_method_id: Optional[UUID]
    subtotal: Decimal
    shipping_cost: Decimal
    total: Decimal
    item_count: int
    customer_notes: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    cancelled_at: Optional[datetime]
    items: List[OrderItem]
    shipping_address: Optional[ShippingAddress]
    shipping_method: Optional[OrderShippingMethod]

    @classmethod
    def from_response(cls, order) -> "Order":
        return _copy(
            cls,
            order,
            items=[_copy(OrderItem, item) for item in order.items],
            shipping_address=_copy(ShippingAddress, order.shipping_address) if order.shipping_address else None,
            shipping_method=_copy(OrderShippingMethod, order.shipping_method) if order.shipping_method else None,
        )


@strawberry.type
class Product:
    id: UUID
    category_id: Optional[UUID]
    category_name: Optional[str]
    sku: Optional[str]
    name: str
    description: Optional[str]
    price: Decimal
    stock_quantity: int
    is_active: bool
    in_stock: bool
    images: List[str]
    primary_image: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @classmethod
    def from_response(cls, product) -> "Product":
        return _copy(cls, product, images=list(product.images))


@strawberry.type
class Category:
    id: UUID
    category_name: str
    parent_category_id: Optional[UUID]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    subcategories: List["Category"]

    @classmethod
    def from_response(cls, category) -> "Category":
        return _copy(cls, category, subcategories=[cls.from_response(c) for c in category.subcategories])


@strawberry.type
class User:
    id: UUID
    email_address: str
    first_name: str
    last_name: str
    full_name: str
    phone_number: Optional[str]
    role: str
    is_active: bool
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @classmethod
    def from_response(cls, user) -> "User":
        return _copy(cls, user)


@strawberry.type
class Review:
    id: UUID
    product_id: UUID
    user_id: UUID
    user_name: Optional[str]
    order_item_id: Optional[UUID]
    rating: int
    title: Optional[str]
    comment: Optional[str]
    is_verified_purchase: bool
    is_approved: bool
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @classmethod
    def from_response(cls, review) -> "Review":
        return _copy(cls, review)


@strawberry.input
class OrderItemInput:
    product_id: UUID
    quantity: int


@strawberry.input
class CreateOrderInput:
    user_id: UUID
    items: List[OrderItemInput]
    payment_method_id: Optional[UUID] = None
    shipping_address_id: Optional[UUID] = None
    shipping_method_id: Optional[UUID] = None
    customer_notes: Optional[str] = None


@strawberry.input
class OrderItemUpdateInput:
    id: Optional[UUID] = None
    product_id: Optional[UUID] = None
    quantity: Optional[int] = None


@strawberry.input
class UpdateOrderInput:
    payment_method_id: Optional[UUID] = None
    shipping_address_id: Optional[UUID] = None
    shipping_method_id: Optional[UUID] = None
    customer_notes: Optional[str] = None
    items: Optional[List[OrderItemUpdateInput]] = None


@strawberry.input
class CreateProductInput:
    category_id: UUID
    name: str
    price: Decimal
    sku: Optional[str] = None
    description: Optional[str] = None
    stock_quantity: int = 0
    is_active: bool = True
    images: Optional[List[str]] = None


@strawberry.input
class CreateCategoryInput:
    category_name: str
    parent_category_id: Optional[UUID] = None


@strawberry.input
class CreateReviewInput:
    product_id: UUID
    user_id: UUID
    rating: int
    order_item_id: Optional[UUID] = None
    title: Optional[str] = None
    comment: Optional[str] = None
