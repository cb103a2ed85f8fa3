"""
Order records and the order status state machine
"""
import enum
import random
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, FrozenSet, List, Optional
from uuid import UUID

from storefront.exceptions import BadRequestError, InvalidStateTransitionError


class OrderStatus(str, enum.Enum):
    """Order status enum"""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"
    FAILED = "failed"

    @classmethod
    def parse(cls, value: str) -> "OrderStatus":
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise BadRequestError(f"Invalid order status: '{value}'") from None


class PaymentStatus(str, enum.Enum):
    """Payment status enum"""
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"
    PARTIALLY_REFUNDED = "partially_refunded"

    @classmethod
    def parse(cls, value: str) -> "PaymentStatus":
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise BadRequestError(f"Invalid payment status: '{value}'") from None


# Statuses without an entry accept no transition other than to themselves
ALLOWED_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

CANCELLABLE_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.PROCESSING})


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    if current == target:
        return True
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


def validate_status_transition(current: OrderStatus, target: OrderStatus) -> None:
    if not can_transition(current, target):
        raise InvalidStateTransitionError(
            f"Invalid status transition from '{current.value}' to '{target.value}'"
        )


def generate_order_number(now: Optional[datetime] = None) -> str:
    """ORD-<yyyymmdd>-<6 random digits>"""
    now = now or datetime.now(timezone.utc)
    return f"ORD-{now:%Y%m%d}-{random.randint(0, 999999):06d}"


@dataclass
class OrderItem:
    """A line of an order; product name and SKU are snapshots taken at order time"""
    product_id: UUID
    unit_price: Decimal
    quantity: int
    id: Optional[UUID] = None
    order_id: Optional[UUID] = None
    product_name: Optional[str] = None
    product_sku: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def total_price(self) -> Decimal:
        if self.unit_price is None or self.quantity is None:
            return Decimal("0.00")
        return self.unit_price * self.quantity

    @classmethod
    def from_product(cls, product, quantity: int) -> "OrderItem":
        if quantity < 1:
            raise BadRequestError("Quantity must be at least 1")
        return cls(
            product_id=product.id,
            unit_price=product.price,
            quantity=quantity,
            product_name=product.name,
            product_sku=product.sku,
        )


@dataclass
class CustomerOrder:
    """Order model"""
    user_id: UUID
    order_number: str
    id: Optional[UUID] = None
    status: OrderStatus = OrderStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_method_id: Optional[UUID] = None
    shipping_method_id: Optional[UUID] = None
    shipping_address_id: Optional[UUID] = None
    subtotal: Decimal = Decimal("0.00")
    shipping_cost: Decimal = Decimal("0.00")
    total: Decimal = Decimal("0.00")
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    items: List[OrderItem] = field(default_factory=list)

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def can_be_cancelled(self) -> bool:
        return self.status in CANCELLABLE_STATUSES

    def calculate_totals(self) -> None:
        self.subtotal = sum((item.total_price for item in self.items), Decimal("0.00"))
        self.total = self.subtotal + (self.shipping_cost or Decimal("0.00"))

    def __repr__(self):
        return f"<CustomerOrder(id={self.id}, number={self.order_number}, status={self.status.value}, total={self.total})>"


@dataclass
class PaymentMethod:
    user_id: UUID
    payment_type: str
    id: Optional[UUID] = None
    provider: Optional[str] = None
    account_number: Optional[str] = None
    expiry_date: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def masked_account_number(self) -> Optional[str]:
        if not self.account_number:
            return None
        if len(self.account_number) <= 4:
            return "****"
        return "****" + self.account_number[-4:]


@dataclass
class ShippingMethod:
    name: str
    price: Decimal
    id: Optional[UUID] = None
    description: Optional[str] = None
    estimated_days: Optional[int] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def estimated_delivery(self) -> Optional[str]:
        if self.estimated_days is None:
            return None
        return f"{self.estimated_days} days"
