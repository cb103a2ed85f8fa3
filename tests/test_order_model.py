"""Tests for the order state machine and order arithmetic."""

import re
from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from storefront.exceptions import BadRequestError, InvalidStateTransitionError
from storefront.models.order import (
    CustomerOrder,
    OrderItem,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    can_transition,
    generate_order_number,
    validate_status_transition,
)


class TestTransitions:
    @pytest.mark.parametrize("current,target", [
        (OrderStatus.PENDING, OrderStatus.CONFIRMED),
        (OrderStatus.CONFIRMED, OrderStatus.PROCESSING),
        (OrderStatus.PROCESSING, OrderStatus.SHIPPED),
        (OrderStatus.SHIPPED, OrderStatus.DELIVERED),
        (OrderStatus.PENDING, OrderStatus.CANCELLED),
        (OrderStatus.PROCESSING, OrderStatus.CANCELLED),
    ])
    def test_allowed(self, current, target):
        assert can_transition(current, target)

    @pytest.mark.parametrize("current,target", [
        (OrderStatus.PENDING, OrderStatus.SHIPPED),
        (OrderStatus.PENDING, OrderStatus.DELIVERED),
        (OrderStatus.SHIPPED, OrderStatus.CANCELLED),
        (OrderStatus.DELIVERED, OrderStatus.PENDING),
        (OrderStatus.CANCELLED, OrderStatus.PENDING),
        (OrderStatus.REFUNDED, OrderStatus.PENDING),
    ])
    def test_rejected(self, current, target):
        assert not can_transition(current, target)
        with pytest.raises(InvalidStateTransitionError):
            validate_status_transition(current, target)

    def test_same_status_always_allowed(self):
        for status in OrderStatus:
            assert can_transition(status, status)

    def test_parse_is_case_insensitive(self):
        assert OrderStatus.parse(" Shipped ") is OrderStatus.SHIPPED
        assert PaymentStatus.parse("PAID") is PaymentStatus.PAID

    def test_parse_rejects_unknown(self):
        with pytest.raises(BadRequestError, match="Invalid order status: 'lost'"):
            OrderStatus.parse("lost")


class TestOrderArithmetic:
    def test_calculate_totals(self):
        order = CustomerOrder(user_id=uuid4(), order_number="ORD-20240101-000001", items=[
            OrderItem(product_id=uuid4(), unit_price=Decimal("10.00"), quantity=2),
            OrderItem(product_id=uuid4(), unit_price=Decimal("0.99"), quantity=3),
        ])
        order.calculate_totals()
        assert order.subtotal == Decimal("22.97")
        assert order.total == Decimal("22.97")
        assert order.item_count == 5

    def test_shipping_cost_is_added(self):
        order = CustomerOrder(
            user_id=uuid4(),
            order_number="ORD-20240101-000002",
            shipping_cost=Decimal("4.50"),
            items=[OrderItem(product_id=uuid4(), unit_price=Decimal("5.00"), quantity=1)],
        )
        order.calculate_totals()
        assert order.total == Decimal("9.50")

    @pytest.mark.parametrize("status,expected", [
        (OrderStatus.PENDING, True),
        (OrderStatus.CONFIRMED, True),
        (OrderStatus.PROCESSING, True),
        (OrderStatus.SHIPPED, False),
        (OrderStatus.DELIVERED, False),
        (OrderStatus.CANCELLED, False),
    ])
    def test_can_be_cancelled(self, status, expected):
        order = CustomerOrder(user_id=uuid4(), order_number="ORD-20240101-000003", status=status)
        assert order.can_be_cancelled() is expected


def test_order_number_format():
    number = generate_order_number(datetime(2024, 3, 9, tzinfo=timezone.utc))
    assert re.fullmatch(r"ORD-20240309-\d{6}", number)


def test_masked_account_number():
    assert PaymentMethod(user_id=uuid4(), payment_type="card", account_number="4111111111111111") \
        .masked_account_number == "****1111"
    assert PaymentMethod(user_id=uuid4(), payment_type="card", account_number="123") \
        .masked_account_number == "****"
