"""
Order business logic: placement, status and payment lifecycle, edits
"""
from collections import defaultdict
from typing import Dict, List, Optional
from uuid import UUID
import logging

from opentelemetry import trace
from sqlalchemy.orm import Session

from storefront.cache import ORDERS_CACHE, PRODUCTS_CACHE, cached, caches
from storefront.config import settings
from storefront.db.database import after_commit, transactional
from storefront.db.sql import new_id, utcnow
from storefront.exceptions import (
    BadRequestError,
    InsufficientStockError,
    InvalidStateTransitionError,
    ResourceNotFoundError,
    StorefrontError,
)
from storefront.models.order import (
    CustomerOrder,
    OrderItem,
    OrderStatus,
    PaymentStatus,
    generate_order_number,
    validate_status_transition,
)
from storefront.repositories.address_repository import AddressRepository
from storefront.repositories.order_item_repository import OrderItemRepository
from storefront.repositories.order_repository import OrderRepository
from storefront.repositories.payment_repository import PaymentMethodRepository, ShippingMethodRepository
from storefront.repositories.product_repository import ProductRepository
from storefront.repositories.user_repository import UserRepository
from storefront.schemas.common import PageResponse
from storefront.schemas.order import OrderCreate, OrderResponse, OrderUpdate

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


def _cache_keys(order: CustomerOrder) -> List[str]:
    return [f"id:{order.id}", f"number:{order.order_number}"]


class OrderService:
    """Order service for business logic"""

    @staticmethod
    def find_order(db: Session, order_id: UUID) -> CustomerOrder:
        order = OrderRepository.find_by_id(db, order_id)
        if order is None:
            raise ResourceNotFoundError.for_resource("Order", order_id)
        return order

    @staticmethod
    def _to_response(db: Session, order: CustomerOrder) -> OrderResponse:
        """Attach items, customer name, shipping address and method"""
        order.items = OrderItemRepository.find_by_order_id(db, order.id)
        user = UserRepository.find_by_id(db, order.user_id)
        address = (
            AddressRepository.find_by_id(db, order.shipping_address_id)
            if order.shipping_address_id else None
        )
        shipping_method = (
            ShippingMethodRepository.find_by_id(db, order.shipping_method_id)
            if order.shipping_method_id else None
        )
        return OrderResponse.from_order(
            order,
            customer_name=user.full_name if user else None,
            shipping_address=address,
            shipping_method=shipping_method,
        )

    @staticmethod
    def _page(db: Session, orders, page: int, size: int, total: int) -> PageResponse[OrderResponse]:
        return PageResponse.of([OrderService._to_response(db, o) for o in orders], page, size, total)

    @staticmethod
    def _publish(db: Session, order: CustomerOrder, stock_changed: bool = False) -> OrderResponse:
        """Build the response and refresh the order cache once committed"""
        response = OrderService._to_response(db, order)
        also_clear = [PRODUCTS_CACHE] if stock_changed else []
        after_commit(
            db, lambda: caches.refresh(ORDERS_CACHE, response, _cache_keys(order), also_clear=also_clear)
        )
        return response

    @staticmethod
    def _check_references(
        db: Session,
        payment_method_id: Optional[UUID],
        shipping_address_id: Optional[UUID],
        shipping_method_id: Optional[UUID],
    ) -> None:
        if payment_method_id and not PaymentMethodRepository.exists_by_id(db, payment_method_id):
            raise ResourceNotFoundError.for_resource("PaymentMethod", payment_method_id)
        if shipping_address_id and AddressRepository.find_by_id(db, shipping_address_id) is None:
            raise ResourceNotFoundError.for_resource("Address", shipping_address_id)
        if shipping_method_id and ShippingMethodRepository.find_by_id(db, shipping_method_id) is None:
            raise ResourceNotFoundError.for_resource("ShippingMethod", shipping_method_id)

    @staticmethod
    def _new_order_number(db: Session) -> str:
        for _ in range(settings.order_number_max_attempts):
            order_number = generate_order_number()
            if not OrderRepository.exists_by_order_number(db, order_number):
                return order_number
            logger.warning(f"Order number {order_number} already taken, retrying")
        raise StorefrontError("Could not generate a unique order number")

    @staticmethod
    def _take_stock(db: Session, product_id: UUID, quantity: int, product_name: str) -> None:
        if not ProductRepository.decrement_stock(db, product_id, quantity):
            current = ProductRepository.find_by_id(db, product_id)
            logger.warning(f"Insufficient stock for product {product_id}, requested {quantity}")
            raise InsufficientStockError(
                product_name, quantity, current.stock_quantity if current else None
            )

    @staticmethod
    @transactional
    def create_order(db: Session, order_data: OrderCreate) -> OrderResponse:
        """
        Create new order with stock validation

        Process:
        1. Validate user and products exist
        2. Check stock availability
        3. Calculate totals (shipping cost is zero)
        4. Create order and items
        5. Reduce stock, failing the whole order if any product ran out
        """
        with tracer.start_as_current_span("order_service.create_order") as span:
            span.set_attribute("user.id", str(order_data.user_id))
            span.set_attribute("items.count", len(order_data.items))

            logger.info(f"Creating order for user {order_data.user_id} with {len(order_data.items)} items")

            if not UserRepository.exists_by_id(db, order_data.user_id):
                raise ResourceNotFoundError.for_resource("User", order_data.user_id)
            OrderService._check_references(
                db, order_data.payment_method_id, order_data.shipping_address_id, order_data.shipping_method_id
            )

            items = []
            for item_data in order_data.items:
                product = ProductRepository.find_by_id(db, item_data.product_id)
                if product is None:
                    raise ResourceNotFoundError.for_resource("Product", item_data.product_id)
                if product.stock_quantity < item_data.quantity:
                    raise InsufficientStockError(product.name, item_data.quantity, product.stock_quantity)
                items.append(OrderItem.from_product(product, item_data.quantity))

            now = utcnow()
            order = CustomerOrder(
                id=new_id(),
                user_id=order_data.user_id,
                order_number=OrderService._new_order_number(db),
                status=OrderStatus.PENDING,
                payment_status=PaymentStatus.PENDING,
                payment_method_id=order_data.payment_method_id,
                shipping_method_id=order_data.shipping_method_id,
                shipping_address_id=order_data.shipping_address_id,
                notes=order_data.customer_notes,
                created_at=now,
                updated_at=now,
                items=items,
            )
            order.calculate_totals()
            span.set_attribute("order.total", float(order.total))

            OrderRepository.save(db, order)
            OrderItemRepository.save_all(db, order.id, items)

            for item in items:
                OrderService._take_stock(db, item.product_id, item.quantity, item.product_name)

            span.set_attribute("order.id", str(order.id))
            logger.info(f"Order {order.id} created with number {order.order_number}")

            return OrderService._publish(db, order, stock_changed=True)

    @staticmethod
    @cached(ORDERS_CACHE, key=lambda db, order_id: f"id:{order_id}")
    @transactional(read_only=True)
    def get_order(db: Session, order_id: UUID) -> OrderResponse:
        """Get order by ID"""
        logger.debug(f"Getting order {order_id}")
        return OrderService._to_response(db, OrderService.find_order(db, order_id))

    @staticmethod
    @cached(ORDERS_CACHE, key=lambda db, order_number: f"number:{order_number}")
    @transactional(read_only=True)
    def get_order_by_number(db: Session, order_number: str) -> OrderResponse:
        """Get order by its ORD- number"""
        order = OrderRepository.find_by_order_number(db, order_number)
        if order is None:
            raise ResourceNotFoundError("Order", "orderNumber", order_number)
        return OrderService._to_response(db, order)

    @staticmethod
    @transactional(read_only=True)
    def get_orders(db: Session, page: int, size: int) -> PageResponse[OrderResponse]:
        orders, total = OrderRepository.find_all(db, page, size)
        return OrderService._page(db, orders, page, size, total)

    @staticmethod
    @transactional(read_only=True)
    def get_orders_by_user(db: Session, user_id: UUID, page: int, size: int) -> PageResponse[OrderResponse]:
        orders, total = OrderRepository.find_by_user(db, user_id, page, size)
        return OrderService._page(db, orders, page, size, total)

    @staticmethod
    @transactional(read_only=True)
    def get_orders_by_status(db: Session, status: str, page: int, size: int) -> PageResponse[OrderResponse]:
        orders, total = OrderRepository.find_by_status(db, OrderStatus.parse(status), page, size)
        return OrderService._page(db, orders, page, size, total)

    @staticmethod
    @transactional
    def update_order_status(db: Session, order_id: UUID, status: str) -> OrderResponse:
        """
        Move an order along its lifecycle

        pending -> confirmed -> processing -> shipped -> delivered, with
        cancellation allowed up to processing. Setting the current status
        again is a no-op. Moving to ``cancelled`` goes through
        ``cancel_order`` so stock is restored.
        """
        with tracer.start_as_current_span("order_service.update_status") as span:
            span.set_attribute("order.id", str(order_id))
            target = OrderStatus.parse(status)
            span.set_attribute("status.new", target.value)

            order = OrderService.find_order(db, order_id)
            validate_status_transition(order.status, target)
            span.set_attribute("status.old", order.status.value)

            if target == order.status:
                return OrderService._to_response(db, order)
            if target == OrderStatus.CANCELLED:
                return OrderService.cancel_order(db, order_id)

            old_status = order.status
            order.status = target
            order.updated_at = utcnow()
            OrderRepository.update(db, order)

            logger.info(f"Order {order_id} status updated: {old_status.value} -> {target.value}")
            return OrderService._publish(db, order)

    @staticmethod
    @transactional
    def update_payment_status(db: Session, order_id: UUID, payment_status: str) -> OrderResponse:
        """
        Record a payment status

        Setting the payment status to ``paid`` while the order is
        ``pending`` also confirms the order.
        """
        with tracer.start_as_current_span("order_service.update_payment_status") as span:
            span.set_attribute("order.id", str(order_id))
            new_payment_status = PaymentStatus.parse(payment_status)
            span.set_attribute("payment_status.new", new_payment_status.value)

            order = OrderService.find_order(db, order_id)
            order.payment_status = new_payment_status
            if new_payment_status == PaymentStatus.PAID and order.status == OrderStatus.PENDING:
                order.status = OrderStatus.CONFIRMED
                logger.info(f"Order {order_id} confirmed by payment")
            order.updated_at = utcnow()
            OrderRepository.update(db, order)

            logger.info(f"Order {order_id} payment status updated to {new_payment_status.value}")
            return OrderService._publish(db, order)

    @staticmethod
    @transactional
    def cancel_order(db: Session, order_id: UUID) -> OrderResponse:
        """Cancel a pending, confirmed or processing order and restore its stock"""
        with tracer.start_as_current_span("order_service.cancel_order") as span:
            span.set_attribute("order.id", str(order_id))

            order = OrderService.find_order(db, order_id)
            if not order.can_be_cancelled():
                logger.warning(f"Cannot cancel order {order_id} with status {order.status.value}")
                raise InvalidStateTransitionError(
                    f"Order cannot be cancelled. Current status: {order.status.value}"
                )

            now = utcnow()
            order.status = OrderStatus.CANCELLED
            order.cancelled_at = now
            order.updated_at = now
            OrderRepository.update(db, order)

            for item in OrderItemRepository.find_by_order_id(db, order_id):
                ProductRepository.increment_stock(db, item.product_id, item.quantity)

            logger.info(f"Order {order_id} cancelled")
            return OrderService._publish(db, order, stock_changed=True)

    @staticmethod
    @transactional
    def update_order(db: Session, order_id: UUID, order_data: OrderUpdate) -> OrderResponse:
        """
        Change an order's references, notes or items

        Item edits follow ``OrderItemUpdate``; lines not mentioned are kept.
        Stock moves by the net change per product. The stored lines are
        replaced as a whole, so line ids change on every item edit. Edits
        that would leave no lines are rejected. When nothing differs the
        order is returned untouched.
        """
        with tracer.start_as_current_span("order_service.update_order") as span:
            span.set_attribute("order.id", str(order_id))
            order = OrderService.find_order(db, order_id)
            OrderService._check_references(
                db, order_data.payment_method_id, order_data.shipping_address_id, order_data.shipping_method_id
            )

            changed = False
            for field in ("payment_method_id", "shipping_address_id", "shipping_method_id"):
                value = getattr(order_data, field)
                if value is not None and value != getattr(order, field):
                    setattr(order, field, value)
                    changed = True
            if order_data.customer_notes is not None and order_data.customer_notes != order.notes:
                order.notes = order_data.customer_notes
                changed = True

            items_changed = False
            if order_data.items:
                items_changed = OrderService._apply_item_edits(db, order, order_data)
                changed = changed or items_changed

            if not changed:
                logger.debug(f"No changes detected for order {order_id}")
                return OrderService._to_response(db, order)

            order.updated_at = utcnow()
            OrderRepository.update(db, order)
            logger.info(f"Order {order_id} updated")
            return OrderService._publish(db, order, stock_changed=items_changed)

    @staticmethod
    def _apply_item_edits(db: Session, order: CustomerOrder, order_data: OrderUpdate) -> bool:
        """Apply item edits to ``order`` and stock; returns whether anything changed"""
        if not order.can_be_cancelled():
            raise InvalidStateTransitionError(
                f"Order items cannot be changed. Current status: {order.status.value}"
            )

        existing = OrderItemRepository.find_by_order_id(db, order.id)
        by_id = {item.id: item for item in existing}
        removed = set()
        added: List[OrderItem] = []
        # Positive delta returns units to stock, negative takes them
        deltas: Dict[UUID, int] = defaultdict(int)
        names: Dict[UUID, str] = {}
        changed = False

        for edit in order_data.items:
            current = by_id.get(edit.id) if edit.id is not None else None
            if current is not None and current.id not in removed:
                names[current.product_id] = current.product_name
                if edit.quantity is None or edit.quantity <= 0:
                    deltas[current.product_id] += current.quantity
                    removed.add(current.id)
                    changed = True
                elif edit.quantity != current.quantity:
                    deltas[current.product_id] -= edit.quantity - current.quantity
                    current.quantity = edit.quantity
                    changed = True
                continue

            if edit.product_id is None or edit.quantity is None or edit.quantity <= 0:
                continue
            product = ProductRepository.find_by_id(db, edit.product_id)
            if product is None:
                raise ResourceNotFoundError.for_resource("Product", edit.product_id)
            if product.stock_quantity < edit.quantity:
                raise InsufficientStockError(product.name, edit.quantity, product.stock_quantity)
            added.append(OrderItem.from_product(product, edit.quantity))
            names[product.id] = product.name
            deltas[product.id] -= edit.quantity
            changed = True

        if not changed:
            return False

        kept = [item for item in existing if item.id not in removed]
        if not kept and not added:
            raise BadRequestError("An order must keep at least one item; cancel it instead")

        for product_id, delta in deltas.items():
            if delta < 0:
                OrderService._take_stock(db, product_id, -delta, names.get(product_id) or str(product_id))
            elif delta > 0:
                ProductRepository.increment_stock(db, product_id, delta)

        order.items = kept + added
        OrderItemRepository.delete_by_order_id(db, order.id)
        OrderItemRepository.save_all(db, order.id, order.items)
        order.calculate_totals()
        return True

    @staticmethod
    @transactional
    def delete_order(db: Session, order_id: UUID) -> None:
        """Remove the order and its items; stock is not restored"""
        with tracer.start_as_current_span("order_service.delete_order") as span:
            span.set_attribute("order.id", str(order_id))
            order = OrderService.find_order(db, order_id)
            OrderItemRepository.delete_by_order_id(db, order_id)
            OrderRepository.delete(db, order_id)
            logger.info(f"Order {order_id} deleted")
            after_commit(db, lambda: caches.evict(ORDERS_CACHE, _cache_keys(order)))

    @staticmethod
    @transactional(read_only=True)
    def count_orders(db: Session) -> int:
        return OrderRepository.count(db)

    @staticmethod
    @transactional(read_only=True)
    def count_orders_by_status(db: Session, status: str) -> int:
        return OrderRepository.count_by_status(db, OrderStatus.parse(status))
