"""
Order data access
"""
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.orm import Session

from storefront.db.sql import fetch_page, id_param, to_datetime, to_decimal, to_uuid
from storefront.models.order import CustomerOrder, OrderStatus, PaymentStatus

ORDER_COLUMNS = """
    id, user_id, order_number, status, payment_status, payment_method_id, shipping_method_id,
    shipping_address_id, subtotal, shipping_cost, total, notes, created_at, updated_at, cancelled_at
"""

ORDER_BY = " ORDER BY created_at DESC, id"


def _to_order(row) -> CustomerOrder:
    return CustomerOrder(
        id=to_uuid(row.id),
        user_id=to_uuid(row.user_id),
        order_number=row.order_number,
        status=OrderStatus(row.status),
        payment_status=PaymentStatus(row.payment_status),
        payment_method_id=to_uuid(row.payment_method_id),
        shipping_method_id=to_uuid(row.shipping_method_id),
        shipping_address_id=to_uuid(row.shipping_address_id),
        subtotal=to_decimal(row.subtotal),
        shipping_cost=to_decimal(row.shipping_cost),
        total=to_decimal(row.total),
        notes=row.notes,
        created_at=to_datetime(row.created_at),
        updated_at=to_datetime(row.updated_at),
        cancelled_at=to_datetime(row.cancelled_at),
    )


def _params(order: CustomerOrder) -> dict:
    return {
        "id": id_param(order.id),
        "user_id": id_param(order.user_id),
        "order_number": order.order_number,
        "status": order.status.value,
        "payment_status": order.payment_status.value,
        "payment_method_id": id_param(order.payment_method_id),
        "shipping_method_id": id_param(order.shipping_method_id),
        "shipping_address_id": id_param(order.shipping_address_id),
        "subtotal": order.subtotal,
        "shipping_cost": order.shipping_cost,
        "total": order.total,
        "notes": order.notes,
        "created_at": order.created_at,
        "updated_at": order.updated_at,
        "cancelled_at": order.cancelled_at,
    }


class OrderRepository:
    """SQL for the customer_orders table; items live in OrderItemRepository"""

    @staticmethod
    def save(db: Session, order: CustomerOrder) -> CustomerOrder:
        db.execute(
            text(f"""
                INSERT INTO customer_orders ({ORDER_COLUMNS})
                VALUES (:id, :user_id, :order_number, :status, :payment_status, :payment_method_id,
                        :shipping_method_id, :shipping_address_id, :subtotal, :shipping_cost, :total,
                        :notes, :created_at, :updated_at, :cancelled_at)
            """),
            _params(order),
        )
        return order

    @staticmethod
    def update(db: Session, order: CustomerOrder) -> CustomerOrder:
        db.execute(
            text("""
                UPDATE customer_orders
                SET status = :status, payment_status = :payment_status,
                    payment_method_id = :payment_method_id, shipping_method_id = :shipping_method_id,
                    shipping_address_id = :shipping_address_id, subtotal = :subtotal,
                    shipping_cost = :shipping_cost, total = :total, notes = :notes,
                    updated_at = :updated_at, cancelled_at = :cancelled_at
                WHERE id = :id
            """),
            _params(order),
        )
        return order

    @staticmethod
    def find_by_id(db: Session, order_id: UUID) -> Optional[CustomerOrder]:
        row = db.execute(
            text(f"SELECT {ORDER_COLUMNS} FROM customer_orders WHERE id = :id"), {"id": id_param(order_id)}
        ).first()
        return _to_order(row) if row else None

    @staticmethod
    def find_by_order_number(db: Session, order_number: str) -> Optional[CustomerOrder]:
        row = db.execute(
            text(f"SELECT {ORDER_COLUMNS} FROM customer_orders WHERE order_number = :order_number"),
            {"order_number": order_number},
        ).first()
        return _to_order(row) if row else None

    @staticmethod
    def exists_by_order_number(db: Session, order_number: str) -> bool:
        return db.execute(
            text("SELECT 1 FROM customer_orders WHERE order_number = :order_number"),
            {"order_number": order_number},
        ).first() is not None

    @staticmethod
    def _page(db: Session, where: str, params: dict, page: int, size: int) -> Tuple[List[CustomerOrder], int]:
        return fetch_page(
            db,
            f"SELECT {ORDER_COLUMNS} FROM customer_orders {where} {ORDER_BY}",
            f"SELECT COUNT(*) FROM customer_orders {where}",
            params,
            page,
            size,
            _to_order,
        )

    @staticmethod
    def find_all(db: Session, page: int, size: int) -> Tuple[List[CustomerOrder], int]:
        return OrderRepository._page(db, "", {}, page, size)

    @staticmethod
    def find_by_user(db: Session, user_id: UUID, page: int, size: int) -> Tuple[List[CustomerOrder], int]:
        return OrderRepository._page(db, "WHERE user_id = :user_id", {"user_id": id_param(user_id)}, page, size)

    @staticmethod
    def find_by_status(
        db: Session, status: OrderStatus, page: int, size: int
    ) -> Tuple[List[CustomerOrder], int]:
        return OrderRepository._page(db, "WHERE status = :status", {"status": status.value}, page, size)

    @staticmethod
    def delete(db: Session, order_id: UUID) -> int:
        return db.execute(
            text("DELETE FROM customer_orders WHERE id = :id"), {"id": id_param(order_id)}
        ).rowcount

    @staticmethod
    def count(db: Session) -> int:
        return db.execute(text("SELECT COUNT(*) FROM customer_orders")).scalar_one()

    @staticmethod
    def count_by_status(db: Session, status: OrderStatus) -> int:
        return db.execute(
            text("SELECT COUNT(*) FROM customer_orders WHERE status = :status"), {"status": status.value}
        ).scalar_one()
