"""Order item data access"""
from typing import Iterable, List
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.orm import Session

from storefront.db.sql import id_param, new_id, to_datetime, to_decimal, to_uuid, utcnow
from storefront.models.order import OrderItem


def _to_item(row) -> OrderItem:
    return OrderItem(
        id=to_uuid(row.id),
        order_id=to_uuid(row.order_id),
        product_id=to_uuid(row.product_id),
        product_name=row.product_name,
        product_sku=row.product_sku,
        unit_price=to_decimal(row.unit_price),
        quantity=row.quantity,
        created_at=to_datetime(row.created_at),
    )


class OrderItemRepository:

    @staticmethod
    def save_all(db: Session, order_id: UUID, items: Iterable[OrderItem]) -> List[OrderItem]:
        """Insert ``items`` under ``order_id``, assigning ids and timestamps"""
        saved = []
        for item in items:
            item.id = new_id()
            item.order_id = order_id
            item.created_at = item.created_at or utcnow()
            db.execute(
                text("""
                    INSERT INTO order_items (id, order_id, product_id, product_name, product_sku,
                                             unit_price, quantity, created_at)
                    VALUES (:id, :order_id, :product_id, :product_name, :product_sku,
                            :unit_price, :quantity, :created_at)
                """),
                {
                    "id": id_param(item.id),
                    "order_id": id_param(order_id),
                    "product_id": id_param(item.product_id),
                    "product_name": item.product_name,
                    "product_sku": item.product_sku,
                    "unit_price": item.unit_price,
                    "quantity": item.quantity,
                    "created_at": item.created_at,
                },
            )
            saved.append(item)
        return saved

    @staticmethod
    def find_by_order_id(db: Session, order_id: UUID) -> List[OrderItem]:
        rows = db.execute(
            text("""
                SELECT id, order_id, product_id, product_name, product_sku, unit_price, quantity, created_at
                FROM order_items WHERE order_id = :order_id ORDER BY created_at, id
            """),
            {"order_id": id_param(order_id)},
        ).fetchall()
        return [_to_item(row) for row in rows]

    @staticmethod
    def delete_by_order_id(db: Session, order_id: UUID) -> int:
        return db.execute(
            text("DELETE FROM order_items WHERE order_id = :order_id"), {"order_id": id_param(order_id)}
        ).rowcount

    @staticmethod
    def exists_for_user_and_product(db: Session, user_id: UUID, product_id: UUID) -> bool:
        """True when the user has a non-cancelled order containing the product"""
        return db.execute(
            text("""
                SELECT 1 FROM order_items oi
                JOIN customer_orders o ON o.id = oi.order_id
                WHERE o.user_id = :user_id AND oi.product_id = :product_id AND o.status <> 'cancelled'
            """),
            {"user_id": id_param(user_id), "product_id": id_param(product_id)},
        ).first() is not None
