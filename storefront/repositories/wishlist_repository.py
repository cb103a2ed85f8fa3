"""Wishlist data access"""
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.orm import Session

from storefront.db.sql import (
    fetch_page,
    id_param,
    to_bool,
    to_datetime,
    to_decimal,
    to_string_list,
    to_uuid,
)
from storefront.models.product import Product, WishlistItem

SELECT_ENTRY = """
    SELECT w.id, w.user_id, w.product_id, w.created_at,
           p.name AS product_name, p.price AS product_price, p.images AS product_images,
           p.stock_quantity AS product_stock, p.is_active AS product_active
    FROM wishlist_items w
    JOIN products p ON p.id = w.product_id
"""


def _to_entry(row) -> Tuple[WishlistItem, Product]:
    item = WishlistItem(
        id=to_uuid(row.id),
        user_id=to_uuid(row.user_id),
        product_id=to_uuid(row.product_id),
        created_at=to_datetime(row.created_at),
    )
    product = Product(
        id=item.product_id,
        name=row.product_name,
        price=to_decimal(row.product_price),
        images=to_string_list(row.product_images),
        stock_quantity=row.product_stock,
        is_active=to_bool(row.product_active),
    )
    return item, product


class WishlistRepository:
    """Wishlist rows are always read together with the product they point at"""

    @staticmethod
    def save(db: Session, item: WishlistItem) -> WishlistItem:
        db.execute(
            text("""
                INSERT INTO wishlist_items (id, user_id, product_id, created_at)
                VALUES (:id, :user_id, :product_id, :created_at)
            """),
            {
                "id": id_param(item.id),
                "user_id": id_param(item.user_id),
                "product_id": id_param(item.product_id),
                "created_at": item.created_at,
            },
        )
        return item

    @staticmethod
    def find_by_id(db: Session, item_id: UUID) -> Optional[Tuple[WishlistItem, Product]]:
        row = db.execute(text(f"{SELECT_ENTRY} WHERE w.id = :id"), {"id": id_param(item_id)}).first()
        return _to_entry(row) if row else None

    @staticmethod
    def find_by_user(db: Session, user_id: UUID, page: int, size: int) -> Tuple[List[Tuple[WishlistItem, Product]], int]:
        return fetch_page(
            db,
            f"{SELECT_ENTRY} WHERE w.user_id = :user_id ORDER BY w.created_at DESC, w.id",
            "SELECT COUNT(*) FROM wishlist_items WHERE user_id = :user_id",
            {"user_id": id_param(user_id)},
            page,
            size,
            _to_entry,
        )

    @staticmethod
    def exists(db: Session, user_id: UUID, product_id: UUID) -> bool:
        return db.execute(
            text("SELECT 1 FROM wishlist_items WHERE user_id = :user_id AND product_id = :product_id"),
            {"user_id": id_param(user_id), "product_id": id_param(product_id)},
        ).first() is not None

    @staticmethod
    def delete(db: Session, item_id: UUID) -> int:
        return db.execute(text("DELETE FROM wishlist_items WHERE id = :id"), {"id": id_param(item_id)}).rowcount

    @staticmethod
    def delete_by_user_and_product(db: Session, user_id: UUID, product_id: UUID) -> int:
        return db.execute(
            text("DELETE FROM wishlist_items WHERE user_id = :user_id AND product_id = :product_id"),
            {"user_id": id_param(user_id), "product_id": id_param(product_id)},
        ).rowcount

    @staticmethod
    def delete_by_user(db: Session, user_id: UUID) -> int:
        return db.execute(
            text("DELETE FROM wishlist_items WHERE user_id = :user_id"), {"user_id": id_param(user_id)}
        ).rowcount

    @staticmethod
    def count_by_user(db: Session, user_id: UUID) -> int:
        return db.execute(
            text("SELECT COUNT(*) FROM wishlist_items WHERE user_id = :user_id"), {"user_id": id_param(user_id)}
        ).scalar_one()
