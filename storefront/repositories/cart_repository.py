"""Shopping cart and cart item data access"""
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
    utcnow,
)
from storefront.models.cart import CartItem, ShoppingCart
from storefront.models.product import Product

SELECT_CART = "SELECT id, user_id, created_at, updated_at FROM shopping_carts"

SELECT_LINE = """
    SELECT ci.id, ci.cart_id, ci.product_id, ci.quantity, ci.added_at,
           p.name AS product_name, p.price AS product_price, p.images AS product_images,
           p.stock_quantity AS product_stock, p.is_active AS product_active
    FROM cart_items ci
    JOIN products p ON p.id = ci.product_id
"""


def _to_cart(row) -> ShoppingCart:
    return ShoppingCart(
        id=to_uuid(row.id),
        user_id=to_uuid(row.user_id),
        created_at=to_datetime(row.created_at),
        updated_at=to_datetime(row.updated_at),
    )


def _to_item(row) -> CartItem:
    return CartItem(
        id=to_uuid(row.id),
        cart_id=to_uuid(row.cart_id),
        product_id=to_uuid(row.product_id),
        quantity=row.quantity,
        added_at=to_datetime(row.added_at),
    )


def _to_line(row) -> Tuple[CartItem, Product]:
    item = _to_item(row)
    product = Product(
        id=item.product_id,
        name=row.product_name,
        price=to_decimal(row.product_price),
        images=to_string_list(row.product_images),
        stock_quantity=row.product_stock,
        is_active=to_bool(row.product_active),
    )
    return item, product


class CartRepository:

    @staticmethod
    def save(db: Session, cart: ShoppingCart) -> ShoppingCart:
        db.execute(
            text("""
                INSERT INTO shopping_carts (id, user_id, created_at, updated_at)
                VALUES (:id, :user_id, :created_at, :updated_at)
            """),
            {
                "id": id_param(cart.id),
                "user_id": id_param(cart.user_id),
                "created_at": cart.created_at,
                "updated_at": cart.updated_at,
            },
        )
        return cart

    @staticmethod
    def touch(db: Session, cart_id: UUID) -> None:
        db.execute(
            text("UPDATE shopping_carts SET updated_at = :updated_at WHERE id = :id"),
            {"id": id_param(cart_id), "updated_at": utcnow()},
        )

    @staticmethod
    def find_by_user(db: Session, user_id: UUID) -> Optional[ShoppingCart]:
        row = db.execute(text(f"{SELECT_CART} WHERE user_id = :user_id"), {"user_id": id_param(user_id)}).first()
        return _to_cart(row) if row else None

    @staticmethod
    def find_all(db: Session, page: int, size: int) -> Tuple[List[ShoppingCart], int]:
        return fetch_page(
            db,
            f"{SELECT_CART} ORDER BY created_at DESC, id",
            "SELECT COUNT(*) FROM shopping_carts",
            {},
            page,
            size,
            _to_cart,
        )

    @staticmethod
    def find_lines(db: Session, cart_id: UUID) -> List[Tuple[CartItem, Product]]:
        rows = db.execute(
            text(f"{SELECT_LINE} WHERE ci.cart_id = :cart_id ORDER BY ci.added_at, ci.id"),
            {"cart_id": id_param(cart_id)},
        ).fetchall()
        return [_to_line(row) for row in rows]

    @staticmethod
    def find_item(db: Session, item_id: UUID) -> Optional[CartItem]:
        row = db.execute(
            text("SELECT id, cart_id, product_id, quantity, added_at FROM cart_items WHERE id = :id"),
            {"id": id_param(item_id)},
        ).first()
        return _to_item(row) if row else None

    @staticmethod
    def find_item_by_product(db: Session, cart_id: UUID, product_id: UUID) -> Optional[CartItem]:
        row = db.execute(
            text("""
                SELECT id, cart_id, product_id, quantity, added_at FROM cart_items
                WHERE cart_id = :cart_id AND product_id = :product_id
            """),
            {"cart_id": id_param(cart_id), "product_id": id_param(product_id)},
        ).first()
        return _to_item(row) if row else None

    @staticmethod
    def save_item(db: Session, item: CartItem) -> CartItem:
        db.execute(
            text("""
                INSERT INTO cart_items (id, cart_id, product_id, quantity, added_at)
                VALUES (:id, :cart_id, :product_id, :quantity, :added_at)
            """),
            {
                "id": id_param(item.id),
                "cart_id": id_param(item.cart_id),
                "product_id": id_param(item.product_id),
                "quantity": item.quantity,
                "added_at": item.added_at,
            },
        )
        return item

    @staticmethod
    def update_item_quantity(db: Session, item_id: UUID, quantity: int) -> int:
        return db.execute(
            text("UPDATE cart_items SET quantity = :quantity WHERE id = :id"),
            {"id": id_param(item_id), "quantity": quantity},
        ).rowcount

    @staticmethod
    def delete_item(db: Session, item_id: UUID) -> int:
        return db.execute(text("DELETE FROM cart_items WHERE id = :id"), {"id": id_param(item_id)}).rowcount

    @staticmethod
    def delete_items(db: Session, cart_id: UUID) -> int:
        return db.execute(
            text("DELETE FROM cart_items WHERE cart_id = :cart_id"), {"cart_id": id_param(cart_id)}
        ).rowcount

    @staticmethod
    def count_items(db: Session, cart_id: UUID) -> int:
        """Total units across all lines of the cart"""
        return db.execute(
            text("SELECT COALESCE(SUM(quantity), 0) FROM cart_items WHERE cart_id = :cart_id"),
            {"cart_id": id_param(cart_id)},
        ).scalar_one()
