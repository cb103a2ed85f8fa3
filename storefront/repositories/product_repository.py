"""
Product data access, including the stock counters used by orders and carts
"""
from decimal import Decimal
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.orm import Session

from storefront.db.sql import (
    fetch_page,
    from_string_list,
    id_param,
    to_bool,
    to_datetime,
    to_decimal,
    to_string_list,
    to_uuid,
    utcnow,
)
from storefront.models.product import Product

SELECT_PRODUCT = """
    SELECT p.id, p.category_id, c.category_name, p.name, p.sku, p.description, p.price,
           p.stock_quantity, p.is_active, p.images, p.created_at, p.updated_at
    FROM products p
    LEFT JOIN categories c ON c.id = p.category_id
"""

ORDER_BY = " ORDER BY p.created_at DESC, p.id"


def _to_product(row) -> Product:
    return Product(
        id=to_uuid(row.id),
        category_id=to_uuid(row.category_id),
        category_name=row.category_name,
        name=row.name,
        sku=row.sku,
        description=row.description,
        price=to_decimal(row.price),
        stock_quantity=row.stock_quantity,
        is_active=to_bool(row.is_active),
        images=to_string_list(row.images),
        created_at=to_datetime(row.created_at),
        updated_at=to_datetime(row.updated_at),
    )


def _params(product: Product) -> dict:
    return {
        "id": id_param(product.id),
        "category_id": id_param(product.category_id),
        "name": product.name,
        "sku": product.sku,
        "description": product.description,
        "price": product.price,
        "stock_quantity": product.stock_quantity,
        "is_active": product.is_active,
        "images": from_string_list(product.images),
        "created_at": product.created_at,
        "updated_at": product.updated_at,
    }


class ProductRepository:
    """SQL for the products table"""

    @staticmethod
    def save(db: Session, product: Product) -> Product:
        db.execute(
            text("""
                INSERT INTO products (id, category_id, name, sku, description, price, stock_quantity,
                                      is_active, images, created_at, updated_at)
                VALUES (:id, :category_id, :name, :sku, :description, :price, :stock_quantity,
                        :is_active, :images, :created_at, :updated_at)
            """),
            _params(product),
        )
        return product

    @staticmethod
    def update(db: Session, product: Product) -> Product:
        """Write everything but the stock, which only moves through the stock methods"""
        db.execute(
            text("""
                UPDATE products
                SET category_id = :category_id, name = :name, sku = :sku, description = :description,
                    price = :price, is_active = :is_active, images = :images, updated_at = :updated_at
                WHERE id = :id
            """),
            _params(product),
        )
        return product

    @staticmethod
    def find_by_id(db: Session, product_id: UUID) -> Optional[Product]:
        row = db.execute(text(f"{SELECT_PRODUCT} WHERE p.id = :id"), {"id": id_param(product_id)}).first()
        return _to_product(row) if row else None

    @staticmethod
    def find_by_sku(db: Session, sku: str) -> Optional[Product]:
        row = db.execute(text(f"{SELECT_PRODUCT} WHERE p.sku = :sku"), {"sku": sku}).first()
        return _to_product(row) if row else None

    @staticmethod
    def exists_by_sku(db: Session, sku: str) -> bool:
        return db.execute(text("SELECT 1 FROM products WHERE sku = :sku"), {"sku": sku}).first() is not None

    @staticmethod
    def _page(db: Session, where: str, params: dict, page: int, size: int) -> Tuple[List[Product], int]:
        return fetch_page(
            db,
            f"{SELECT_PRODUCT} {where} {ORDER_BY}",
            f"SELECT COUNT(*) FROM products p {where}",
            params,
            page,
            size,
            _to_product,
        )

    @staticmethod
    def find_all(db: Session, page: int, size: int) -> Tuple[List[Product], int]:
        return ProductRepository._page(db, "", {}, page, size)

    @staticmethod
    def find_active(db: Session, page: int, size: int) -> Tuple[List[Product], int]:
        return ProductRepository._page(db, "WHERE p.is_active = :active", {"active": True}, page, size)

    @staticmethod
    def find_by_category(db: Session, category_id: UUID, page: int, size: int) -> Tuple[List[Product], int]:
        return ProductRepository._page(
            db, "WHERE p.category_id = :category_id", {"category_id": id_param(category_id)}, page, size
        )

    @staticmethod
    def search(db: Session, keyword: str, page: int, size: int) -> Tuple[List[Product], int]:
        where = """
            WHERE lower(p.name) LIKE :pattern
               OR lower(coalesce(p.description, '')) LIKE :pattern
               OR lower(coalesce(p.sku, '')) LIKE :pattern
        """
        return ProductRepository._page(db, where, {"pattern": f"%{keyword.strip().lower()}%"}, page, size)

    @staticmethod
    def find_by_price_range(
        db: Session, min_price: Decimal, max_price: Decimal, page: int, size: int
    ) -> Tuple[List[Product], int]:
        return ProductRepository._page(
            db,
            "WHERE p.price >= :min_price AND p.price <= :max_price",
            {"min_price": min_price, "max_price": max_price},
            page,
            size,
        )

    @staticmethod
    def find_in_stock(db: Session, page: int, size: int) -> Tuple[List[Product], int]:
        return ProductRepository._page(
            db, "WHERE p.stock_quantity > 0 AND p.is_active = :active", {"active": True}, page, size
        )

    @staticmethod
    def set_active(db: Session, product_id: UUID, active: bool) -> int:
        return db.execute(
            text("UPDATE products SET is_active = :active, updated_at = :updated_at WHERE id = :id"),
            {"id": id_param(product_id), "active": active, "updated_at": utcnow()},
        ).rowcount

    @staticmethod
    def decrement_stock(db: Session, product_id: UUID, quantity: int) -> bool:
        """
        Take ``quantity`` units if at least that many are available

        Returns False, changing nothing, when the stock is too low.
        """
        result = db.execute(
            text("""
                UPDATE products
                SET stock_quantity = stock_quantity - :quantity, updated_at = :updated_at
                WHERE id = :id AND stock_quantity >= :quantity
            """),
            {"id": id_param(product_id), "quantity": quantity, "updated_at": utcnow()},
        )
        return result.rowcount == 1

    @staticmethod
    def set_stock(db: Session, product_id: UUID, quantity: int) -> int:
        return db.execute(
            text("UPDATE products SET stock_quantity = :quantity, updated_at = :updated_at WHERE id = :id"),
            {"id": id_param(product_id), "quantity": quantity, "updated_at": utcnow()},
        ).rowcount

    @staticmethod
    def increment_stock(db: Session, product_id: UUID, quantity: int) -> int:
        return db.execute(
            text("""
                UPDATE products
                SET stock_quantity = stock_quantity + :quantity, updated_at = :updated_at
                WHERE id = :id
            """),
            {"id": id_param(product_id), "quantity": quantity, "updated_at": utcnow()},
        ).rowcount

    @staticmethod
    def delete(db: Session, product_id: UUID) -> int:
        return db.execute(text("DELETE FROM products WHERE id = :id"), {"id": id_param(product_id)}).rowcount

    @staticmethod
    def count(db: Session) -> int:
        return db.execute(text("SELECT COUNT(*) FROM products")).scalar_one()

    @staticmethod
    def count_by_category(db: Session, category_id: UUID) -> int:
        return db.execute(
            text("SELECT COUNT(*) FROM products WHERE category_id = :category_id"),
            {"category_id": id_param(category_id)},
        ).scalar_one()
