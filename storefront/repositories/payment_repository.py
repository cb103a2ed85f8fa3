"""Payment method and shipping method data access"""
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.orm import Session

from storefront.db.sql import fetch_page, id_param, to_bool, to_datetime, to_decimal, to_uuid
from storefront.models.order import PaymentMethod, ShippingMethod

SELECT_PAYMENT_METHOD = """
    SELECT id, user_id, payment_type, provider, account_number, expiry_date, created_at
    FROM payment_methods
"""

SELECT_SHIPPING_METHOD = """
    SELECT id, name, description, price, estimated_days, is_active, created_at, updated_at
    FROM shipping_methods
"""


def _to_payment_method(row) -> PaymentMethod:
    return PaymentMethod(
        id=to_uuid(row.id),
        user_id=to_uuid(row.user_id),
        payment_type=row.payment_type,
        provider=row.provider,
        account_number=row.account_number,
        expiry_date=to_datetime(row.expiry_date),
        created_at=to_datetime(row.created_at),
    )


def _to_shipping_method(row) -> ShippingMethod:
    return ShippingMethod(
        id=to_uuid(row.id),
        name=row.name,
        description=row.description,
        price=to_decimal(row.price),
        estimated_days=row.estimated_days,
        is_active=to_bool(row.is_active),
        created_at=to_datetime(row.created_at),
        updated_at=to_datetime(row.updated_at),
    )


class PaymentMethodRepository:

    @staticmethod
    def save(db: Session, method: PaymentMethod) -> PaymentMethod:
        db.execute(
            text("""
                INSERT INTO payment_methods (id, user_id, payment_type, provider, account_number,
                                             expiry_date, created_at)
                VALUES (:id, :user_id, :payment_type, :provider, :account_number, :expiry_date, :created_at)
            """),
            {
                "id": id_param(method.id),
                "user_id": id_param(method.user_id),
                "payment_type": method.payment_type,
                "provider": method.provider,
                "account_number": method.account_number,
                "expiry_date": method.expiry_date,
                "created_at": method.created_at,
            },
        )
        return method

    @staticmethod
    def update(db: Session, method: PaymentMethod) -> PaymentMethod:
        db.execute(
            text("""
                UPDATE payment_methods
                SET payment_type = :payment_type, provider = :provider,
                    account_number = :account_number, expiry_date = :expiry_date
                WHERE id = :id
            """),
            {
                "id": id_param(method.id),
                "payment_type": method.payment_type,
                "provider": method.provider,
                "account_number": method.account_number,
                "expiry_date": method.expiry_date,
            },
        )
        return method

    @staticmethod
    def find_by_id(db: Session, method_id: UUID) -> Optional[PaymentMethod]:
        row = db.execute(text(f"{SELECT_PAYMENT_METHOD} WHERE id = :id"), {"id": id_param(method_id)}).first()
        return _to_payment_method(row) if row else None

    @staticmethod
    def exists_by_id(db: Session, method_id: UUID) -> bool:
        return db.execute(
            text("SELECT 1 FROM payment_methods WHERE id = :id"), {"id": id_param(method_id)}
        ).first() is not None

    @staticmethod
    def find_by_user(db: Session, user_id: UUID, page: int, size: int) -> Tuple[List[PaymentMethod], int]:
        return fetch_page(
            db,
            f"{SELECT_PAYMENT_METHOD} WHERE user_id = :user_id ORDER BY created_at DESC, id",
            "SELECT COUNT(*) FROM payment_methods WHERE user_id = :user_id",
            {"user_id": id_param(user_id)},
            page,
            size,
            _to_payment_method,
        )

    @staticmethod
    def delete(db: Session, method_id: UUID) -> int:
        return db.execute(
            text("DELETE FROM payment_methods WHERE id = :id"), {"id": id_param(method_id)}
        ).rowcount


class ShippingMethodRepository:

    @staticmethod
    def save(db: Session, method: ShippingMethod) -> ShippingMethod:
        db.execute(
            text("""
                INSERT INTO shipping_methods (id, name, description, price, estimated_days, is_active,
                                              created_at, updated_at)
                VALUES (:id, :name, :description, :price, :estimated_days, :is_active,
                        :created_at, :updated_at)
            """),
            {
                "id": id_param(method.id),
                "name": method.name,
                "description": method.description,
                "price": method.price,
                "estimated_days": method.estimated_days,
                "is_active": method.is_active,
                "created_at": method.created_at,
                "updated_at": method.updated_at,
            },
        )
        return method

    @staticmethod
    def update(db: Session, method: ShippingMethod) -> ShippingMethod:
        db.execute(
            text("""
                UPDATE shipping_methods
                SET name = :name, description = :description, price = :price,
                    estimated_days = :estimated_days, is_active = :is_active, updated_at = :updated_at
                WHERE id = :id
            """),
            {
                "id": id_param(method.id),
                "name": method.name,
                "description": method.description,
                "price": method.price,
                "estimated_days": method.estimated_days,
                "is_active": method.is_active,
                "updated_at": method.updated_at,
            },
        )
        return method

    @staticmethod
    def find_by_id(db: Session, method_id: UUID) -> Optional[ShippingMethod]:
        row = db.execute(text(f"{SELECT_SHIPPING_METHOD} WHERE id = :id"), {"id": id_param(method_id)}).first()
        return _to_shipping_method(row) if row else None

    @staticmethod
    def find_all(db: Session, page: int, size: int) -> Tuple[List[ShippingMethod], int]:
        return fetch_page(
            db,
            f"{SELECT_SHIPPING_METHOD} ORDER BY price, name",
            "SELECT COUNT(*) FROM shipping_methods",
            {},
            page,
            size,
            _to_shipping_method,
        )

    @staticmethod
    def delete(db: Session, method_id: UUID) -> int:
        return db.execute(
            text("DELETE FROM shipping_methods WHERE id = :id"), {"id": id_param(method_id)}
        ).rowcount
