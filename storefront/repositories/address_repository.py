"""Address data access"""
from typing import List, Optional
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.orm import Session

from storefront.db.sql import id_param, to_bool, to_datetime, to_uuid
from storefront.models.user import Address

SELECT_ADDRESS = """
    SELECT id, user_id, address_line, city, region, country, postal_code, is_default,
           address_type, created_at
    FROM addresses
"""


def _to_address(row) -> Address:
    return Address(
        id=to_uuid(row.id),
        user_id=to_uuid(row.user_id),
        address_line=row.address_line,
        city=row.city,
        region=row.region,
        country=row.country,
        postal_code=row.postal_code,
        is_default=to_bool(row.is_default),
        address_type=row.address_type,
        created_at=to_datetime(row.created_at),
    )


def _params(address: Address) -> dict:
    return {
        "id": id_param(address.id),
        "user_id": id_param(address.user_id),
        "address_line": address.address_line,
        "city": address.city,
        "region": address.region,
        "country": address.country,
        "postal_code": address.postal_code,
        "is_default": address.is_default,
        "address_type": address.address_type,
        "created_at": address.created_at,
    }


class AddressRepository:

    @staticmethod
    def save(db: Session, address: Address) -> Address:
        db.execute(
            text("""
                INSERT INTO addresses (id, user_id, address_line, city, region, country, postal_code,
                                       is_default, address_type, created_at)
                VALUES (:id, :user_id, :address_line, :city, :region, :country, :postal_code,
                        :is_default, :address_type, :created_at)
            """),
            _params(address),
        )
        return address

    @staticmethod
    def update(db: Session, address: Address) -> Address:
        db.execute(
            text("""
                UPDATE addresses
                SET address_line = :address_line, city = :city, region = :region, country = :country,
                    postal_code = :postal_code, is_default = :is_default, address_type = :address_type
                WHERE id = :id
            """),
            _params(address),
        )
        return address

    @staticmethod
    def find_by_id(db: Session, address_id: UUID) -> Optional[Address]:
        row = db.execute(text(f"{SELECT_ADDRESS} WHERE id = :id"), {"id": id_param(address_id)}).first()
        return _to_address(row) if row else None

    @staticmethod
    def find_by_user(db: Session, user_id: UUID) -> List[Address]:
        rows = db.execute(
            text(f"{SELECT_ADDRESS} WHERE user_id = :user_id ORDER BY is_default DESC, created_at"),
            {"user_id": id_param(user_id)},
        ).fetchall()
        return [_to_address(row) for row in rows]

    @staticmethod
    def find_by_user_and_type(db: Session, user_id: UUID, address_type: str) -> List[Address]:
        """Addresses of the given type plus those usable for both"""
        rows = db.execute(
            text(f"""
                {SELECT_ADDRESS}
                WHERE user_id = :user_id AND (address_type = :address_type OR address_type IS NULL)
                ORDER BY is_default DESC, created_at
            """),
            {"user_id": id_param(user_id), "address_type": address_type},
        ).fetchall()
        return [_to_address(row) for row in rows]

    @staticmethod
    def find_default(db: Session, user_id: UUID) -> Optional[Address]:
        row = db.execute(
            text(f"{SELECT_ADDRESS} WHERE user_id = :user_id AND is_default = :is_default ORDER BY created_at"),
            {"user_id": id_param(user_id), "is_default": True},
        ).first()
        return _to_address(row) if row else None

    @staticmethod
    def clear_default(db: Session, user_id: UUID, address_type: Optional[str]) -> int:
        """Unset the default flag on the user's addresses of the same type"""
        if address_type is None:
            where = "user_id = :user_id AND address_type IS NULL"
        else:
            where = "user_id = :user_id AND address_type = :address_type"
        return db.execute(
            text(f"UPDATE addresses SET is_default = :is_default WHERE {where}"),
            {"user_id": id_param(user_id), "address_type": address_type, "is_default": False},
        ).rowcount

    @staticmethod
    def delete(db: Session, address_id: UUID) -> int:
        return db.execute(text("DELETE FROM addresses WHERE id = :id"), {"id": id_param(address_id)}).rowcount
