"""
User data access
"""
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.orm import Session

from storefront.db.sql import fetch_page, id_param, to_bool, to_datetime, to_uuid
from storefront.models.user import User

USER_COLUMNS = """
    id, email_address, first_name, last_name, phone_number, password_hash,
    role, is_active, created_at, updated_at
"""


def _to_user(row) -> User:
    return User(
        id=to_uuid(row.id),
        email_address=row.email_address,
        first_name=row.first_name,
        last_name=row.last_name,
        phone_number=row.phone_number,
        password_hash=row.password_hash,
        role=row.role,
        is_active=to_bool(row.is_active),
        created_at=to_datetime(row.created_at),
        updated_at=to_datetime(row.updated_at),
    )


def _params(user: User) -> dict:
    return {
        "id": id_param(user.id),
        "email_address": user.email_address,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "phone_number": user.phone_number,
        "password_hash": user.password_hash,
        "role": user.role,
        "is_active": user.is_active,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }


class UserRepository:
    """SQL for the users table"""

    @staticmethod
    def save(db: Session, user: User) -> User:
        db.execute(
            text(f"""
                INSERT INTO users ({USER_COLUMNS})
                VALUES (:id, :email_address, :first_name, :last_name, :phone_number, :password_hash,
                        :role, :is_active, :created_at, :updated_at)
            """),
            _params(user),
        )
        return user

    @staticmethod
    def update(db: Session, user: User) -> User:
        db.execute(
            text("""
                UPDATE users
                SET email_address = :email_address, first_name = :first_name, last_name = :last_name,
                    phone_number = :phone_number, password_hash = :password_hash, role = :role,
                    is_active = :is_active, updated_at = :updated_at
                WHERE id = :id
            """),
            _params(user),
        )
        return user

    @staticmethod
    def find_by_id(db: Session, user_id: UUID) -> Optional[User]:
        row = db.execute(
            text(f"SELECT {USER_COLUMNS} FROM users WHERE id = :id"),
            {"id": id_param(user_id)},
        ).first()
        return _to_user(row) if row else None

    @staticmethod
    def find_by_email(db: Session, email: str) -> Optional[User]:
        row = db.execute(
            text(f"SELECT {USER_COLUMNS} FROM users WHERE lower(email_address) = lower(:email)"),
            {"email": email},
        ).first()
        return _to_user(row) if row else None

    @staticmethod
    def exists_by_id(db: Session, user_id: UUID) -> bool:
        return db.execute(
            text("SELECT 1 FROM users WHERE id = :id"), {"id": id_param(user_id)}
        ).first() is not None

    @staticmethod
    def exists_by_email(db: Session, email: str) -> bool:
        return db.execute(
            text("SELECT 1 FROM users WHERE lower(email_address) = lower(:email)"), {"email": email}
        ).first() is not None

    @staticmethod
    def find_all(db: Session, page: int, size: int) -> Tuple[List[User], int]:
        return fetch_page(
            db,
            f"SELECT {USER_COLUMNS} FROM users ORDER BY created_at DESC, id",
            "SELECT COUNT(*) FROM users",
            {},
            page,
            size,
            _to_user,
        )

    @staticmethod
    def search(db: Session, keyword: str, page: int, size: int) -> Tuple[List[User], int]:
        where = """
            WHERE lower(email_address) LIKE :pattern
               OR lower(first_name) LIKE :pattern
               OR lower(last_name) LIKE :pattern
        """
        return fetch_page(
            db,
            f"SELECT {USER_COLUMNS} FROM users {where} ORDER BY created_at DESC, id",
            f"SELECT COUNT(*) FROM users {where}",
            {"pattern": f"%{keyword.strip().lower()}%"},
            page,
            size,
            _to_user,
        )

    @staticmethod
    def set_active(db: Session, user_id: UUID, active: bool, updated_at) -> int:
        result = db.execute(
            text("UPDATE users SET is_active = :active, updated_at = :updated_at WHERE id = :id"),
            {"id": id_param(user_id), "active": active, "updated_at": updated_at},
        )
        return result.rowcount

    @staticmethod
    def delete(db: Session, user_id: UUID) -> int:
        return db.execute(text("DELETE FROM users WHERE id = :id"), {"id": id_param(user_id)}).rowcount

    @staticmethod
    def count(db: Session) -> int:
        return db.execute(text("SELECT COUNT(*) FROM users")).scalar_one()
