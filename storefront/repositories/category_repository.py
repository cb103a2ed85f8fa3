"""Category data access"""
from typing import List, Optional
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.orm import Session

from storefront.db.sql import id_param, to_datetime, to_uuid
from storefront.models.product import Category

SELECT_CATEGORY = """
    SELECT id, parent_category_id, category_name, created_at, updated_at FROM categories
"""


def _to_category(row) -> Category:
    return Category(
        id=to_uuid(row.id),
        parent_category_id=to_uuid(row.parent_category_id),
        category_name=row.category_name,
        created_at=to_datetime(row.created_at),
        updated_at=to_datetime(row.updated_at),
    )


class CategoryRepository:

    @staticmethod
    def save(db: Session, category: Category) -> Category:
        db.execute(
            text("""
                INSERT INTO categories (id, parent_category_id, category_name, created_at, updated_at)
                VALUES (:id, :parent_category_id, :category_name, :created_at, :updated_at)
            """),
            {
                "id": id_param(category.id),
                "parent_category_id": id_param(category.parent_category_id),
                "category_name": category.category_name,
                "created_at": category.created_at,
                "updated_at": category.updated_at,
            },
        )
        return category

    @staticmethod
    def update(db: Session, category: Category) -> Category:
        db.execute(
            text("""
                UPDATE categories
                SET parent_category_id = :parent_category_id, category_name = :category_name,
                    updated_at = :updated_at
                WHERE id = :id
            """),
            {
                "id": id_param(category.id),
                "parent_category_id": id_param(category.parent_category_id),
                "category_name": category.category_name,
                "updated_at": category.updated_at,
            },
        )
        return category

    @staticmethod
    def find_by_id(db: Session, category_id: UUID) -> Optional[Category]:
        row = db.execute(text(f"{SELECT_CATEGORY} WHERE id = :id"), {"id": id_param(category_id)}).first()
        return _to_category(row) if row else None

    @staticmethod
    def find_by_name(db: Session, name: str) -> Optional[Category]:
        row = db.execute(
            text(f"{SELECT_CATEGORY} WHERE lower(category_name) = lower(:name)"), {"name": name}
        ).first()
        return _to_category(row) if row else None

    @staticmethod
    def find_all(db: Session) -> List[Category]:
        rows = db.execute(text(f"{SELECT_CATEGORY} ORDER BY category_name")).fetchall()
        return [_to_category(row) for row in rows]

    @staticmethod
    def find_roots(db: Session) -> List[Category]:
        rows = db.execute(
            text(f"{SELECT_CATEGORY} WHERE parent_category_id IS NULL ORDER BY category_name")
        ).fetchall()
        return [_to_category(row) for row in rows]

    @staticmethod
    def find_by_parent(db: Session, parent_id: UUID) -> List[Category]:
        rows = db.execute(
            text(f"{SELECT_CATEGORY} WHERE parent_category_id = :parent_id ORDER BY category_name"),
            {"parent_id": id_param(parent_id)},
        ).fetchall()
        return [_to_category(row) for row in rows]

    @staticmethod
    def count_children(db: Session, category_id: UUID) -> int:
        return db.execute(
            text("SELECT COUNT(*) FROM categories WHERE parent_category_id = :id"),
            {"id": id_param(category_id)},
        ).scalar_one()

    @staticmethod
    def delete(db: Session, category_id: UUID) -> int:
        return db.execute(text("DELETE FROM categories WHERE id = :id"), {"id": id_param(category_id)}).rowcount

    @staticmethod
    def count(db: Session) -> int:
        return db.execute(text("SELECT COUNT(*) FROM categories")).scalar_one()
