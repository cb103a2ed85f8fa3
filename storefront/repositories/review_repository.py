"""Product review data access"""
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.orm import Session

from storefront.db.sql import fetch_page, id_param, to_bool, to_datetime, to_uuid
from storefront.models.product import ProductReview

SELECT_REVIEW = """
    SELECT r.id, r.user_id, r.product_id, r.order_item_id, r.rating, r.title, r.comment,
           r.is_verified_purchase, r.is_approved, r.created_at, r.updated_at,
           u.first_name, u.last_name
    FROM product_reviews r
    LEFT JOIN users u ON u.id = r.user_id
"""


def _to_review(row) -> ProductReview:
    user_name = None
    if row.first_name is not None:
        user_name = f"{row.first_name} {row.last_name or ''}".strip()
    return ProductReview(
        id=to_uuid(row.id),
        user_id=to_uuid(row.user_id),
        product_id=to_uuid(row.product_id),
        order_item_id=to_uuid(row.order_item_id),
        rating=row.rating,
        title=row.title,
        comment=row.comment,
        is_verified_purchase=to_bool(row.is_verified_purchase),
        is_approved=to_bool(row.is_approved),
        user_name=user_name,
        created_at=to_datetime(row.created_at),
        updated_at=to_datetime(row.updated_at),
    )


class ReviewRepository:

    @staticmethod
    def save(db: Session, review: ProductReview) -> ProductReview:
        db.execute(
            text("""
                INSERT INTO product_reviews (id, user_id, product_id, order_item_id, rating, title, comment,
                                             is_verified_purchase, is_approved, created_at, updated_at)
                VALUES (:id, :user_id, :product_id, :order_item_id, :rating, :title, :comment,
                        :is_verified_purchase, :is_approved, :created_at, :updated_at)
            """),
            {
                "id": id_param(review.id),
                "user_id": id_param(review.user_id),
                "product_id": id_param(review.product_id),
                "order_item_id": id_param(review.order_item_id),
                "rating": review.rating,
                "title": review.title,
                "comment": review.comment,
                "is_verified_purchase": review.is_verified_purchase,
                "is_approved": review.is_approved,
                "created_at": review.created_at,
                "updated_at": review.updated_at,
            },
        )
        return review

    @staticmethod
    def update(db: Session, review: ProductReview) -> ProductReview:
        db.execute(
            text("""
                UPDATE product_reviews
                SET rating = :rating, title = :title, comment = :comment, updated_at = :updated_at
                WHERE id = :id
            """),
            {
                "id": id_param(review.id),
                "rating": review.rating,
                "title": review.title,
                "comment": review.comment,
                "updated_at": review.updated_at,
            },
        )
        return review

    @staticmethod
    def find_by_id(db: Session, review_id: UUID) -> Optional[ProductReview]:
        row = db.execute(text(f"{SELECT_REVIEW} WHERE r.id = :id"), {"id": id_param(review_id)}).first()
        return _to_review(row) if row else None

    @staticmethod
    def find_by_product(db: Session, product_id: UUID, page: int, size: int) -> Tuple[List[ProductReview], int]:
        return fetch_page(
            db,
            f"{SELECT_REVIEW} WHERE r.product_id = :product_id ORDER BY r.created_at DESC, r.id",
            "SELECT COUNT(*) FROM product_reviews r WHERE r.product_id = :product_id",
            {"product_id": id_param(product_id)},
            page,
            size,
            _to_review,
        )

    @staticmethod
    def find_by_user(db: Session, user_id: UUID, page: int, size: int) -> Tuple[List[ProductReview], int]:
        return fetch_page(
            db,
            f"{SELECT_REVIEW} WHERE r.user_id = :user_id ORDER BY r.created_at DESC, r.id",
            "SELECT COUNT(*) FROM product_reviews r WHERE r.user_id = :user_id",
            {"user_id": id_param(user_id)},
            page,
            size,
            _to_review,
        )

    @staticmethod
    def exists_by_user_and_product(db: Session, user_id: UUID, product_id: UUID) -> bool:
        return db.execute(
            text("SELECT 1 FROM product_reviews WHERE user_id = :user_id AND product_id = :product_id"),
            {"user_id": id_param(user_id), "product_id": id_param(product_id)},
        ).first() is not None

    @staticmethod
    def rating_summary(db: Session, product_id: UUID) -> Tuple[float, int]:
        """Average rating and number of approved reviews for a product"""
        row = db.execute(
            text("""
                SELECT AVG(rating) AS average, COUNT(*) AS total
                FROM product_reviews
                WHERE product_id = :product_id AND is_approved = :approved
            """),
            {"product_id": id_param(product_id), "approved": True},
        ).first()
        average = float(row.average) if row.average is not None else 0.0
        return round(average, 2), row.total

    @staticmethod
    def count_by_product(db: Session, product_id: UUID) -> int:
        return db.execute(
            text("SELECT COUNT(*) FROM product_reviews WHERE product_id = :product_id"),
            {"product_id": id_param(product_id)},
        ).scalar_one()

    @staticmethod
    def delete(db: Session, review_id: UUID) -> int:
        return db.execute(
            text("DELETE FROM product_reviews WHERE id = :id"), {"id": id_param(review_id)}
        ).rowcount
