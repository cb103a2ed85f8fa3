"""Product review business logic"""
from uuid import UUID
import logging

from opentelemetry import trace
from sqlalchemy.orm import Session

from storefront.cache import REVIEWS_CACHE, cached, caches
from storefront.db.database import after_commit, transactional
from storefront.db.sql import new_id, utcnow
from storefront.exceptions import DuplicateResourceError, ResourceNotFoundError
from storefront.models.product import ProductReview
from storefront.repositories.order_item_repository import OrderItemRepository
from storefront.repositories.product_repository import ProductRepository
from storefront.repositories.review_repository import ReviewRepository
from storefront.repositories.user_repository import UserRepository
from storefront.schemas.common import PageResponse
from storefront.schemas.review import RatingSummary, ReviewCreate, ReviewResponse, ReviewUpdate

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class ReviewService:
    """One review per user and product; purchases mark reviews as verified"""

    @staticmethod
    def find_review(db: Session, review_id: UUID) -> ProductReview:
        review = ReviewRepository.find_by_id(db, review_id)
        if review is None:
            raise ResourceNotFoundError.for_resource("Review", review_id)
        return review

    @staticmethod
    def _publish(db: Session, review_id: UUID) -> ReviewResponse:
        response = ReviewResponse.model_validate(ReviewService.find_review(db, review_id))
        after_commit(db, lambda: caches.refresh(REVIEWS_CACHE, response, [f"id:{review_id}"]))
        return response

    @staticmethod
    @transactional
    def create_review(db: Session, data: ReviewCreate) -> ReviewResponse:
        with tracer.start_as_current_span("review_service.create_review") as span:
            span.set_attribute("product.id", str(data.product_id))
            if ProductRepository.find_by_id(db, data.product_id) is None:
                raise ResourceNotFoundError.for_resource("Product", data.product_id)
            if not UserRepository.exists_by_id(db, data.user_id):
                raise ResourceNotFoundError.for_resource("User", data.user_id)
            if ReviewRepository.exists_by_user_and_product(db, data.user_id, data.product_id):
                logger.warning(f"User {data.user_id} already reviewed product {data.product_id}")
                raise DuplicateResourceError("Review", "productId", data.product_id)

            now = utcnow()
            review = ReviewRepository.save(db, ProductReview(
                id=new_id(),
                user_id=data.user_id,
                product_id=data.product_id,
                order_item_id=data.order_item_id,
                rating=data.rating,
                title=data.title,
                comment=data.comment,
                is_verified_purchase=OrderItemRepository.exists_for_user_and_product(
                    db, data.user_id, data.product_id
                ),
                is_approved=True,
                created_at=now,
                updated_at=now,
            ))

            logger.info(f"Created review {review.id} for product {review.product_id}")
            return ReviewService._publish(db, review.id)

    @staticmethod
    @cached(REVIEWS_CACHE, key=lambda db, review_id: f"id:{review_id}")
    @transactional(read_only=True)
    def get_review(db: Session, review_id: UUID) -> ReviewResponse:
        return ReviewResponse.model_validate(ReviewService.find_review(db, review_id))

    @staticmethod
    @transactional(read_only=True)
    def get_product_reviews(db: Session, product_id: UUID, page: int, size: int) -> PageResponse[ReviewResponse]:
        reviews, total = ReviewRepository.find_by_product(db, product_id, page, size)
        return PageResponse.of([ReviewResponse.model_validate(r) for r in reviews], page, size, total)

    @staticmethod
    @transactional(read_only=True)
    def get_user_reviews(db: Session, user_id: UUID, page: int, size: int) -> PageResponse[ReviewResponse]:
        reviews, total = ReviewRepository.find_by_user(db, user_id, page, size)
        return PageResponse.of([ReviewResponse.model_validate(r) for r in reviews], page, size, total)

    @staticmethod
    @transactional(read_only=True)
    def get_rating_summary(db: Session, product_id: UUID) -> RatingSummary:
        average, count = ReviewRepository.rating_summary(db, product_id)
        return RatingSummary(product_id=product_id, average_rating=average, review_count=count)

    @staticmethod
    @transactional
    def update_review(db: Session, review_id: UUID, data: ReviewUpdate) -> ReviewResponse:
        review = ReviewService.find_review(db, review_id)
        for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(review, field, value)
        review.updated_at = utcnow()
        ReviewRepository.update(db, review)
        logger.info(f"Updated review {review_id}")
        return ReviewService._publish(db, review_id)

    @staticmethod
    @transactional
    def delete_review(db: Session, review_id: UUID) -> None:
        ReviewService.find_review(db, review_id)
        ReviewRepository.delete(db, review_id)
        logger.info(f"Deleted review {review_id}")
        after_commit(db, lambda: caches.evict(REVIEWS_CACHE, [f"id:{review_id}"]))

    @staticmethod
    @transactional(read_only=True)
    def has_reviewed(db: Session, user_id: UUID, product_id: UUID) -> bool:
        return ReviewRepository.exists_by_user_and_product(db, user_id, product_id)

    @staticmethod
    @transactional(read_only=True)
    def count_product_reviews(db: Session, product_id: UUID) -> int:
        return ReviewRepository.count_by_product(db, product_id)
