"""FastAPI routes for product reviews"""
from uuid import UUID
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from storefront.api.deps import Pagination, pagination
from storefront.db.database import get_db
from storefront.schemas.common import ApiResponse, PageResponse
from storefront.schemas.review import RatingSummary, ReviewCreate, ReviewResponse, ReviewUpdate
from storefront.services.review_service import ReviewService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reviews", tags=["reviews"])


@router.post("", response_model=ApiResponse[ReviewResponse], status_code=status.HTTP_201_CREATED)
def create_review(review: ReviewCreate, db: Session = Depends(get_db)):
    """
    Review a product

    A user may review a product once. The review is marked as a verified
    purchase when the user has a non-cancelled order containing the product.

    - **rating**: 1 to 5
    """
    logger.info(f"User {review.user_id} reviewing product {review.product_id}")
    return ApiResponse.created(ReviewService.create_review(db, review), "Review created successfully")


@router.get("/product/{product_id}", response_model=ApiResponse[PageResponse[ReviewResponse]])
def list_product_reviews(product_id: UUID, paging: Pagination = Depends(pagination), db: Session = Depends(get_db)):
    return ApiResponse.success(ReviewService.get_product_reviews(db, product_id, paging.page, paging.size))


@router.get("/product/{product_id}/average", response_model=ApiResponse[RatingSummary])
def product_rating(product_id: UUID, db: Session = Depends(get_db)):
    """Average rating and review count of a product"""
    return ApiResponse.success(ReviewService.get_rating_summary(db, product_id))


@router.get("/product/{product_id}/count", response_model=ApiResponse[int])
def count_product_reviews(product_id: UUID, db: Session = Depends(get_db)):
    return ApiResponse.success(ReviewService.count_product_reviews(db, product_id))


@router.get("/user/{user_id}", response_model=ApiResponse[PageResponse[ReviewResponse]])
def list_user_reviews(user_id: UUID, paging: Pagination = Depends(pagination), db: Session = Depends(get_db)):
    return ApiResponse.success(ReviewService.get_user_reviews(db, user_id, paging.page, paging.size))


@router.get("/user/{user_id}/product/{product_id}/exists", response_model=ApiResponse[bool])
def has_reviewed(user_id: UUID, product_id: UUID, db: Session = Depends(get_db)):
    """Whether the user has already reviewed the product"""
    return ApiResponse.success(ReviewService.has_reviewed(db, user_id, product_id))


@router.get("/{review_id}", response_model=ApiResponse[ReviewResponse])
def get_review(review_id: UUID, db: Session = Depends(get_db)):
    return ApiResponse.success(ReviewService.get_review(db, review_id))


@router.put("/{review_id}", response_model=ApiResponse[ReviewResponse])
def update_review(review_id: UUID, review: ReviewUpdate, db: Session = Depends(get_db)):
    return ApiResponse.success(ReviewService.update_review(db, review_id, review), "Review updated successfully")


@router.delete("/{review_id}", response_model=ApiResponse[None])
def delete_review(review_id: UUID, db: Session = Depends(get_db)):
    ReviewService.delete_review(db, review_id)
    return ApiResponse.success(message="Review deleted successfully")
