"""FastAPI routes for wishlists"""
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from storefront.api.deps import Pagination, pagination
from storefront.db.database import get_db
from storefront.schemas.cart import CartResponse
from storefront.schemas.common import ApiResponse, PageResponse
from storefront.schemas.review import WishlistAdd, WishlistItemResponse
from storefront.services.wishlist_service import WishlistService

router = APIRouter(prefix="/api/wishlist", tags=["wishlist"])


@router.post("", response_model=ApiResponse[WishlistItemResponse], status_code=status.HTTP_201_CREATED)
def add_to_wishlist(item: WishlistAdd, db: Session = Depends(get_db)):
    """Add a product to a user's wishlist"""
    return ApiResponse.created(
        WishlistService.add_to_wishlist(db, item.user_id, item.product_id), "Product added to wishlist"
    )


@router.get("/user/{user_id}", response_model=ApiResponse[PageResponse[WishlistItemResponse]])
def get_wishlist(user_id: UUID, paging: Pagination = Depends(pagination), db: Session = Depends(get_db)):
    return ApiResponse.success(WishlistService.get_user_wishlist(db, user_id, paging.page, paging.size))


@router.get("/user/{user_id}/count", response_model=ApiResponse[int])
def count_wishlist_items(user_id: UUID, db: Session = Depends(get_db)):
    return ApiResponse.success(WishlistService.count_items(db, user_id))


@router.get("/user/{user_id}/product/{product_id}", response_model=ApiResponse[bool])
def is_in_wishlist(user_id: UUID, product_id: UUID, db: Session = Depends(get_db)):
    return ApiResponse.success(WishlistService.is_in_wishlist(db, user_id, product_id))


@router.delete("/user/{user_id}/product/{product_id}", response_model=ApiResponse[None])
def remove_product(user_id: UUID, product_id: UUID, db: Session = Depends(get_db)):
    WishlistService.remove_product(db, user_id, product_id)
    return ApiResponse.success(message="Product removed from wishlist")


@router.delete("/user/{user_id}", response_model=ApiResponse[int])
def clear_wishlist(user_id: UUID, db: Session = Depends(get_db)):
    """Remove every entry; returns how many were removed"""
    return ApiResponse.success(WishlistService.clear_wishlist(db, user_id), "Wishlist cleared")


@router.post("/{item_id}/move-to-cart", response_model=ApiResponse[CartResponse])
def move_to_cart(item_id: UUID, db: Session = Depends(get_db)):
    """Add one unit of the product to the user's cart and drop the wishlist entry"""
    return ApiResponse.success(WishlistService.move_to_cart(db, item_id), "Item moved to cart")


@router.delete("/{item_id}", response_model=ApiResponse[None])
def remove_item(item_id: UUID, db: Session = Depends(get_db)):
    WishlistService.remove_item(db, item_id)
    return ApiResponse.success(message="Item removed from wishlist")
