"""FastAPI routes for shopping carts"""
from uuid import UUID
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import Pagination, pagination
from storefront.db.database import get_db
from storefront.schemas.cart import CartItemAdd, CartItemUpdate, CartResponse
from storefront.schemas.common import ApiResponse, PageResponse
from storefront.services.cart_service import CartService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cart", tags=["cart"])


@router.get("", response_model=ApiResponse[PageResponse[CartResponse]])
def list_carts(paging: Pagination = Depends(pagination), db: Session = Depends(get_db)):
    return ApiResponse.success(CartService.get_carts(db, paging.page, paging.size))


@router.get("/user/{user_id}", response_model=ApiResponse[CartResponse])
def get_cart(user_id: UUID, db: Session = Depends(get_db)):
    """The user's cart; created empty on first access"""
    return ApiResponse.success(CartService.get_cart(db, user_id))


@router.get("/user/{user_id}/count", response_model=ApiResponse[int])
def count_cart_items(user_id: UUID, db: Session = Depends(get_db)):
    """Sum of quantities across the cart"""
    return ApiResponse.success(CartService.count_items(db, user_id))


@router.post("/user/{user_id}/items", response_model=ApiResponse[CartResponse])
def add_item(user_id: UUID, item: CartItemAdd, db: Session = Depends(get_db)):
    """
    Add a product to the cart

    Adding a product already in the cart increases its quantity. The new
    quantity may not exceed the product's stock.
    """
    logger.info(f"Adding product {item.product_id} x{item.quantity} to cart of user {user_id}")
    return ApiResponse.success(
        CartService.add_item(db, user_id, item.product_id, item.quantity), "Item added to cart"
    )


@router.put("/user/{user_id}/items/{item_id}", response_model=ApiResponse[CartResponse])
def update_item(user_id: UUID, item_id: UUID, item: CartItemUpdate, db: Session = Depends(get_db)):
    return ApiResponse.success(
        CartService.update_item_quantity(db, user_id, item_id, item.quantity), "Cart item updated"
    )


@router.delete("/user/{user_id}/items/{item_id}", response_model=ApiResponse[CartResponse])
def remove_item(user_id: UUID, item_id: UUID, db: Session = Depends(get_db)):
    return ApiResponse.success(CartService.remove_item(db, user_id, item_id), "Item removed from cart")


@router.delete("/user/{user_id}", response_model=ApiResponse[CartResponse])
def clear_cart(user_id: UUID, db: Session = Depends(get_db)):
    return ApiResponse.success(CartService.clear_cart(db, user_id), "Cart cleared")
