"""Wishlist business logic"""
from uuid import UUID
import logging

from sqlalchemy.orm import Session

from storefront.db.database import transactional
from storefront.db.sql import new_id, utcnow
from storefront.exceptions import DuplicateResourceError, ResourceNotFoundError
from storefront.models.product import Product, WishlistItem
from storefront.repositories.product_repository import ProductRepository
from storefront.repositories.user_repository import UserRepository
from storefront.repositories.wishlist_repository import WishlistRepository
from storefront.schemas.cart import CartResponse
from storefront.schemas.common import PageResponse
from storefront.schemas.review import WishlistItemResponse
from storefront.services.cart_service import CartService

logger = logging.getLogger(__name__)


def _to_response(item: WishlistItem, product: Product) -> WishlistItemResponse:
    return WishlistItemResponse(
        id=item.id,
        user_id=item.user_id,
        product_id=item.product_id,
        product_name=product.name,
        product_price=product.price,
        primary_image=product.primary_image,
        in_stock=product.in_stock,
        created_at=item.created_at,
    )


class WishlistService:

    @staticmethod
    @transactional
    def add_to_wishlist(db: Session, user_id: UUID, product_id: UUID) -> WishlistItemResponse:
        if not UserRepository.exists_by_id(db, user_id):
            raise ResourceNotFoundError.for_resource("User", user_id)
        if ProductRepository.find_by_id(db, product_id) is None:
            raise ResourceNotFoundError.for_resource("Product", product_id)
        if WishlistRepository.exists(db, user_id, product_id):
            raise DuplicateResourceError("WishlistItem", "productId", product_id)

        item = WishlistRepository.save(
            db, WishlistItem(id=new_id(), user_id=user_id, product_id=product_id, created_at=utcnow())
        )
        logger.info(f"Product {product_id} added to wishlist of user {user_id}")
        return _to_response(*WishlistRepository.find_by_id(db, item.id))

    @staticmethod
    @transactional(read_only=True)
    def get_user_wishlist(db: Session, user_id: UUID, page: int, size: int) -> PageResponse[WishlistItemResponse]:
        entries, total = WishlistRepository.find_by_user(db, user_id, page, size)
        return PageResponse.of([_to_response(item, product) for item, product in entries], page, size, total)

    @staticmethod
    @transactional(read_only=True)
    def is_in_wishlist(db: Session, user_id: UUID, product_id: UUID) -> bool:
        return WishlistRepository.exists(db, user_id, product_id)

    @staticmethod
    @transactional
    def remove_item(db: Session, item_id: UUID) -> None:
        if WishlistRepository.delete(db, item_id) == 0:
            raise ResourceNotFoundError.for_resource("WishlistItem", item_id)
        logger.info(f"Removed wishlist item {item_id}")

    @staticmethod
    @transactional
    def remove_product(db: Session, user_id: UUID, product_id: UUID) -> None:
        if WishlistRepository.delete_by_user_and_product(db, user_id, product_id) == 0:
            raise ResourceNotFoundError("WishlistItem", "productId", product_id)
        logger.info(f"Product {product_id} removed from wishlist of user {user_id}")

    @staticmethod
    @transactional
    def clear_wishlist(db: Session, user_id: UUID) -> int:
        removed = WishlistRepository.delete_by_user(db, user_id)
        logger.info(f"Cleared {removed} wishlist items of user {user_id}")
        return removed

    @staticmethod
    @transactional(read_only=True)
    def count_items(db: Session, user_id: UUID) -> int:
        return WishlistRepository.count_by_user(db, user_id)

    @staticmethod
    @transactional
    def move_to_cart(db: Session, item_id: UUID) -> CartResponse:
        """Put one unit of the wishlisted product in the cart and drop the wishlist entry"""
        entry = WishlistRepository.find_by_id(db, item_id)
        if entry is None:
            raise ResourceNotFoundError.for_resource("WishlistItem", item_id)
        item, _ = entry
        cart = CartService.add_item(db, item.user_id, item.product_id, 1)
        WishlistRepository.delete(db, item_id)
        logger.info(f"Moved wishlist item {item_id} to cart of user {item.user_id}")
        return cart
