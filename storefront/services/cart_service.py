"""Shopping cart business logic"""
from decimal import Decimal
from uuid import UUID
import logging

from opentelemetry import trace
from sqlalchemy.orm import Session

from storefront.db.database import transactional
from storefront.db.sql import new_id, utcnow
from storefront.exceptions import BadRequestError, InsufficientStockError, ResourceNotFoundError
from storefront.models.cart import CartItem, ShoppingCart
from storefront.repositories.cart_repository import CartRepository
from storefront.repositories.product_repository import ProductRepository
from storefront.repositories.user_repository import UserRepository
from storefront.schemas.cart import CartItemResponse, CartResponse
from storefront.schemas.common import PageResponse

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


def _to_response(db: Session, cart: ShoppingCart) -> CartResponse:
    items = []
    for item, product in CartRepository.find_lines(db, cart.id):
        items.append(CartItemResponse(
            id=item.id,
            product_id=item.product_id,
            product_name=product.name,
            product_image=product.primary_image,
            unit_price=product.price,
            quantity=item.quantity,
            subtotal=product.price * item.quantity,
            in_stock=product.is_active and product.stock_quantity >= item.quantity,
            available_stock=product.stock_quantity,
            added_at=item.added_at,
        ))
    return CartResponse(
        id=cart.id,
        user_id=cart.user_id,
        total_items=sum(line.quantity for line in items),
        total_value=sum((line.subtotal for line in items), Decimal("0.00")),
        created_at=cart.created_at,
        items=items,
    )


class CartService:
    """One cart per user, created on first use"""

    @staticmethod
    def _get_or_create(db: Session, user_id: UUID) -> ShoppingCart:
        cart = CartRepository.find_by_user(db, user_id)
        if cart is not None:
            return cart
        if not UserRepository.exists_by_id(db, user_id):
            raise ResourceNotFoundError.for_resource("User", user_id)
        now = utcnow()
        cart = CartRepository.save(db, ShoppingCart(id=new_id(), user_id=user_id, created_at=now, updated_at=now))
        logger.info(f"Created cart {cart.id} for user {user_id}")
        return cart

    @staticmethod
    def _owned_item(db: Session, cart: ShoppingCart, item_id: UUID) -> CartItem:
        item = CartRepository.find_item(db, item_id)
        if item is None or item.cart_id != cart.id:
            raise ResourceNotFoundError.for_resource("CartItem", item_id)
        return item

    @staticmethod
    @transactional
    def get_cart(db: Session, user_id: UUID) -> CartResponse:
        """Get the user's cart, creating an empty one if needed"""
        return _to_response(db, CartService._get_or_create(db, user_id))

    @staticmethod
    @transactional
    def add_item(db: Session, user_id: UUID, product_id: UUID, quantity: int) -> CartResponse:
        """Add a product; a product already in the cart has its quantity increased"""
        with tracer.start_as_current_span("cart_service.add_item") as span:
            span.set_attribute("user.id", str(user_id))
            span.set_attribute("product.id", str(product_id))
            if quantity < 1:
                raise BadRequestError("Quantity must be at least 1")

            cart = CartService._get_or_create(db, user_id)
            product = ProductRepository.find_by_id(db, product_id)
            if product is None:
                raise ResourceNotFoundError.for_resource("Product", product_id)
            if not product.is_active:
                raise BadRequestError(f"Product is not available: {product.name}")

            existing = CartRepository.find_item_by_product(db, cart.id, product_id)
            new_quantity = quantity + (existing.quantity if existing else 0)
            if new_quantity > product.stock_quantity:
                raise InsufficientStockError(product.name, new_quantity, product.stock_quantity)

            if existing:
                CartRepository.update_item_quantity(db, existing.id, new_quantity)
            else:
                CartRepository.save_item(db, CartItem(
                    id=new_id(), cart_id=cart.id, product_id=product_id, quantity=quantity, added_at=utcnow()
                ))
            CartRepository.touch(db, cart.id)

            logger.info(f"Added {quantity} x product {product_id} to cart {cart.id}")
            return _to_response(db, cart)

    @staticmethod
    @transactional
    def update_item_quantity(db: Session, user_id: UUID, item_id: UUID, quantity: int) -> CartResponse:
        if quantity < 1:
            raise BadRequestError("Quantity must be at least 1")
        cart = CartService._get_or_create(db, user_id)
        item = CartService._owned_item(db, cart, item_id)

        product = ProductRepository.find_by_id(db, item.product_id)
        if product is None:
            raise ResourceNotFoundError.for_resource("Product", item.product_id)
        if quantity > product.stock_quantity:
            raise InsufficientStockError(product.name, quantity, product.stock_quantity)

        CartRepository.update_item_quantity(db, item_id, quantity)
        CartRepository.touch(db, cart.id)
        logger.info(f"Cart item {item_id} quantity set to {quantity}")
        return _to_response(db, cart)

    @staticmethod
    @transactional
    def remove_item(db: Session, user_id: UUID, item_id: UUID) -> CartResponse:
        cart = CartService._get_or_create(db, user_id)
        CartService._owned_item(db, cart, item_id)
        CartRepository.delete_item(db, item_id)
        CartRepository.touch(db, cart.id)
        logger.info(f"Removed cart item {item_id}")
        return _to_response(db, cart)

    @staticmethod
    @transactional
    def clear_cart(db: Session, user_id: UUID) -> CartResponse:
        cart = CartService._get_or_create(db, user_id)
        removed = CartRepository.delete_items(db, cart.id)
        CartRepository.touch(db, cart.id)
        logger.info(f"Cleared {removed} items from cart {cart.id}")
        return _to_response(db, cart)

    @staticmethod
    @transactional(read_only=True)
    def count_items(db: Session, user_id: UUID) -> int:
        """Units in the user's cart; zero when the user has none"""
        cart = CartRepository.find_by_user(db, user_id)
        return CartRepository.count_items(db, cart.id) if cart else 0

    @staticmethod
    @transactional(read_only=True)
    def get_carts(db: Session, page: int, size: int) -> PageResponse[CartResponse]:
        carts, total = CartRepository.find_all(db, page, size)
        return PageResponse.of([_to_response(db, cart) for cart in carts], page, size, total)
