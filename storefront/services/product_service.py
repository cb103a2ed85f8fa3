"""
Product business logic
"""
from decimal import Decimal
from typing import List
from uuid import UUID
import logging

from opentelemetry import trace
from sqlalchemy.orm import Session

from storefront.cache import PRODUCTS_CACHE, cached, caches
from storefront.db.database import after_commit, transactional
from storefront.db.sql import new_id, to_decimal, utcnow
from storefront.exceptions import BadRequestError, DuplicateResourceError, ResourceNotFoundError
from storefront.models.product import Product
from storefront.repositories.category_repository import CategoryRepository
from storefront.repositories.product_repository import ProductRepository
from storefront.schemas.catalog import ProductCreate, ProductResponse, ProductUpdate
from storefront.schemas.common import PageResponse

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


def _cache_keys(product: Product) -> List[str]:
    keys = [f"id:{product.id}"]
    if product.sku:
        keys.append(f"sku:{product.sku}")
    return keys


def _page(products, page: int, size: int, total: int) -> PageResponse[ProductResponse]:
    return PageResponse.of([ProductResponse.model_validate(p) for p in products], page, size, total)


class ProductService:
    """Product service for business logic"""

    @staticmethod
    def find_product(db: Session, product_id: UUID) -> Product:
        product = ProductRepository.find_by_id(db, product_id)
        if product is None:
            raise ResourceNotFoundError.for_resource("Product", product_id)
        return product

    @staticmethod
    def _refresh_cache(db: Session, product_id: UUID, stale_keys=()) -> ProductResponse:
        # Re-read so category name and counters match the stored row
        product = ProductService.find_product(db, product_id)
        response = ProductResponse.model_validate(product)
        after_commit(
            db,
            lambda: caches.refresh(PRODUCTS_CACHE, response, _cache_keys(product), stale_keys=stale_keys),
        )
        return response

    @staticmethod
    @transactional
    def create_product(db: Session, product_data: ProductCreate) -> ProductResponse:
        """Create new product"""
        with tracer.start_as_current_span("product_service.create_product") as span:
            if CategoryRepository.find_by_id(db, product_data.category_id) is None:
                raise ResourceNotFoundError.for_resource("Category", product_data.category_id)
            sku = product_data.sku.strip() if product_data.sku else None
            if sku and ProductRepository.exists_by_sku(db, sku):
                logger.warning(f"SKU {sku} already exists")
                raise DuplicateResourceError("Product", "sku", sku)

            now = utcnow()
            product = Product(
                id=new_id(),
                category_id=product_data.category_id,
                name=product_data.name,
                sku=sku,
                description=product_data.description,
                price=to_decimal(product_data.price),
                stock_quantity=product_data.stock_quantity,
                is_active=product_data.is_active,
                images=list(product_data.images),
                created_at=now,
                updated_at=now,
            )
            ProductRepository.save(db, product)

            span.set_attribute("product.id", str(product.id))
            span.set_attribute("product.sku", sku or "")
            logger.info(f"Created product {product.id}: {product.name}")

            return ProductService._refresh_cache(db, product.id)

    @staticmethod
    @transactional
    def update_product(db: Session, product_id: UUID, product_data: ProductUpdate) -> ProductResponse:
        """
        Update product

        Only fields present in the request change. A new SKU must be unused;
        the old ``sku:`` cache key stops resolving immediately. Stock is only
        written when the request sets ``stockQuantity``.
        """
        with tracer.start_as_current_span("product_service.update_product") as span:
            span.set_attribute("product.id", str(product_id))
            product = ProductService.find_product(db, product_id)
            stale_keys = _cache_keys(product)

            update_data = product_data.model_dump(exclude_unset=True, exclude_none=True)
            if "sku" in update_data:
                sku = update_data["sku"].strip()
                if sku != product.sku and ProductRepository.exists_by_sku(db, sku):
                    raise DuplicateResourceError("Product", "sku", sku)
                update_data["sku"] = sku
            if "category_id" in update_data:
                if CategoryRepository.find_by_id(db, update_data["category_id"]) is None:
                    raise ResourceNotFoundError.for_resource("Category", update_data["category_id"])
            if "price" in update_data:
                update_data["price"] = to_decimal(update_data["price"])

            stock_quantity = update_data.pop("stock_quantity", None)
            for field, value in update_data.items():
                setattr(product, field, value)
            product.updated_at = utcnow()
            ProductRepository.update(db, product)
            if stock_quantity is not None:
                ProductRepository.set_stock(db, product_id, stock_quantity)

            logger.info(f"Updated product {product_id}")
            return ProductService._refresh_cache(db, product_id, stale_keys)

    @staticmethod
    @cached(PRODUCTS_CACHE, key=lambda db, product_id: f"id:{product_id}")
    @transactional(read_only=True)
    def get_product(db: Session, product_id: UUID) -> ProductResponse:
        """Get product by ID"""
        logger.debug(f"Loading product {product_id}")
        return ProductResponse.model_validate(ProductService.find_product(db, product_id))

    @staticmethod
    @cached(PRODUCTS_CACHE, key=lambda db, sku: f"sku:{sku}")
    @transactional(read_only=True)
    def get_product_by_sku(db: Session, sku: str) -> ProductResponse:
        """Get product by SKU"""
        product = ProductRepository.find_by_sku(db, sku)
        if product is None:
            raise ResourceNotFoundError("Product", "sku", sku)
        return ProductResponse.model_validate(product)

    @staticmethod
    @transactional(read_only=True)
    def get_products(db: Session, page: int, size: int) -> PageResponse[ProductResponse]:
        products, total = ProductRepository.find_all(db, page, size)
        return _page(products, page, size, total)

    @staticmethod
    @transactional(read_only=True)
    def get_active_products(db: Session, page: int, size: int) -> PageResponse[ProductResponse]:
        products, total = ProductRepository.find_active(db, page, size)
        return _page(products, page, size, total)

    @staticmethod
    @transactional(read_only=True)
    def get_products_by_category(
        db: Session, category_id: UUID, page: int, size: int
    ) -> PageResponse[ProductResponse]:
        if CategoryRepository.find_by_id(db, category_id) is None:
            raise ResourceNotFoundError.for_resource("Category", category_id)
        products, total = ProductRepository.find_by_category(db, category_id, page, size)
        return _page(products, page, size, total)

    @staticmethod
    @transactional(read_only=True)
    def search_products(db: Session, keyword: str, page: int, size: int) -> PageResponse[ProductResponse]:
        """Match keyword against name, description and SKU"""
        if not keyword or not keyword.strip():
            raise BadRequestError("Search keyword is required")
        products, total = ProductRepository.search(db, keyword, page, size)
        return _page(products, page, size, total)

    @staticmethod
    @transactional(read_only=True)
    def get_products_by_price_range(
        db: Session, min_price: Decimal, max_price: Decimal, page: int, size: int
    ) -> PageResponse[ProductResponse]:
        if min_price < 0 or max_price < 0:
            raise BadRequestError("Price cannot be negative")
        if min_price > max_price:
            raise BadRequestError("Minimum price cannot exceed maximum price")
        products, total = ProductRepository.find_by_price_range(db, min_price, max_price, page, size)
        return _page(products, page, size, total)

    @staticmethod
    @transactional(read_only=True)
    def get_in_stock_products(db: Session, page: int, size: int) -> PageResponse[ProductResponse]:
        products, total = ProductRepository.find_in_stock(db, page, size)
        return _page(products, page, size, total)

    @staticmethod
    @transactional
    def set_active(db: Session, product_id: UUID, active: bool) -> ProductResponse:
        """Activate or deactivate a product"""
        ProductService.find_product(db, product_id)
        ProductRepository.set_active(db, product_id, active)
        logger.info(f"Product {product_id} {'activated' if active else 'deactivated'}")
        return ProductService._refresh_cache(db, product_id)

    @staticmethod
    @transactional
    def adjust_stock(db: Session, product_id: UUID, quantity_change: int) -> ProductResponse:
        """
        Add ``quantity_change`` (negative to remove) to the product's stock

        The stock may not drop below zero.
        """
        with tracer.start_as_current_span("product_service.adjust_stock") as span:
            span.set_attribute("product.id", str(product_id))
            span.set_attribute("stock.change", quantity_change)
            product = ProductService.find_product(db, product_id)

            if quantity_change < 0:
                if not ProductRepository.decrement_stock(db, product_id, -quantity_change):
                    raise BadRequestError(
                        f"Insufficient stock for product: {product.name}. "
                        f"Available: {product.stock_quantity}, requested reduction: {-quantity_change}"
                    )
            elif quantity_change > 0:
                ProductRepository.increment_stock(db, product_id, quantity_change)

            logger.info(f"Adjusted stock of product {product_id} by {quantity_change}")
            return ProductService._refresh_cache(db, product_id)

    @staticmethod
    @transactional
    def delete_product(db: Session, product_id: UUID) -> None:
        with tracer.start_as_current_span("product_service.delete_product") as span:
            span.set_attribute("product.id", str(product_id))
            product = ProductService.find_product(db, product_id)
            ProductRepository.delete(db, product_id)
            logger.info(f"Deleted product {product_id}")
            after_commit(db, lambda: caches.evict(PRODUCTS_CACHE, _cache_keys(product)))

    @staticmethod
    @transactional(read_only=True)
    def count_products(db: Session) -> int:
        return ProductRepository.count(db)
