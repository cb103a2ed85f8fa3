"""FastAPI routes for products"""
from decimal import Decimal
from uuid import UUID
import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from storefront.api.deps import Pagination, pagination
from storefront.db.database import get_db
from storefront.schemas.catalog import ProductCreate, ProductResponse, ProductUpdate
from storefront.schemas.common import ApiResponse, PageResponse
from storefront.services.product_service import ProductService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/products", tags=["products"])


@router.post("", response_model=ApiResponse[ProductResponse], status_code=status.HTTP_201_CREATED)
def create_product(product: ProductCreate, db: Session = Depends(get_db)):
    """Create a new product"""
    logger.info(f"Creating product {product.name}")
    return ApiResponse.created(ProductService.create_product(db, product), "Product created successfully")


@router.get("", response_model=ApiResponse[PageResponse[ProductResponse]])
def list_products(paging: Pagination = Depends(pagination), db: Session = Depends(get_db)):
    """List all products with pagination"""
    return ApiResponse.success(ProductService.get_products(db, paging.page, paging.size))


@router.get("/active", response_model=ApiResponse[PageResponse[ProductResponse]])
def list_active_products(paging: Pagination = Depends(pagination), db: Session = Depends(get_db)):
    return ApiResponse.success(ProductService.get_active_products(db, paging.page, paging.size))


@router.get("/in-stock", response_model=ApiResponse[PageResponse[ProductResponse]])
def list_in_stock_products(paging: Pagination = Depends(pagination), db: Session = Depends(get_db)):
    """Active products with stock left"""
    return ApiResponse.success(ProductService.get_in_stock_products(db, paging.page, paging.size))


@router.get("/search", response_model=ApiResponse[PageResponse[ProductResponse]])
def search_products(
    keyword: str = Query(..., description="Matched against name, description and SKU"),
    paging: Pagination = Depends(pagination),
    db: Session = Depends(get_db),
):
    return ApiResponse.success(ProductService.search_products(db, keyword, paging.page, paging.size))


@router.get("/price-range", response_model=ApiResponse[PageResponse[ProductResponse]])
def list_products_by_price(
    min_price: Decimal = Query(..., alias="minPrice"),
    max_price: Decimal = Query(..., alias="maxPrice"),
    paging: Pagination = Depends(pagination),
    db: Session = Depends(get_db),
):
    """Products priced between minPrice and maxPrice, inclusive"""
    return ApiResponse.success(
        ProductService.get_products_by_price_range(db, min_price, max_price, paging.page, paging.size)
    )


@router.get("/count", response_model=ApiResponse[int])
def count_products(db: Session = Depends(get_db)):
    return ApiResponse.success(ProductService.count_products(db))


@router.get("/category/{category_id}", response_model=ApiResponse[PageResponse[ProductResponse]])
def list_products_by_category(
    category_id: UUID, paging: Pagination = Depends(pagination), db: Session = Depends(get_db)
):
    return ApiResponse.success(ProductService.get_products_by_category(db, category_id, paging.page, paging.size))


@router.get("/sku/{sku}", response_model=ApiResponse[ProductResponse])
def get_product_by_sku(sku: str, db: Session = Depends(get_db)):
    """Get a product by SKU"""
    return ApiResponse.success(ProductService.get_product_by_sku(db, sku))


@router.get("/{product_id}", response_model=ApiResponse[ProductResponse])
def get_product(product_id: UUID, db: Session = Depends(get_db)):
    """Get a specific product by ID"""
    return ApiResponse.success(ProductService.get_product(db, product_id))


@router.put("/{product_id}", response_model=ApiResponse[ProductResponse])
def update_product(product_id: UUID, product: ProductUpdate, db: Session = Depends(get_db)):
    """Update an existing product; omitted fields are left unchanged"""
    return ApiResponse.success(ProductService.update_product(db, product_id, product), "Product updated successfully")


@router.patch("/{product_id}/stock", response_model=ApiResponse[ProductResponse])
def adjust_stock(
    product_id: UUID,
    quantity_change: int = Query(..., alias="quantityChange", description="Units to add, negative to remove"),
    db: Session = Depends(get_db),
):
    """Adjust stock by a relative amount; stock cannot go below zero"""
    return ApiResponse.success(ProductService.adjust_stock(db, product_id, quantity_change), "Stock updated successfully")


@router.patch("/{product_id}/activate", response_model=ApiResponse[ProductResponse])
def activate_product(product_id: UUID, db: Session = Depends(get_db)):
    return ApiResponse.success(ProductService.set_active(db, product_id, True), "Product activated successfully")


@router.patch("/{product_id}/deactivate", response_model=ApiResponse[ProductResponse])
def deactivate_product(product_id: UUID, db: Session = Depends(get_db)):
    return ApiResponse.success(ProductService.set_active(db, product_id, False), "Product deactivated successfully")


@router.delete("/{product_id}", response_model=ApiResponse[None])
def delete_product(product_id: UUID, db: Session = Depends(get_db)):
    """Delete a product"""
    ProductService.delete_product(db, product_id)
    return ApiResponse.success(message="Product deleted successfully")
