"""FastAPI routes for shipping methods"""
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from storefront.api.deps import Pagination, pagination
from storefront.db.database import get_db
from storefront.schemas.common import ApiResponse, PageResponse
from storefront.schemas.payment import ShippingMethodCreate, ShippingMethodResponse, ShippingMethodUpdate
from storefront.services.payment_service import ShippingMethodService

router = APIRouter(prefix="/api/shipping-methods", tags=["shipping-methods"])


@router.post("", response_model=ApiResponse[ShippingMethodResponse], status_code=status.HTTP_201_CREATED)
def create_shipping_method(method: ShippingMethodCreate, db: Session = Depends(get_db)):
    return ApiResponse.created(
        ShippingMethodService.create_shipping_method(db, method), "Shipping method created successfully"
    )


@router.get("", response_model=ApiResponse[PageResponse[ShippingMethodResponse]])
def list_shipping_methods(paging: Pagination = Depends(pagination), db: Session = Depends(get_db)):
    return ApiResponse.success(ShippingMethodService.get_shipping_methods(db, paging.page, paging.size))


@router.get("/{method_id}", response_model=ApiResponse[ShippingMethodResponse])
def get_shipping_method(method_id: UUID, db: Session = Depends(get_db)):
    return ApiResponse.success(ShippingMethodService.get_shipping_method(db, method_id))


@router.put("/{method_id}", response_model=ApiResponse[ShippingMethodResponse])
def update_shipping_method(method_id: UUID, method: ShippingMethodUpdate, db: Session = Depends(get_db)):
    return ApiResponse.success(
        ShippingMethodService.update_shipping_method(db, method_id, method), "Shipping method updated successfully"
    )


@router.delete("/{method_id}", response_model=ApiResponse[None])
def delete_shipping_method(method_id: UUID, db: Session = Depends(get_db)):
    ShippingMethodService.delete_shipping_method(db, method_id)
    return ApiResponse.success(message="Shipping method deleted successfully")
