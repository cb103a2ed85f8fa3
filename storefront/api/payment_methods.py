"""FastAPI routes for payment methods"""
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from storefront.api.deps import Pagination, pagination
from storefront.db.database import get_db
from storefront.schemas.common import ApiResponse, PageResponse
from storefront.schemas.payment import PaymentMethodCreate, PaymentMethodResponse, PaymentMethodUpdate
from storefront.services.payment_service import PaymentMethodService

router = APIRouter(prefix="/api/payment-methods", tags=["payment-methods"])


@router.post("", response_model=ApiResponse[PaymentMethodResponse], status_code=status.HTTP_201_CREATED)
def create_payment_method(method: PaymentMethodCreate, db: Session = Depends(get_db)):
    """
    Store a payment method

    The account number is never returned; responses carry a masked form.
    """
    return ApiResponse.created(
        PaymentMethodService.create_payment_method(db, method), "Payment method created successfully"
    )


@router.get("/user/{user_id}", response_model=ApiResponse[PageResponse[PaymentMethodResponse]])
def list_user_payment_methods(user_id: UUID, paging: Pagination = Depends(pagination), db: Session = Depends(get_db)):
    return ApiResponse.success(
        PaymentMethodService.get_user_payment_methods(db, user_id, paging.page, paging.size)
    )


@router.get("/{method_id}", response_model=ApiResponse[PaymentMethodResponse])
def get_payment_method(method_id: UUID, db: Session = Depends(get_db)):
    return ApiResponse.success(PaymentMethodService.get_payment_method(db, method_id))


@router.put("/{method_id}", response_model=ApiResponse[PaymentMethodResponse])
def update_payment_method(method_id: UUID, method: PaymentMethodUpdate, db: Session = Depends(get_db)):
    return ApiResponse.success(
        PaymentMethodService.update_payment_method(db, method_id, method), "Payment method updated successfully"
    )


@router.delete("/{method_id}", response_model=ApiResponse[None])
def delete_payment_method(method_id: UUID, db: Session = Depends(get_db)):
    PaymentMethodService.delete_payment_method(db, method_id)
    return ApiResponse.success(message="Payment method deleted successfully")
