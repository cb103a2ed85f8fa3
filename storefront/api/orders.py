"""
FastAPI routes for orders
"""
from uuid import UUID
import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from storefront.api.deps import Pagination, pagination
from storefront.db.database import get_db
from storefront.schemas.common import ApiResponse, PageResponse
from storefront.schemas.order import OrderCreate, OrderResponse, OrderUpdate
from storefront.services.order_service import OrderService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/orders", tags=["orders"])

PAYMENT_CONFIRMS_ORDER = "Setting payment status to 'paid' on a pending order also confirms the order."


@router.post("", response_model=ApiResponse[OrderResponse], status_code=status.HTTP_201_CREATED)
def create_order(order: OrderCreate, db: Session = Depends(get_db)):
    """
    Create a new order

    This endpoint:
    1. Validates the user and products exist
    2. Checks stock availability
    3. Calculates subtotal and total
    4. Creates the order with its items
    5. Reduces product stock

    - **userId**: User ID (required)
    - **items**: List of order items (at least one required)
    """
    logger.info(f"Creating order for user {order.user_id}")
    return ApiResponse.created(OrderService.create_order(db, order), "Order created successfully")


@router.get("/count", response_model=ApiResponse[int])
def count_orders(db: Session = Depends(get_db)):
    """Total number of orders"""
    return ApiResponse.success(OrderService.count_orders(db))


@router.get("/count/status/{order_status}", response_model=ApiResponse[int])
def count_orders_by_status(order_status: str, db: Session = Depends(get_db)):
    """Number of orders in the given status"""
    return ApiResponse.success(OrderService.count_orders_by_status(db, order_status))


@router.get("/number/{order_number}", response_model=ApiResponse[OrderResponse])
def get_order_by_number(order_number: str, db: Session = Depends(get_db)):
    """Get an order by its order number"""
    return ApiResponse.success(OrderService.get_order_by_number(db, order_number))


@router.get("/user/{user_id}", response_model=ApiResponse[PageResponse[OrderResponse]])
def get_user_orders(user_id: UUID, paging: Pagination = Depends(pagination), db: Session = Depends(get_db)):
    """List orders placed by a user"""
    return ApiResponse.success(OrderService.get_orders_by_user(db, user_id, paging.page, paging.size))


@router.get("/status/{order_status}", response_model=ApiResponse[PageResponse[OrderResponse]])
def get_orders_by_status(
    order_status: str, paging: Pagination = Depends(pagination), db: Session = Depends(get_db)
):
    """List orders in the given status"""
    return ApiResponse.success(OrderService.get_orders_by_status(db, order_status, paging.page, paging.size))


@router.get("", response_model=ApiResponse[PageResponse[OrderResponse]])
def list_orders(paging: Pagination = Depends(pagination), db: Session = Depends(get_db)):
    """
    List all orders with pagination

    - **page**: Zero-based page number
    - **size**: Page size
    """
    logger.info(f"Listing orders: page={paging.page}, size={paging.size}")
    return ApiResponse.success(OrderService.get_orders(db, paging.page, paging.size))


@router.get("/{order_id}", response_model=ApiResponse[OrderResponse])
def get_order(order_id: UUID, db: Session = Depends(get_db)):
    """Get a specific order by ID"""
    return ApiResponse.success(OrderService.get_order(db, order_id))


@router.patch("/{order_id}/status", response_model=ApiResponse[OrderResponse])
def update_order_status(
    order_id: UUID,
    new_status: str = Query(..., alias="status", description="Target order status"),
    db: Session = Depends(get_db),
):
    """
    Update order status

    Allowed moves: pending -> confirmed -> processing -> shipped -> delivered,
    and cancelled from pending, confirmed or processing. Setting the
    current status again changes nothing.
    """
    logger.info(f"Updating order {order_id} status to {new_status}")
    return ApiResponse.success(
        OrderService.update_order_status(db, order_id, new_status), "Order status updated successfully"
    )


@router.patch(
    "/{order_id}/payment-status",
    response_model=ApiResponse[OrderResponse],
    description=f"Update an order's payment status. {PAYMENT_CONFIRMS_ORDER}",
)
def update_payment_status(
    order_id: UUID,
    payment_status: str = Query(..., alias="paymentStatus", description="Target payment status"),
    db: Session = Depends(get_db),
):
    logger.info(f"Updating order {order_id} payment status to {payment_status}")
    return ApiResponse.success(
        OrderService.update_payment_status(db, order_id, payment_status),
        f"Payment status updated successfully. {PAYMENT_CONFIRMS_ORDER}",
    )


@router.post("/{order_id}/cancel", response_model=ApiResponse[OrderResponse])
def cancel_order(order_id: UUID, db: Session = Depends(get_db)):
    """
    Cancel an order

    Only pending, confirmed or processing orders can be cancelled. Stock is restored.
    """
    logger.info(f"Cancelling order {order_id}")
    return ApiResponse.success(OrderService.cancel_order(db, order_id), "Order cancelled successfully")


@router.put("/{order_id}", response_model=ApiResponse[OrderResponse])
def update_order(order_id: UUID, order: OrderUpdate, db: Session = Depends(get_db)):
    """
    Update an order

    Replaces payment method, shipping address, shipping method and notes when
    given. Item edits: an existing item id with a new quantity changes it, a
    missing or zero quantity removes it, a product id without a known item id
    adds a line. Items not mentioned are kept. Every item edit
    replaces the stored lines, so item ids change. Item edits are only
    accepted while the order can still be cancelled, and an edit that
    removes every line is rejected.
    """
    return ApiResponse.success(OrderService.update_order(db, order_id, order), "Order updated successfully")


@router.delete("/{order_id}", response_model=ApiResponse[None])
def delete_order(order_id: UUID, db: Session = Depends(get_db)):
    """Delete an order and its items"""
    OrderService.delete_order(db, order_id)
    return ApiResponse.success(message="Order deleted successfully")
