"""Payment method and shipping method schemas"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from storefront.schemas.common import CamelModel, Money


class PaymentMethodCreate(CamelModel):
    user_id: UUID
    payment_type: str = Field(..., min_length=1, max_length=50)
    provider: Optional[str] = Field(None, max_length=100)
    account_number: str = Field(..., min_length=1, max_length=64)
    expiry_date: Optional[datetime] = None


class PaymentMethodUpdate(CamelModel):
    payment_type: Optional[str] = Field(None, min_length=1, max_length=50)
    provider: Optional[str] = Field(None, max_length=100)
    account_number: Optional[str] = Field(None, min_length=1, max_length=64)
    expiry_date: Optional[datetime] = None


class PaymentMethodResponse(CamelModel):
    """Only the masked account number leaves the service"""
    id: UUID
    user_id: UUID
    payment_type: str
    provider: Optional[str] = None
    masked_account_number: Optional[str] = None
    expiry_date: Optional[datetime] = None
    created_at: Optional[datetime] = None


class ShippingMethodCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    price: Money = Field(..., ge=0, decimal_places=2)
    estimated_days: Optional[int] = Field(None, ge=0)
    is_active: bool = True


class ShippingMethodUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    price: Optional[Money] = Field(None, ge=0, decimal_places=2)
    estimated_days: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None


class ShippingMethodResponse(CamelModel):
    id: UUID
    name: str
    description: Optional[str] = None
    price: Money
    estimated_days: Optional[int] = None
    estimated_delivery: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
