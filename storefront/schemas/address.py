"""Address schemas"""
from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import Field

from storefront.schemas.common import CamelModel

AddressType = Literal["shipping", "billing"]


class AddressCreate(CamelModel):
    user_id: UUID
    address_line: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    region: Optional[str] = Field(None, max_length=100)
    country: str = Field(..., min_length=1, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    is_default: bool = False
    address_type: Optional[AddressType] = "shipping"


class AddressUpdate(CamelModel):
    address_line: Optional[str] = Field(None, min_length=1, max_length=255)
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    region: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, min_length=1, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    is_default: Optional[bool] = None
    address_type: Optional[AddressType] = None


class AddressResponse(CamelModel):
    id: UUID
    user_id: UUID
    address_line: str
    city: str
    region: Optional[str] = None
    country: str
    postal_code: Optional[str] = None
    full_address: str
    is_default: bool
    address_type: Optional[str] = None
    created_at: Optional[datetime] = None
