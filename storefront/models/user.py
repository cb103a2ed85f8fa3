"""User and address records"""
import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID


class UserRole(str, enum.Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"


@dataclass
class User:
    email_address: str
    first_name: str
    last_name: str
    password_hash: str
    id: Optional[UUID] = None
    phone_number: Optional[str] = None
    role: str = UserRole.CUSTOMER.value
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email_address})>"


@dataclass
class Address:
    user_id: UUID
    address_line: str
    city: str
    country: str
    id: Optional[UUID] = None
    region: Optional[str] = None
    postal_code: Optional[str] = None
    is_default: bool = False
    address_type: Optional[str] = None  # shipping, billing, or None for both
    created_at: Optional[datetime] = None

    @property
    def full_address(self) -> str:
        parts = [self.address_line, self.city, self.region, self.postal_code, self.country]
        return ", ".join(part for part in parts if part)
