"""FastAPI routes for addresses"""
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from storefront.db.database import get_db
from storefront.schemas.address import AddressCreate, AddressResponse, AddressUpdate
from storefront.schemas.common import ApiResponse
from storefront.services.address_service import AddressService

router = APIRouter(prefix="/api/addresses", tags=["addresses"])


@router.post("", response_model=ApiResponse[AddressResponse], status_code=status.HTTP_201_CREATED)
def create_address(address: AddressCreate, db: Session = Depends(get_db)):
    """
    Create an address

    - **addressType**: shipping (default) or billing
    - **isDefault**: replaces the user's previous default address of the same type
    """
    return ApiResponse.created(AddressService.create_address(db, address), "Address created successfully")


@router.get("/user/{user_id}", response_model=ApiResponse[List[AddressResponse]])
def list_user_addresses(user_id: UUID, db: Session = Depends(get_db)):
    return ApiResponse.success(AddressService.get_user_addresses(db, user_id))


@router.get("/user/{user_id}/type/{address_type}", response_model=ApiResponse[List[AddressResponse]])
def list_user_addresses_by_type(user_id: UUID, address_type: str, db: Session = Depends(get_db)):
    return ApiResponse.success(AddressService.get_user_addresses_by_type(db, user_id, address_type))


@router.get("/user/{user_id}/default", response_model=ApiResponse[AddressResponse])
def get_default_address(user_id: UUID, db: Session = Depends(get_db)):
    """The user's default address"""
    return ApiResponse.success(AddressService.get_default_address(db, user_id))


@router.get("/{address_id}", response_model=ApiResponse[AddressResponse])
def get_address(address_id: UUID, db: Session = Depends(get_db)):
    return ApiResponse.success(AddressService.get_address(db, address_id))


@router.put("/{address_id}", response_model=ApiResponse[AddressResponse])
def update_address(address_id: UUID, address: AddressUpdate, db: Session = Depends(get_db)):
    return ApiResponse.success(AddressService.update_address(db, address_id, address), "Address updated successfully")


@router.patch("/{address_id}/default", response_model=ApiResponse[AddressResponse])
def set_default_address(address_id: UUID, db: Session = Depends(get_db)):
    """Make this the user's default address of its type"""
    return ApiResponse.success(AddressService.set_default_address(db, address_id), "Default address updated")


@router.delete("/{address_id}", response_model=ApiResponse[None])
def delete_address(address_id: UUID, db: Session = Depends(get_db)):
    AddressService.delete_address(db, address_id)
    return ApiResponse.success(message="Address deleted successfully")
