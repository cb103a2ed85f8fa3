"""Address business logic"""
from typing import List
from uuid import UUID
import logging

from sqlalchemy.orm import Session

from storefront.cache import ADDRESSES_CACHE, cached, caches
from storefront.db.database import after_commit, transactional
from storefront.db.sql import new_id, utcnow
from storefront.exceptions import BadRequestError, ResourceNotFoundError
from storefront.models.user import Address
from storefront.repositories.address_repository import AddressRepository
from storefront.repositories.user_repository import UserRepository
from storefront.schemas.address import AddressCreate, AddressResponse, AddressUpdate

logger = logging.getLogger(__name__)


class AddressService:

    @staticmethod
    def find_address(db: Session, address_id: UUID) -> Address:
        address = AddressRepository.find_by_id(db, address_id)
        if address is None:
            raise ResourceNotFoundError.for_resource("Address", address_id)
        return address

    @staticmethod
    def _publish(db: Session, address: Address) -> AddressResponse:
        response = AddressResponse.model_validate(address)
        after_commit(db, lambda: caches.refresh(ADDRESSES_CACHE, response, [f"id:{address.id}"]))
        return response

    @staticmethod
    @transactional
    def create_address(db: Session, data: AddressCreate) -> AddressResponse:
        """Create an address; a default address replaces the user's previous default of that type"""
        if not UserRepository.exists_by_id(db, data.user_id):
            raise ResourceNotFoundError.for_resource("User", data.user_id)

        address = Address(
            id=new_id(),
            user_id=data.user_id,
            address_line=data.address_line,
            city=data.city,
            region=data.region,
            country=data.country,
            postal_code=data.postal_code,
            is_default=data.is_default,
            address_type=data.address_type,
            created_at=utcnow(),
        )
        if address.is_default:
            AddressRepository.clear_default(db, address.user_id, address.address_type)
        AddressRepository.save(db, address)

        logger.info(f"Created address {address.id} for user {address.user_id}")
        return AddressService._publish(db, address)

    @staticmethod
    @cached(ADDRESSES_CACHE, key=lambda db, address_id: f"id:{address_id}")
    @transactional(read_only=True)
    def get_address(db: Session, address_id: UUID) -> AddressResponse:
        return AddressResponse.model_validate(AddressService.find_address(db, address_id))

    @staticmethod
    @transactional(read_only=True)
    def get_user_addresses(db: Session, user_id: UUID) -> List[AddressResponse]:
        return [AddressResponse.model_validate(a) for a in AddressRepository.find_by_user(db, user_id)]

    @staticmethod
    @transactional(read_only=True)
    def get_user_addresses_by_type(db: Session, user_id: UUID, address_type: str) -> List[AddressResponse]:
        address_type = address_type.lower()
        if address_type not in ("shipping", "billing"):
            raise BadRequestError("Address type must be 'shipping' or 'billing'")
        addresses = AddressRepository.find_by_user_and_type(db, user_id, address_type)
        return [AddressResponse.model_validate(a) for a in addresses]

    @staticmethod
    @transactional(read_only=True)
    def get_default_address(db: Session, user_id: UUID) -> AddressResponse:
        address = AddressRepository.find_default(db, user_id)
        if address is None:
            raise ResourceNotFoundError("Default address", "userId", user_id)
        return AddressResponse.model_validate(address)

    @staticmethod
    @transactional
    def update_address(db: Session, address_id: UUID, data: AddressUpdate) -> AddressResponse:
        address = AddressService.find_address(db, address_id)
        update_data = data.model_dump(exclude_unset=True)
        for field in ("address_line", "city", "country", "is_default"):
            if update_data.get(field, "") is None:
                update_data.pop(field)
        for field, value in update_data.items():
            setattr(address, field, value)

        if address.is_default:
            AddressRepository.clear_default(db, address.user_id, address.address_type)
        AddressRepository.update(db, address)

        logger.info(f"Updated address {address_id}")
        return AddressService._publish(db, address)

    @staticmethod
    @transactional
    def set_default_address(db: Session, address_id: UUID) -> AddressResponse:
        address = AddressService.find_address(db, address_id)
        AddressRepository.clear_default(db, address.user_id, address.address_type)
        address.is_default = True
        AddressRepository.update(db, address)

        logger.info(f"Address {address_id} is now the default for user {address.user_id}")
        return AddressService._publish(db, address)

    @staticmethod
    @transactional
    def delete_address(db: Session, address_id: UUID) -> None:
        AddressService.find_address(db, address_id)
        AddressRepository.delete(db, address_id)
        logger.info(f"Deleted address {address_id}")
        after_commit(db, lambda: caches.evict(ADDRESSES_CACHE, [f"id:{address_id}"]))
