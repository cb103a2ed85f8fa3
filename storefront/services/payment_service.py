"""Payment method and shipping method business logic"""
from uuid import UUID
import logging

from sqlalchemy.orm import Session

from storefront.db.database import transactional
from storefront.db.sql import new_id, to_decimal, utcnow
from storefront.exceptions import ResourceNotFoundError
from storefront.models.order import PaymentMethod, ShippingMethod
from storefront.repositories.payment_repository import PaymentMethodRepository, ShippingMethodRepository
from storefront.repositories.user_repository import UserRepository
from storefront.schemas.common import PageResponse
from storefront.schemas.payment import (
    PaymentMethodCreate,
    PaymentMethodResponse,
    PaymentMethodUpdate,
    ShippingMethodCreate,
    ShippingMethodResponse,
    ShippingMethodUpdate,
)

logger = logging.getLogger(__name__)


class PaymentMethodService:
    """Stored payment instruments; account numbers never leave unmasked"""

    @staticmethod
    def find_payment_method(db: Session, method_id: UUID) -> PaymentMethod:
        method = PaymentMethodRepository.find_by_id(db, method_id)
        if method is None:
            raise ResourceNotFoundError.for_resource("PaymentMethod", method_id)
        return method

    @staticmethod
    @transactional
    def create_payment_method(db: Session, data: PaymentMethodCreate) -> PaymentMethodResponse:
        if not UserRepository.exists_by_id(db, data.user_id):
            raise ResourceNotFoundError.for_resource("User", data.user_id)
        method = PaymentMethod(
            id=new_id(),
            user_id=data.user_id,
            payment_type=data.payment_type,
            provider=data.provider,
            account_number=data.account_number,
            expiry_date=data.expiry_date,
            created_at=utcnow(),
        )
        PaymentMethodRepository.save(db, method)
        logger.info(f"Created payment method {method.id} for user {method.user_id}")
        return PaymentMethodResponse.model_validate(method)

    @staticmethod
    @transactional(read_only=True)
    def get_payment_method(db: Session, method_id: UUID) -> PaymentMethodResponse:
        return PaymentMethodResponse.model_validate(PaymentMethodService.find_payment_method(db, method_id))

    @staticmethod
    @transactional(read_only=True)
    def get_user_payment_methods(
        db: Session, user_id: UUID, page: int, size: int
    ) -> PageResponse[PaymentMethodResponse]:
        methods, total = PaymentMethodRepository.find_by_user(db, user_id, page, size)
        return PageResponse.of(
            [PaymentMethodResponse.model_validate(m) for m in methods], page, size, total
        )

    @staticmethod
    @transactional
    def update_payment_method(db: Session, method_id: UUID, data: PaymentMethodUpdate) -> PaymentMethodResponse:
        method = PaymentMethodService.find_payment_method(db, method_id)
        for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(method, field, value)
        PaymentMethodRepository.update(db, method)
        logger.info(f"Updated payment method {method_id}")
        return PaymentMethodResponse.model_validate(method)

    @staticmethod
    @transactional
    def delete_payment_method(db: Session, method_id: UUID) -> None:
        PaymentMethodService.find_payment_method(db, method_id)
        PaymentMethodRepository.delete(db, method_id)
        logger.info(f"Deleted payment method {method_id}")


class ShippingMethodService:

    @staticmethod
    def find_shipping_method(db: Session, method_id: UUID) -> ShippingMethod:
        method = ShippingMethodRepository.find_by_id(db, method_id)
        if method is None:
            raise ResourceNotFoundError.for_resource("ShippingMethod", method_id)
        return method

    @staticmethod
    @transactional
    def create_shipping_method(db: Session, data: ShippingMethodCreate) -> ShippingMethodResponse:
        now = utcnow()
        method = ShippingMethod(
            id=new_id(),
            name=data.name,
            description=data.description,
            price=to_decimal(data.price),
            estimated_days=data.estimated_days,
            is_active=data.is_active,
            created_at=now,
            updated_at=now,
        )
        ShippingMethodRepository.save(db, method)
        logger.info(f"Created shipping method {method.id}: {method.name}")
        return ShippingMethodResponse.model_validate(method)

    @staticmethod
    @transactional(read_only=True)
    def get_shipping_method(db: Session, method_id: UUID) -> ShippingMethodResponse:
        return ShippingMethodResponse.model_validate(ShippingMethodService.find_shipping_method(db, method_id))

    @staticmethod
    @transactional(read_only=True)
    def get_shipping_methods(db: Session, page: int, size: int) -> PageResponse[ShippingMethodResponse]:
        methods, total = ShippingMethodRepository.find_all(db, page, size)
        return PageResponse.of(
            [ShippingMethodResponse.model_validate(m) for m in methods], page, size, total
        )

    @staticmethod
    @transactional
    def update_shipping_method(
        db: Session, method_id: UUID, data: ShippingMethodUpdate
    ) -> ShippingMethodResponse:
        method = ShippingMethodService.find_shipping_method(db, method_id)
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        if "price" in update_data:
            update_data["price"] = to_decimal(update_data["price"])
        for field, value in update_data.items():
            setattr(method, field, value)
        method.updated_at = utcnow()
        ShippingMethodRepository.update(db, method)
        logger.info(f"Updated shipping method {method_id}")
        return ShippingMethodResponse.model_validate(method)

    @staticmethod
    @transactional
    def delete_shipping_method(db: Session, method_id: UUID) -> None:
        ShippingMethodService.find_shipping_method(db, method_id)
        ShippingMethodRepository.delete(db, method_id)
        logger.info(f"Deleted shipping method {method_id}")
