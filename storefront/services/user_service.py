"""User business logic"""
from typing import List
from uuid import UUID
import logging

from opentelemetry import trace
from sqlalchemy.orm import Session

from storefront.cache import USERS_CACHE, cached, caches
from storefront.db.database import after_commit, transactional
from storefront.db.sql import new_id, utcnow
from storefront.exceptions import BadRequestError, DuplicateResourceError, ResourceNotFoundError
from storefront.models.user import User, UserRole
from storefront.repositories.user_repository import UserRepository
from storefront.schemas.common import PageResponse
from storefront.schemas.user import UserCreate, UserResponse, UserUpdate
from storefront.services.auth import hash_password

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


def _cache_keys(user: User) -> List[str]:
    return [f"id:{user.id}", f"email:{user.email_address.lower()}"]


def _page(users, page: int, size: int, total: int) -> PageResponse[UserResponse]:
    return PageResponse.of([UserResponse.model_validate(user) for user in users], page, size, total)


class UserService:
    """User service for business logic"""

    @staticmethod
    def find_user(db: Session, user_id: UUID) -> User:
        """Load the user record or raise not found"""
        user = UserRepository.find_by_id(db, user_id)
        if user is None:
            raise ResourceNotFoundError.for_resource("User", user_id)
        return user

    @staticmethod
    @transactional
    def create_user(db: Session, user_data: UserCreate, role: UserRole = UserRole.CUSTOMER) -> UserResponse:
        """Create new user"""
        with tracer.start_as_current_span("user_service.create_user") as span:
            email = user_data.email_address.lower()
            if UserRepository.exists_by_email(db, email):
                logger.warning(f"Email {email} already registered")
                raise DuplicateResourceError("User", "email", email)

            now = utcnow()
            user = User(
                id=new_id(),
                email_address=email,
                first_name=user_data.first_name,
                last_name=user_data.last_name,
                phone_number=user_data.phone_number,
                password_hash=hash_password(user_data.password),
                role=role.value,
                is_active=True,
                created_at=now,
                updated_at=now,
            )
            UserRepository.save(db, user)

            span.set_attribute("user.id", str(user.id))
            logger.info(f"Created user {user.id}: {email}")

            response = UserResponse.model_validate(user)
            after_commit(db, lambda: caches.refresh(USERS_CACHE, response, _cache_keys(user)))
            return response

    @staticmethod
    @transactional
    def update_user(db: Session, user_id: UUID, user_data: UserUpdate) -> UserResponse:
        """Update user; omitted fields keep their values"""
        with tracer.start_as_current_span("user_service.update_user") as span:
            span.set_attribute("user.id", str(user_id))
            user = UserService.find_user(db, user_id)
            stale_keys = _cache_keys(user)

            update_data = user_data.model_dump(exclude_unset=True, exclude_none=True)
            if "email_address" in update_data:
                email = update_data["email_address"].lower()
                if email != user.email_address.lower() and UserRepository.exists_by_email(db, email):
                    raise DuplicateResourceError("User", "email", email)
                update_data["email_address"] = email
            if "password" in update_data:
                update_data["password_hash"] = hash_password(update_data.pop("password"))
            if "role" in update_data:
                update_data["role"] = UserRole(update_data["role"]).value

            for field, value in update_data.items():
                setattr(user, field, value)
            user.updated_at = utcnow()
            UserRepository.update(db, user)

            logger.info(f"Updated user {user_id}")
            response = UserResponse.model_validate(user)
            after_commit(
                db, lambda: caches.refresh(USERS_CACHE, response, _cache_keys(user), stale_keys=stale_keys)
            )
            return response

    @staticmethod
    @cached(USERS_CACHE, key=lambda db, user_id: f"id:{user_id}")
    @transactional(read_only=True)
    def get_user(db: Session, user_id: UUID) -> UserResponse:
        """Get user by ID"""
        logger.debug(f"Loading user {user_id}")
        return UserResponse.model_validate(UserService.find_user(db, user_id))

    @staticmethod
    @cached(USERS_CACHE, key=lambda db, email: f"email:{email.lower()}")
    @transactional(read_only=True)
    def get_user_by_email(db: Session, email: str) -> UserResponse:
        """Get user by email"""
        user = UserRepository.find_by_email(db, email)
        if user is None:
            raise ResourceNotFoundError("User", "email", email)
        return UserResponse.model_validate(user)

    @staticmethod
    @transactional(read_only=True)
    def get_users(db: Session, page: int, size: int) -> PageResponse[UserResponse]:
        """Get list of users"""
        users, total = UserRepository.find_all(db, page, size)
        return _page(users, page, size, total)

    @staticmethod
    @transactional(read_only=True)
    def search_users(db: Session, keyword: str, page: int, size: int) -> PageResponse[UserResponse]:
        """Match keyword against email, first and last name"""
        if not keyword or not keyword.strip():
            raise BadRequestError("Search keyword is required")
        users, total = UserRepository.search(db, keyword, page, size)
        return _page(users, page, size, total)

    @staticmethod
    @transactional
    def set_active(db: Session, user_id: UUID, active: bool) -> UserResponse:
        """Activate or deactivate a user"""
        user = UserService.find_user(db, user_id)
        user.is_active = active
        user.updated_at = utcnow()
        UserRepository.set_active(db, user_id, active, user.updated_at)

        logger.info(f"User {user_id} {'activated' if active else 'deactivated'}")
        response = UserResponse.model_validate(user)
        after_commit(db, lambda: caches.refresh(USERS_CACHE, response, _cache_keys(user)))
        return response

    @staticmethod
    @transactional
    def delete_user(db: Session, user_id: UUID) -> None:
        with tracer.start_as_current_span("user_service.delete_user") as span:
            span.set_attribute("user.id", str(user_id))
            user = UserService.find_user(db, user_id)
            UserRepository.delete(db, user_id)
            logger.info(f"Deleted user {user_id}")
            after_commit(db, lambda: caches.evict(USERS_CACHE, _cache_keys(user)))

    @staticmethod
    @transactional(read_only=True)
    def count_users(db: Session) -> int:
        return UserRepository.count(db)

