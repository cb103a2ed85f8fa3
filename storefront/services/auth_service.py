"""Registration, login and token refresh"""
from uuid import UUID
import logging

from opentelemetry import trace
from sqlalchemy.orm import Session

from storefront.config import settings
from storefront.db.database import transactional
from storefront.exceptions import UnauthorizedError
from storefront.models.user import User
from storefront.repositories.user_repository import UserRepository
from storefront.schemas.user import AuthResponse, UserCreate, UserResponse
from storefront.services.auth import (
    REFRESH_TOKEN,
    create_access_token,
    create_refresh_token,
    decode_token,
    verify_password,
)
from storefront.services.user_service import UserService

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


def _token_pair(user: User) -> AuthResponse:
    access_token = create_access_token(
        {"sub": str(user.id), "email": user.email_address, "role": user.role}
    )
    return AuthResponse(
        access_token=access_token,
        refresh_token=create_refresh_token(str(user.id)),
        expires_in=settings.access_token_expire_minutes * 60,
        user=UserResponse.model_validate(user),
    )


class AuthService:
    """Authentication flows on top of UserService"""

    @staticmethod
    @transactional
    def register(db: Session, user_data: UserCreate) -> AuthResponse:
        """Create a customer account and sign it in"""
        created = UserService.create_user(db, user_data)
        return _token_pair(UserService.find_user(db, created.id))

    @staticmethod
    @transactional(read_only=True)
    def login(db: Session, email: str, password: str) -> AuthResponse:
        """Authenticate user"""
        with tracer.start_as_current_span("auth_service.login") as span:
            span.set_attribute("user.email", email)

            user = UserRepository.find_by_email(db, email)
            if user is None:
                logger.warning(f"Login for unknown email {email}")
                raise UnauthorizedError("Invalid email or password")
            if not user.is_active:
                logger.warning(f"Login for inactive user {user.id}")
                raise UnauthorizedError("User account is inactive")
            if not verify_password(password, user.password_hash):
                logger.warning(f"Invalid password for user {user.id}")
                raise UnauthorizedError("Invalid email or password")

            logger.info(f"User {user.id} authenticated successfully")
            return _token_pair(user)

    @staticmethod
    @transactional(read_only=True)
    def refresh(db: Session, refresh_token: str) -> AuthResponse:
        """Exchange a refresh token for a new token pair"""
        claims = decode_token(refresh_token, expected_type=REFRESH_TOKEN)
        user = AuthService._active_user(db, claims["sub"])
        return _token_pair(user)

    @staticmethod
    @transactional(read_only=True)
    def current_user(db: Session, access_token: str) -> UserResponse:
        """Resolve the user behind a bearer access token"""
        claims = decode_token(access_token)
        return UserResponse.model_validate(AuthService._active_user(db, claims["sub"]))

    @staticmethod
    def _active_user(db: Session, subject: str) -> User:
        try:
            user_id = UUID(subject)
        except ValueError:
            raise UnauthorizedError("Invalid or expired token") from None
        user = UserRepository.find_by_id(db, user_id)
        if user is None or not user.is_active:
            raise UnauthorizedError("Invalid or expired token")
        return user
