"""Storefront API configuration"""
from pydantic_settings import SettingsConfigDict

from storefront.common_config import CommonSettings


class Settings(CommonSettings):
    """Storefront specific settings"""
    otel_service_name: str = "storefront-api"

    # JWT
    jwt_secret_key: str = "storefront-secret-key-change-in-production"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    refresh_token_expire_days: int = 7

    # Entity caches
    cache_max_size: int = 5000
    cache_ttl_seconds: int = 1800

    # Orders
    order_number_max_attempts: int = 5

    # Pagination
    default_page_size: int = 10
    max_page_size: int = 100

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
