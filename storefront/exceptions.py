"""
Application exceptions

Services raise these; the handlers registered in ``storefront.main`` turn
them into the standard response envelope with the matching HTTP status.
"""
import enum
from typing import Any, List, Optional


class ErrorCode(str, enum.Enum):
    """Machine readable error codes"""
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    BAD_REQUEST = "BAD_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    DUPLICATE_RESOURCE = "DUPLICATE_RESOURCE"
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"
    INVALID_STATE = "INVALID_STATE"
    DATA_INTEGRITY = "DATA_INTEGRITY"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class FieldViolation:
    """A single rejected field, reported in the envelope's ``errors`` list"""

    def __init__(self, field: str, message: str, rejected_value: Any = None):
        self.field = field
        self.message = message
        self.rejected_value = rejected_value

    def __repr__(self):
        return f"<FieldViolation(field={self.field!r}, message={self.message!r})>"


class StorefrontError(Exception):
    """Base class for errors surfaced to API clients"""
    status_code = 500
    error_code = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, errors: Optional[List[FieldViolation]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []


class ResourceNotFoundError(StorefrontError):
    """Raised when a looked-up resource does not exist"""
    status_code = 404
    error_code = ErrorCode.RESOURCE_NOT_FOUND

    def __init__(self, resource_name: str, field_name: str = "id", field_value: Any = None):
        super().__init__(f"{resource_name} not found with {field_name}: '{field_value}'")
        self.resource_name = resource_name
        self.field_name = field_name
        self.field_value = field_value

    @classmethod
    def for_resource(cls, resource_name: str, resource_id: Any) -> "ResourceNotFoundError":
        return cls(resource_name, "id", resource_id)


class DuplicateResourceError(StorefrontError):
    """Raised before an insert or update that would break a uniqueness rule"""
    status_code = 409
    error_code = ErrorCode.DUPLICATE_RESOURCE

    def __init__(self, resource_name: str, field_name: str, field_value: Any):
        super().__init__(f"{resource_name} already exists with {field_name}: '{field_value}'")
        self.resource_name = resource_name
        self.field_name = field_name
        self.field_value = field_value


class BadRequestError(StorefrontError):
    status_code = 400
    error_code = ErrorCode.BAD_REQUEST


class InsufficientStockError(BadRequestError):
    error_code = ErrorCode.INSUFFICIENT_STOCK

    def __init__(self, product_name: str, requested: int, available: Optional[int] = None):
        message = f"Insufficient stock for product: {product_name}"
        if available is not None:
            message += f" (requested {requested}, available {available})"
        super().__init__(
            message,
            errors=[FieldViolation("quantity", message, requested)]
        )
        self.product_name = product_name
        self.requested = requested
        self.available = available


class InvalidStateTransitionError(BadRequestError):
    """State conflict: the entity's current state does not allow the operation"""
    error_code = ErrorCode.INVALID_STATE


class UnauthorizedError(StorefrontError):
    status_code = 401
    error_code = ErrorCode.UNAUTHORIZED
