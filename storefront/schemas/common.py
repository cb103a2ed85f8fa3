"""
Response envelopes shared by every endpoint
"""
import math
from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated, Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, model_serializer
from pydantic.alias_generators import to_camel

T = TypeVar("T")

# Decimals travel as JSON numbers
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CamelModel(BaseModel):
    """Base schema: snake_case attributes, camelCase JSON"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class FieldError(CamelModel):
    field: str
    message: str
    rejected_value: Optional[Any] = None


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ApiResponse(CamelModel, Generic[T]):
    """Standard response wrapper returned by every REST endpoint"""
    status: bool = True
    message: Optional[str] = None
    data: Optional[T] = None
    timestamp: datetime = Field(default_factory=_now)
    status_code: Optional[int] = None
    path: Optional[str] = None
    errors: List[FieldError] = Field(default_factory=list)

    @model_serializer(mode="wrap")
    def _omit_empty_errors(self, handler):
        payload = handler(self)
        if not self.errors:
            payload.pop("errors", None)
        return payload

    @classmethod
    def success(cls, data: Any = None, message: str = "Request successful", status_code: int = 200) -> "ApiResponse":
        return cls(status=True, message=message, data=data, status_code=status_code)

    @classmethod
    def created(cls, data: Any, message: str = "Resource created successfully") -> "ApiResponse":
        return cls(status=True, message=message, data=data, status_code=201)

    @classmethod
    def error(
        cls,
        message: str,
        status_code: int,
        path: Optional[str] = None,
        errors: Optional[List[FieldError]] = None,
    ) -> "ApiResponse":
        return cls(status=False, message=message, status_code=status_code, path=path, errors=errors or [])


class PageResponse(CamelModel, Generic[T]):
    """One page of a listing plus navigation flags"""
    content: List[T] = Field(default_factory=list)
    page_number: int = 0
    page_size: int = 0
    total_elements: int = 0
    total_pages: int = 0
    first: bool = True
    last: bool = True
    has_next: bool = False
    has_previous: bool = False

    @classmethod
    def of(cls, content: List[Any], page: int, size: int, total: int) -> "PageResponse":
        total_pages = math.ceil(total / size) if size > 0 else 0
        return cls(
            content=content,
            page_number=page,
            page_size=size,
            total_elements=total,
            total_pages=total_pages,
            first=page == 0,
            last=page >= total_pages - 1,
            has_next=page < total_pages - 1,
            has_previous=page > 0,
        )


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    service: str
    version: str
    timestamp: datetime
    database: Optional[str] = None
