"""Helpers for reading result rows and building paged queries"""
import json
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, List, Optional, Tuple

from sqlalchemy import text
from sqlalchemy.orm import Session

from storefront.config import settings
from storefront.exceptions import BadRequestError

CENTS = Decimal("0.01")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> uuid.UUID:
    return uuid.uuid4()


def to_uuid(value: Any) -> Optional[uuid.UUID]:
    if value is None:
        return None
    if isinstance(value, uuid.UUID):
        return value
    return uuid.UUID(str(value))


def id_param(value: Optional[uuid.UUID]) -> Optional[str]:
    """UUIDs are stored in their canonical string form"""
    return str(value) if value is not None else None


def to_decimal(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENTS)


def to_datetime(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def to_bool(value: Any) -> Optional[bool]:
    return None if value is None else bool(value)


def to_string_list(value: Any) -> List[str]:
    """Decode a JSON array column"""
    if not value:
        return []
    if isinstance(value, list):
        return value
    decoded = json.loads(value)
    return [str(item) for item in decoded] if isinstance(decoded, list) else []


def from_string_list(values: Optional[List[str]]) -> str:
    return json.dumps(values or [])


def validate_pagination(page: int, size: int) -> None:
    """Reject page/size outside the supported window"""
    if page < 0:
        raise BadRequestError("Page number cannot be negative")
    if size < 1:
        raise BadRequestError("Page size must be at least 1")
    if size > settings.max_page_size:
        raise BadRequestError(f"Page size cannot exceed {settings.max_page_size}")


def page_params(page: int, size: int) -> dict:
    """Validated LIMIT/OFFSET bind parameters"""
    validate_pagination(page, size)
    return {"limit": size, "offset": page * size}


def fetch_page(
    db: Session,
    query: str,
    count_query: str,
    params: dict,
    page: int,
    size: int,
    mapper: Callable[[Any], Any],
) -> Tuple[List[Any], int]:
    """Run ``query`` for one page and ``count_query`` for the total"""
    bind = dict(params, **page_params(page, size))
    rows = db.execute(text(f"{query} LIMIT :limit OFFSET :offset"), bind).fetchall()
    total = db.execute(text(count_query), params).scalar_one()
    return [mapper(row) for row in rows], total
