"""
Shared Pydantic schemas: camelCase base model, response envelope,
pagination and sorting.
"""

import enum
import math
from typing import Any, Dict, Generic, Iterable, List, Optional, Sequence, TypeVar

from fastapi import status
from pydantic import BaseModel, Field, computed_field
from pydantic.alias_generators import to_camel

from app.core.config import settings

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base schema serialized with camelCase field names."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class SortDirection(enum.IntEnum):
    """Sort direction as sent on the wire (0 ascending, 1 descending)."""
    ASCENDING = 0
    DESCENDING = 1


class SortField(str, enum.Enum):
    """Fields a contact search may be sorted by."""
    NAME = "Name"
    EMAIL = "Email"
    COMPANY_NAME = "CompanyName"
    JOB_TITLE = "JobTitle"
    CREATED_ON = "CreatedOn"
    DATE_OF_BIRTH = "DateOfBirth"


SORTABLE_FIELDS = frozenset(field.value for field in SortField)


class SortInfo(CamelModel):
    """Requested or effective sort order."""
    sort_by: Optional[str] = SortField.NAME.value
    sort_direction: SortDirection = SortDirection.ASCENDING

    @property
    def is_ascending(self) -> bool:
        return self.sort_direction == SortDirection.ASCENDING


class PaginationInfo(CamelModel):
    """Requested page plus, on responses, the total record count."""
    current_page: int = Field(1, ge=1)
    page_size: int = Field(settings.DEFAULT_PAGE_SIZE, ge=1)
    total_records: int = Field(0, ge=0)

    @computed_field(alias="totalPages")
    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_records / self.page_size)

    @property
    def skip(self) -> int:
        return (self.current_page - 1) * self.page_size


class PaginatedResponse(CamelModel, Generic[T]):
    """One page of results with the effective paging and sorting."""
    items: List[T]
    pagination_info: PaginationInfo
    sort_info: SortInfo


class MessageSchema(BaseModel):
    """A single error message, optionally tagged with the offending field."""
    field: Optional[str] = None
    message: str


class ResponseEnvelope(CamelModel, Generic[T]):
    """Uniform wrapper returned by every contact operation."""
    success: bool
    data: Optional[T] = None
    errors: Optional[List[MessageSchema]] = None
    status_code: int = status.HTTP_200_OK

    @classmethod
    def ok(cls, data: T, status_code: int = status.HTTP_200_OK) -> "ResponseEnvelope[T]":
        return cls(success=True, data=data, errors=None, status_code=status_code)

    @classmethod
    def error(
        cls,
        status_code: int,
        message: str,
        field: Optional[str] = None,
    ) -> "ResponseEnvelope[T]":
        return cls(
            success=False,
            data=None,
            errors=[MessageSchema(field=field, message=message)],
            status_code=status_code,
        )

    @classmethod
    def from_messages(
        cls,
        status_code: int,
        errors: Iterable[MessageSchema],
    ) -> "ResponseEnvelope[T]":
        return cls(success=False, data=None, errors=list(errors), status_code=status_code)

    @classmethod
    def from_validation_errors(cls, errors: Sequence[Dict[str, Any]]) -> "ResponseEnvelope[T]":
        """
        Build a 400 envelope from Pydantic error dicts.

        Keeps the first message for each invalid field, in the order the
        fields were reported.
        """
        return cls.from_messages(status.HTTP_400_BAD_REQUEST, validation_messages(errors))

    def to_content(self) -> Dict[str, Any]:
        """JSON-ready dict with camelCase keys and nulls omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


_REQUEST_LOCATIONS = {"body", "query", "path", "header", "cookie"}


def error_field_name(loc: Sequence[Any]) -> Optional[str]:
    """Dotted field path for a Pydantic error location, request location stripped."""
    parts = list(loc)
    if parts and parts[0] in _REQUEST_LOCATIONS:
        parts = parts[1:]
    if not parts:
        return None
    return ".".join(str(part) for part in parts)


def validation_messages(errors: Sequence[Dict[str, Any]]) -> List[MessageSchema]:
    messages: Dict[Optional[str], MessageSchema] = {}
    for error in errors:
        field = error_field_name(error.get("loc", ()))
        if field in messages:
            continue
        messages[field] = MessageSchema(field=field, message=str(error.get("msg", "")))
    return list(messages.values())
