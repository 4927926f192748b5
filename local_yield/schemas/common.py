"""
Base schema classes and the standard response envelope.
"""

from __future__ import annotations

from typing import Generic, List, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")

__all__ = [
    "BaseSchema",
    "DataResponse",
    "ErrorDetail",
    "ErrorResponse",
    "Page",
]


class BaseSchema(BaseModel):
    """
    Base schema with common Pydantic configuration.

    Fields are snake_case in Python and camelCase on the wire; both
    spellings are accepted on input.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel,
        str_strip_whitespace=True,
        validate_assignment=True,
    )


class DataResponse(BaseSchema, Generic[T]):
    """Success envelope: `{"data": ...}`."""

    data: T


class ErrorDetail(BaseSchema):
    code: str = Field(..., description="Application error code")
    message: str = Field(..., description="Human readable message")


class ErrorResponse(BaseSchema):
    """Error envelope: `{"error": {code, message}, "requestId"}`."""

    error: ErrorDetail
    request_id: Union[str, None] = Field(default=None, description="Request correlation id")


class Page(BaseSchema, Generic[T]):
    items: List[T]
    total: int
    page: int
    page_size: int
