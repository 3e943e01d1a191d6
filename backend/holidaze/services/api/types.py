"""
Typed definitions for raw Holidaze API responses.

Every endpoint wraps its payload in {"data": ..., "meta": ...}; failures carry
{"errors": [{"message": ...}], "status": ..., "statusCode": ...}. The client
unwraps data and hands it to the pydantic models in holidaze.models.
"""

from typing import Any, TypedDict


class ApiErrorItem(TypedDict, total=False):
    code: str
    message: str  # e.g. "Booking dates overlap with an existing booking"
    path: list[str]


class ApiErrorBody(TypedDict, total=False):
    """Error payload on non-2xx responses."""
    errors: list[ApiErrorItem]
    message: str
    status: str
    statusCode: int


class ApiPageMeta(TypedDict, total=False):
    """meta on list endpoints."""
    isFirstPage: bool
    isLastPage: bool
    currentPage: int
    previousPage: int | None
    nextPage: int | None
    pageCount: int
    totalCount: int


class ApiEnvelope(TypedDict, total=False):
    data: Any
    meta: ApiPageMeta | dict[str, Any]


class LoginData(TypedDict, total=False):
    """data from POST /auth/login."""
    name: str
    email: str
    accessToken: str
    venueManager: bool
    avatar: dict[str, Any]
    banner: dict[str, Any]
