# books_reviews/core/exceptions.py
"""
Application exception hierarchy.

Every exception carries the HTTP status code and a machine-readable
error code, so the handlers in ``exception_handler`` can render them
without a lookup table.
"""

from typing import Any, Dict, Optional


class BooksReviewsException(Exception):
    """Base exception for all application errors."""

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"
    default_detail: str = "An unexpected error occurred."

    def __init__(
        self,
        detail: Optional[str] = None,
        *,
        resource_type: Optional[str] = None,
        resource_id: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        if detail is None and resource_type is not None:
            detail = self._describe(resource_type, resource_id)
        self.detail = detail or self.default_detail
        self.resource_type = resource_type
        self.resource_id = resource_id
        self.headers = headers
        super().__init__(self.detail)

    def _describe(self, resource_type: str, resource_id: Optional[Any]) -> str:
        return self.default_detail

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"detail": self.detail, "error_code": self.error_code}
        if self.resource_type:
            body["resource_type"] = self.resource_type
        return body


class ResourceNotFound(BooksReviewsException):
    status_code = 404
    error_code = "RESOURCE_NOT_FOUND"
    default_detail = "The requested resource was not found."

    def _describe(self, resource_type: str, resource_id: Optional[Any]) -> str:
        if resource_id is None:
            return f"{resource_type} not found."
        return f"{resource_type} with id {resource_id} not found."


class ValidationError(BooksReviewsException):
    status_code = 422
    error_code = "VALIDATION_ERROR"
    default_detail = "The request could not be validated."


class InternalServerError(BooksReviewsException):
    status_code = 500
    error_code = "INTERNAL_ERROR"


class CacheUnavailable(BooksReviewsException):
    """Raised when the cache store cannot be read or written."""

    status_code = 503
    error_code = "CACHE_UNAVAILABLE"
    default_detail = "The cache store is unavailable."
