# backend/place_search/core/exceptions.py
"""
Domain-specific exceptions for the place search service.

These are raised by the service layer and converted to HTTP responses at the
route layer. Provider failures never surface as exceptions; only caller input
problems and missing lookup targets do.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """Raised when caller input is malformed (e.g. a missing or short query)."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    """Raised when a requested place cannot be resolved."""

    status_code = status.HTTP_404_NOT_FOUND


class ServiceUnavailableException(DomainException):
    """Raised when a lookup needs an upstream that is not configured."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
