"""
Shop API - Custom Exceptions
=============================
Business-level exceptions that can be caught and converted to HTTP responses.
"""

from fastapi import status


class ShopError(Exception):
    """Base exception for all business logic errors."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "An internal error occurred."):
        self.message = message
        super().__init__(self.message)


class InvalidArgumentError(ShopError):
    """Raised for malformed requests: bad quantities, duplicate ids in one batch."""
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(ShopError):
    """Raised when a requested resource doesn't exist."""
    status_code = status.HTTP_404_NOT_FOUND


class AuthenticationError(ShopError):
    """Raised when authentication fails."""
    status_code = status.HTTP_401_UNAUTHORIZED


class ConflictError(ShopError):
    """Raised when a write collides with a concurrent change (unique constraint)."""
    status_code = status.HTTP_409_CONFLICT
