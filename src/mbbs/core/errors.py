"""Project-wide custom exceptions.

Routers and services raise / catch these instead of leaking raw SQLAlchemy
errors. Each maps onto one HTTP status in the API layer:

* ``*NotFoundError``      -> 404
* ``DuplicateUserError``  -> 409
* ``PermissionDeniedError`` / ``ThreadClosedError`` -> 403
"""
from __future__ import annotations


class MbbsError(Exception):
    """Base class for all custom project exceptions."""


class UserNotFoundError(MbbsError):
    pass


class CategoryNotFoundError(MbbsError):
    pass


class ThreadNotFoundError(MbbsError):
    pass


class PostNotFoundError(MbbsError):
    pass


class DuplicateUserError(MbbsError):
    """Raised when a username or email is already registered."""


class PermissionDeniedError(MbbsError):
    """Raised when a user lacks every permission accepted for an action.

    Carries the permission names that were checked so callers can log them.
    """
    def __init__(self, *permissions: str):
        self.permissions = permissions
        detail = "Permission denied"
        if permissions:
            detail += ": " + " | ".join(permissions)
        super().__init__(detail)


class ThreadClosedError(MbbsError):
    """Raised when replying to a thread whose comments are disabled."""


__all__ = [
    "MbbsError",
    "UserNotFoundError",
    "CategoryNotFoundError",
    "ThreadNotFoundError",
    "PostNotFoundError",
    "DuplicateUserError",
    "PermissionDeniedError",
    "ThreadClosedError",
]
