# moviereview/core/exceptions.py
from __future__ import annotations

"""
Movie Review API — Application Exceptions
=========================================
A small, consistent layer on top of FastAPI/Starlette's `HTTPException` so
domain services can raise typed errors and the API layer maps each one to its
HTTP status without altering semantics.

Taxonomy
--------
- `ValidationException`     → 400 (bad rating range, blank required field)
- `AuthenticationException` → 401 (bad credentials, invalid/expired token)
- `AuthorizationException`  → 403 (valid identity, insufficient privilege)
- `NotFoundException`       → 404 (referenced entity absent)
- `ConflictException`       → 409 (duplicate username/email, duplicate review)

Usage
-----
    raise NotFoundException("Movie not found with id: 42")
    raise ConflictException("User has already reviewed this movie", details={"movie_id": 42})
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status

__all__ = [
    "AppException",
    "ValidationException",
    "AuthenticationException",
    "InvalidTokenException",
    "AuthorizationException",
    "NotFoundException",
    "ConflictException",
]


# ──────────────────────────────────────────────────────────────
# 📦 Core: AppException
# ──────────────────────────────────────────────────────────────
class AppException(HTTPException):
    """Base application-level exception with optional metadata.

    Attributes
    -----------
    status_code : int
        HTTP status code.
    message : str
        Human-readable error message (serialized as `detail` as well).
    code : int
        Optional internal/typed error code. Defaults to `status_code`.
    details : dict | list | str | None
        Machine-readable details (ids, offending fields).
    headers : dict | None
        Optional headers (e.g., `{"WWW-Authenticate": "Bearer"}`).
    """

    default_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        code: Optional[int] = None,
        details: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        status_code = int(status_code or self.default_status)
        super().__init__(status_code=status_code, detail=message, headers=headers)
        self.code: int = int(code or status_code)
        self.message: str = message
        self.details: Optional[Any] = details

    def __str__(self) -> str:
        return self.message

    # ── [Helper] Canonical body fields used by handlers ───────────────────
    def to_problem(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"code": self.code}
        if self.details is not None:
            body["details"] = self.details
        return body


# ──────────────────────────────────────────────────────────────
# 🧾 Domain taxonomy
# ──────────────────────────────────────────────────────────────
class ValidationException(AppException):
    """Malformed input that the domain rejects before touching storage."""

    default_status = status.HTTP_400_BAD_REQUEST


class AuthenticationException(AppException):
    """Bad credentials or an unusable bearer token."""

    default_status = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Could not validate credentials", **kwargs: Any) -> None:
        kwargs.setdefault("headers", {"WWW-Authenticate": "Bearer"})
        super().__init__(message, **kwargs)


class InvalidTokenException(AuthenticationException):
    """Raised for malformed, tampered or expired tokens."""

    def __init__(self, message: str = "Invalid or expired token", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class AuthorizationException(AppException):
    """Authenticated caller without the privilege the operation needs."""

    default_status = status.HTTP_403_FORBIDDEN


class NotFoundException(AppException):
    default_status = status.HTTP_404_NOT_FOUND


class ConflictException(AppException):
    default_status = status.HTTP_409_CONFLICT
