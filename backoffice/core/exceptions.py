"""
Error taxonomy for the back-office backend

Each error is an HTTPException so the handlers in backoffice.core.errors
render it with the same JSON envelope as any other HTTP error.
"""
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status


class BackofficeError(HTTPException):
    """Base class for domain errors raised by services and guards"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error"

    def __init__(self, detail: Any = None, headers: Optional[Dict[str, str]] = None):
        super().__init__(
            status_code=self.status_code,
            detail=detail if detail is not None else self.default_detail,
            headers=headers,
        )


class AuthRequired(BackofficeError):
    """No active session: the caller has to sign in"""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Authentication required"

    def __init__(self, detail: Any = None):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(BackofficeError):
    """Authenticated, but lacking the role or feature for this screen"""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Access denied"


class NotFound(BackofficeError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class Conflict(BackofficeError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict"


class BackendUnavailable(BackofficeError):
    """Database/network failure; transient, the client may retry"""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Backend temporarily unavailable"


class ValidationError(BackofficeError):
    """Malformed input, reported per field"""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_detail = "Validation error"

    def __init__(self, detail: Any = None, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(detail)
        self.errors = errors or []

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(message, errors=[{"loc": [field], "msg": message}])
