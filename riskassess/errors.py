"""
API error taxonomy.

Every failure that leaves a handler is one of these four, rendered by
``riskassess.main`` as ``{"error": <message>}``.
"""

from typing import Iterable

from fastapi import HTTPException, status

from riskassess.services.identity import AuthError

AUTH_FAILED = "Authentication failed"


class ApiError(HTTPException):
    """Base class: an HTTP status plus a fixed, non-leaking message."""

    def __init__(self, status_code: int, message: str, headers: dict = None):
        super().__init__(status_code=status_code, detail=message, headers=headers)
        self.message = message


class MethodNotAllowed(ApiError):
    def __init__(self, method: str, allow: Iterable[str]):
        super().__init__(
            status.HTTP_405_METHOD_NOT_ALLOWED,
            f"Method {method} Not Allowed",
            headers={"Allow": ", ".join(allow)},
        )


class Unauthorized(ApiError):
    def __init__(self, message: str = AUTH_FAILED):
        super().__init__(status.HTTP_401_UNAUTHORIZED, message)


class BadRequest(ApiError):
    def __init__(self, message: str):
        super().__init__(status.HTTP_400_BAD_REQUEST, message)


class InternalError(ApiError):
    def __init__(self, message: str):
        super().__init__(status.HTTP_500_INTERNAL_SERVER_ERROR, message)


def classify_failure(exc: Exception, message: str) -> ApiError:
    """
    Map an unexpected exception caught at a handler boundary.

    Identity-provider rejections become 401. Anything else whose text
    mentions "Authorization" or "token" is also treated as an auth
    failure; the rest is a generic 500 carrying *message*.
    """
    if isinstance(exc, ApiError):
        return exc
    if isinstance(exc, AuthError):
        return Unauthorized()
    text = str(exc)
    if "Authorization" in text or "token" in text:
        return Unauthorized()
    return InternalError(message)
