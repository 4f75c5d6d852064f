"""
Authentication helpers — bearer token → Principal.

Sign-in itself happens in the identity provider's hosted UI; the API only
ever sees the resulting access token in the ``Authorization`` header.
"""

from fastapi import Request

from riskassess.errors import Unauthorized
from riskassess.services.identity import AuthError, IdentityProvider, Principal

BEARER_SCHEME = "bearer"


def extract_bearer_token(request: Request) -> str:
    """Return the credential from ``Authorization: Bearer <token>``."""
    header = request.headers.get("Authorization")
    if not header:
        raise Unauthorized()

    scheme, _, token = header.partition(" ")
    token = token.strip()
    if scheme.lower() != BEARER_SCHEME or not token:
        raise Unauthorized()
    return token


async def authenticate_user(request: Request, identity: IdentityProvider) -> Principal:
    """Verify the request's bearer token with the identity provider."""
    token = extract_bearer_token(request)
    try:
        return await identity.verify(token)
    except AuthError:
        raise Unauthorized()
