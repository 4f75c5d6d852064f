"""
Identity provider — verify Supabase access tokens.

Two modes:
  * local:  when SUPABASE_JWT_SECRET is set the token is decoded with
            python-jose and its ``sub`` claim becomes the principal id.
  * remote: otherwise the token is exchanged once with the provider's
            ``/auth/v1/user`` endpoint.

Either way a rejected token raises AuthError. There is no retry; the
provider's answer is authoritative.
"""

import asyncio
import logging
from typing import Optional

import requests
from jose import JWTError, jwt
from pydantic import BaseModel

from riskassess.config import settings

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """The identity provider rejected the credential."""


class Principal(BaseModel):
    """The authenticated identity behind a bearer token."""
    id: str
    email: Optional[str] = None
    role: Optional[str] = None


class IdentityProvider:
    def __init__(
        self,
        base_url: str,
        anon_key: str = "",
        jwt_secret: str = "",
        algorithm: str = "HS256",
        audience: Optional[str] = "authenticated",
    ):
        self.base_url = base_url.rstrip("/")
        self.anon_key = anon_key
        self.jwt_secret = jwt_secret
        self.algorithm = algorithm
        self.audience = audience

    async def verify(self, token: str) -> Principal:
        """Return the principal for *token* or raise AuthError."""
        if not token:
            raise AuthError("Missing access token")
        if self.jwt_secret:
            return self._decode_locally(token)
        return await asyncio.to_thread(self._fetch_user, token)

    def _decode_locally(self, token: str) -> Principal:
        options = {"verify_aud": bool(self.audience)}
        try:
            payload = jwt.decode(
                token,
                self.jwt_secret,
                algorithms=[self.algorithm],
                audience=self.audience or None,
                options=options,
            )
        except JWTError as e:
            raise AuthError(f"Invalid token: {e}") from e

        user_id = payload.get("sub")
        if not user_id:
            raise AuthError("Invalid token: missing subject")
        return Principal(id=str(user_id), email=payload.get("email"), role=payload.get("role"))

    def _fetch_user(self, token: str) -> Principal:
        if not self.base_url:
            raise AuthError("Identity provider is not configured")

        headers = {"Authorization": f"Bearer {token}"}
        if self.anon_key:
            headers["apikey"] = self.anon_key

        try:
            resp = requests.get(f"{self.base_url}/auth/v1/user", headers=headers)
        except requests.RequestException as e:
            logger.error(f"Identity provider unreachable: {e}")
            raise AuthError("Could not verify token") from e

        if resp.status_code != 200:
            raise AuthError(f"Invalid token: provider answered {resp.status_code}")

        try:
            profile = resp.json()
        except ValueError as e:
            raise AuthError("Invalid token: unreadable provider response") from e
        if not isinstance(profile, dict):
            raise AuthError("Invalid token: unreadable provider response")
        if not profile.get("id"):
            raise AuthError("Invalid token: no user in provider response")
        return Principal(id=str(profile["id"]), email=profile.get("email"), role=profile.get("role"))


_provider = IdentityProvider(
    base_url=settings.SUPABASE_URL,
    anon_key=settings.SUPABASE_ANON_KEY,
    jwt_secret=settings.SUPABASE_JWT_SECRET,
    algorithm=settings.JWT_ALGORITHM,
    audience=settings.JWT_AUDIENCE,
)


def get_identity_provider() -> IdentityProvider:
    """FastAPI dependency: the process-wide identity provider."""
    return _provider
