"""
Supabase auth client — session lookup, sign-in, sign-out, change events.

Talks to the GoTrue REST API under ``{SUPABASE_URL}/auth/v1``. The current
session lives in memory for the lifetime of the client object.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

import httpx
from pydantic import BaseModel

from riskassess.config import settings

logger = logging.getLogger(__name__)

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"


class AuthApiError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code


class Session(BaseModel):
    access_token: str
    refresh_token: str = ""
    token_type: str = "bearer"
    user: Dict[str, Any]


AuthCallback = Callable[[str, Optional[Session]], None]


class Subscription:
    """Handle returned by ``on_auth_state_change``."""

    def __init__(self, listeners: List[AuthCallback], callback: AuthCallback):
        self._listeners = listeners
        self.callback = callback

    def unsubscribe(self) -> None:
        if self.callback in self._listeners:
            self._listeners.remove(self.callback)


class SupabaseAuth:
    def __init__(
        self,
        url: str = settings.SUPABASE_URL,
        anon_key: str = settings.SUPABASE_ANON_KEY,
        http: Optional[httpx.AsyncClient] = None,
    ):
        self.url = url.rstrip("/")
        self.anon_key = anon_key
        self.http = http or httpx.AsyncClient()
        self._session: Optional[Session] = None
        self._listeners: List[AuthCallback] = []

    # ── HTTP helpers ──

    def _headers(self, access_token: Optional[str] = None) -> dict:
        headers = {"apikey": self.anon_key, "Content-Type": "application/json"}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    async def _request(self, method: str, path: str, access_token: Optional[str] = None, **kwargs) -> dict:
        resp = await self.http.request(
            method,
            f"{self.url}/auth/v1{path}",
            headers=self._headers(access_token),
            **kwargs,
        )
        if resp.status_code >= 400:
            try:
                body = resp.json()
                message = body.get("error_description") or body.get("msg") or body.get("message") or resp.text
            except (ValueError, AttributeError):
                message = resp.text
            raise AuthApiError(resp.status_code, message)
        if not resp.content:
            return {}
        return resp.json()

    def _emit(self, event: str, session: Optional[Session]) -> None:
        for callback in list(self._listeners):
            callback(event, session)

    # ── Public API ──

    def on_auth_state_change(self, callback: AuthCallback) -> Subscription:
        """Call *callback(event, session)* on every sign-in / sign-out."""
        self._listeners.append(callback)
        return Subscription(self._listeners, callback)

    async def get_session(self) -> Optional[Session]:
        return self._session

    async def get_user(self) -> Optional[Dict[str, Any]]:
        """Return the provider's view of the current user, or None."""
        if not self._session:
            return None
        try:
            return await self._request("GET", "/user", self._session.access_token)
        except AuthApiError as e:
            logger.info(f"Stored session rejected by provider: {e}")
            return None

    async def set_session(self, access_token: str, refresh_token: str = "") -> Session:
        """Adopt tokens handed back by the hosted sign-in UI (OAuth / magic link)."""
        user = await self._request("GET", "/user", access_token)
        session = Session(access_token=access_token, refresh_token=refresh_token, user=user)
        self._session = session
        self._emit(SIGNED_IN, session)
        return session

    async def sign_in_with_password(self, email: str, password: str) -> Session:
        data = await self._request(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        session = Session(**data)
        self._session = session
        self._emit(SIGNED_IN, session)
        return session

    async def sign_in_with_otp(self, email: str) -> None:
        """Send a magic link; the session arrives later via ``set_session``."""
        await self._request("POST", "/otp", json={"email": email, "create_user": True})

    async def sign_out(self) -> None:
        session, self._session = self._session, None
        try:
            if session:
                await self._request("POST", "/logout", session.access_token)
        finally:
            self._emit(SIGNED_OUT, None)
