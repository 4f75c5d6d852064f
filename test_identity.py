from datetime import datetime, timedelta, timezone

import pytest
import requests
from jose import jwt
from starlette.requests import Request

from riskassess.errors import Unauthorized
from riskassess.routers.auth import authenticate_user, extract_bearer_token
from riskassess.services import identity as identity_module
from riskassess.services.identity import AuthError, IdentityProvider

SECRET = "super-secret-jwt-token-with-at-least-32-characters"


def _token(claims=None, secret=SECRET, expires_in=timedelta(hours=1)):
    payload = {
        "sub": "3f1c5b2e-7d2a-4c1e-9a51-0b7f5a9d2c11",
        "aud": "authenticated",
        "role": "authenticated",
        "email": "ada@example.com",
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    payload.update(claims or {})
    return jwt.encode({k: v for k, v in payload.items() if v is not None}, secret, algorithm="HS256")


def _request(authorization=None):
    headers = []
    if authorization is not None:
        headers.append((b"authorization", authorization.encode()))
    return Request({"type": "http", "method": "POST", "path": "/", "headers": headers})


class FakeResponse:
    def __init__(self, status_code, payload=None):
        self.status_code = status_code
        self._payload = payload or {}

    def json(self):
        return self._payload


class HtmlResponse:
    status_code = 200

    def json(self):
        raise ValueError("Expecting value: line 1 column 1 (char 0)")


# ── Local verification ──

async def test_local_token_yields_principal():
    provider = IdentityProvider("", jwt_secret=SECRET)

    principal = await provider.verify(_token())

    assert principal.id == "3f1c5b2e-7d2a-4c1e-9a51-0b7f5a9d2c11"
    assert principal.email == "ada@example.com"
    assert principal.role == "authenticated"


@pytest.mark.parametrize(
    "token",
    [
        _token(secret="another-secret-that-is-also-long-enough"),
        _token(expires_in=timedelta(minutes=-5)),
        _token({"aud": "anon"}),
        _token({"sub": None}),
        "not-a-jwt",
    ],
)
async def test_local_rejections(token):
    provider = IdentityProvider("", jwt_secret=SECRET)

    with pytest.raises(AuthError):
        await provider.verify(token)


async def test_empty_token_is_rejected():
    with pytest.raises(AuthError):
        await IdentityProvider("", jwt_secret=SECRET).verify("")


# ── Remote verification ──

async def test_remote_token_exchange(monkeypatch):
    seen = {}

    def fake_get(url, headers=None):
        seen["url"] = url
        seen["headers"] = headers
        return FakeResponse(200, {"id": "U1", "email": "u1@example.com", "role": "authenticated"})

    monkeypatch.setattr(identity_module.requests, "get", fake_get)
    provider = IdentityProvider("https://abc.supabase.co/", anon_key="anon")

    principal = await provider.verify("access-token")

    assert principal.id == "U1"
    assert seen["url"] == "https://abc.supabase.co/auth/v1/user"
    assert seen["headers"] == {"Authorization": "Bearer access-token", "apikey": "anon"}


async def test_remote_rejection(monkeypatch):
    monkeypatch.setattr(identity_module.requests, "get", lambda url, headers=None: FakeResponse(401))

    with pytest.raises(AuthError):
        await IdentityProvider("https://abc.supabase.co", anon_key="anon").verify("stale")


async def test_remote_response_without_user(monkeypatch):
    monkeypatch.setattr(identity_module.requests, "get", lambda url, headers=None: FakeResponse(200, {}))

    with pytest.raises(AuthError):
        await IdentityProvider("https://abc.supabase.co").verify("access-token")


@pytest.mark.parametrize("response", [HtmlResponse(), FakeResponse(200, [{"id": "U1"}])])
async def test_unreadable_provider_response_is_a_rejection(monkeypatch, response):
    monkeypatch.setattr(identity_module.requests, "get", lambda url, headers=None: response)

    with pytest.raises(AuthError):
        await IdentityProvider("https://abc.supabase.co").verify("access-token")


async def test_unreachable_provider(monkeypatch):
    def fake_get(url, headers=None):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(identity_module.requests, "get", fake_get)

    with pytest.raises(AuthError):
        await IdentityProvider("https://abc.supabase.co").verify("access-token")


async def test_unconfigured_provider():
    with pytest.raises(AuthError):
        await IdentityProvider("").verify("access-token")


# ── Bearer extraction ──

def test_extract_bearer_token():
    assert extract_bearer_token(_request("Bearer abc.def")) == "abc.def"
    assert extract_bearer_token(_request("bearer abc.def")) == "abc.def"


@pytest.mark.parametrize("header", [None, "", "Bearer", "Bearer   ", "Token abc", "abc"])
def test_extract_bearer_token_rejects(header):
    with pytest.raises(Unauthorized):
        extract_bearer_token(_request(header))


async def test_authenticate_user_maps_rejection_to_unauthorized():
    provider = IdentityProvider("", jwt_secret=SECRET)

    with pytest.raises(Unauthorized):
        await authenticate_user(_request("Bearer forged"), provider)

    principal = await authenticate_user(_request(f"Bearer {_token()}"), provider)
    assert principal.email == "ada@example.com"
