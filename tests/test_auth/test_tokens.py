# tests/test_auth/test_tokens.py

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from jose import jwt
from starlette.requests import Request

from moviereview.core.config import settings
from moviereview.core.exceptions import InvalidTokenException
from moviereview.core.jwt import decode_access_token, decode_token, get_bearer_token
from moviereview.core.security import create_access_token
from moviereview.schemas.enums import Role


def _claims(**overrides):
    now = datetime.now(timezone.utc)
    claims = {
        "sub": "alice",
        "role": "USER",
        "exp": now + timedelta(minutes=5),
        "iat": now,
        "nbf": now,
        "jti": str(uuid4()),
        "token_type": "access",
    }
    claims.update(overrides)
    return {k: v for k, v in claims.items() if v is not None}


def _sign(claims, key=None):
    return jwt.encode(claims, key or settings.JWT_SECRET_KEY.get_secret_value(), algorithm=settings.JWT_ALGORITHM)


def _request(authorization=None) -> Request:
    headers = [] if authorization is None else [(b"authorization", authorization.encode())]
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers})


def test_access_token_round_trip():
    token = create_access_token("alice", Role.ADMIN, user_id=7)

    payload = decode_access_token(token)

    assert payload.sub == "alice"
    assert payload.role == Role.ADMIN
    assert payload.uid == 7
    assert payload.is_admin
    assert payload.token_type == "access"


def test_expired_token_is_rejected():
    token = create_access_token("alice", Role.USER, expires_delta=timedelta(seconds=-30))

    with pytest.raises(InvalidTokenException) as exc_info:
        decode_token(token)

    assert exc_info.value.status_code == 401
    assert exc_info.value.detail == "Token has expired."
    assert exc_info.value.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.parametrize(
    "token",
    [
        "not-a-jwt",
        "a.b.c",
        _sign(_claims(), key="some-other-secret"),
        "",
    ],
)
def test_malformed_or_forged_tokens_are_rejected(token):
    with pytest.raises(InvalidTokenException):
        decode_token(token)


@pytest.mark.parametrize(
    "overrides",
    [
        {"sub": None},
        {"jti": None},
        {"role": "SUPERUSER"},
        {"role": None},
        {"token_type": "refresh"},
    ],
)
def test_tokens_missing_required_claims_are_rejected(overrides):
    with pytest.raises(InvalidTokenException):
        decode_access_token(_sign(_claims(**overrides)))


def test_role_claim_is_case_insensitive():
    assert decode_access_token(_sign(_claims(role="admin"))).role == Role.ADMIN


def test_bearer_token_extraction():
    assert get_bearer_token(_request("Bearer abc.def.ghi")) == "abc.def.ghi"
    assert get_bearer_token(_request("bearer   xyz")) == "xyz"


@pytest.mark.parametrize("header", [None, "Basic dXNlcjpwYXNz", "Bearer", "Bearer   "])
def test_bad_authorization_headers(header):
    with pytest.raises(InvalidTokenException):
        get_bearer_token(_request(header))
