from __future__ import annotations

import secrets
from datetime import datetime
from typing import Final
from urllib.parse import quote

from fastapi import Request
from starlette.responses import Response

from minisnap_core.errors import AuthenticationFailure, SessionInvalid
from minisnap_core.sessions import SessionRegistry

SESSION_COOKIE: Final[str] = "minisnap_session"
LOGIN_PATH: Final[str] = "/login"
DEFAULT_NEXT: Final[str] = "/admin"


def get_sessions(request: Request) -> SessionRegistry:
    return request.app.state.sessions


def extract_token_from_request(request: Request) -> str | None:
    return request.cookies.get(SESSION_COOKIE) or None


def current_session(request: Request) -> str | None:
    """Return the caller's valid session token, if any."""

    token = extract_token_from_request(request)
    if token and get_sessions(request).validate(token):
        return token
    return None


def request_target(request: Request) -> str:
    target = request.url.path
    if request.url.query:
        target += "?" + request.url.query
    return target


def login_url(next_url: str | None) -> str:
    if not next_url:
        return LOGIN_PATH
    return f"{LOGIN_PATH}?next={quote(next_url, safe='')}"


def safe_next(raw: str | None) -> str:
    """Only site-local targets are honoured after login."""

    raw = (raw or "").strip()
    if not raw.startswith("/") or raw.startswith("//"):
        return DEFAULT_NEXT
    return raw


def verify_password(provided: str, expected: str) -> None:
    """Raise AuthenticationFailure unless ``provided`` equals the admin secret."""

    if not provided or not secrets.compare_digest(
        provided.encode("utf-8"), expected.encode("utf-8")
    ):
        raise AuthenticationFailure()


def require_session(request: Request) -> str:
    """Dependency for admin routes; unauthenticated callers are sent to login."""

    token = current_session(request)
    if token is None:
        raise SessionInvalid(request_target(request))
    return token


def set_session_cookie(response: Response, token: str, expires: datetime) -> None:
    response.set_cookie(
        SESSION_COOKIE,
        token,
        expires=expires,
        path="/",
        httponly=True,
        samesite="strict",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(SESSION_COOKIE, path="/", httponly=True, samesite="strict")
