"""Shared transport-side error helpers.

Transports wrap HTTP client failures into TransportError so callers see one
typed failure regardless of which httpx exception surfaced.
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx

from cogito._http import AUTH_STATUS_CODES
from cogito.errors import CogitoError, TransportError

_API_KEY_ENV_VARS: dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "claude": "CLAUDE_API_KEY",
}


def _walk_exception_chain(exc: BaseException) -> list[BaseException]:
    """Return *exc* and its ``__cause__``/``__context__`` chain, with cycle protection."""
    seen: set[int] = set()
    chain: list[BaseException] = []
    stack: list[BaseException] = [exc]
    while stack:
        cur = stack.pop()
        if id(cur) in seen:
            continue
        seen.add(id(cur))
        chain.append(cur)

        cause = cur.__cause__
        if isinstance(cause, BaseException):
            stack.append(cause)
        context = cur.__context__
        if isinstance(context, BaseException):
            stack.append(context)
    return chain


def extract_status_code(exc: BaseException) -> int | None:
    """Walk the exception chain to find an HTTP status code."""
    for e in _walk_exception_chain(exc):
        for attr in ("status_code", "status"):
            value = getattr(e, attr, None)
            if isinstance(value, int) and 100 <= value <= 599:
                return value
        response = getattr(e, "response", None)
        value = getattr(response, "status_code", None)
        if isinstance(value, int) and 100 <= value <= 599:
            return value
    return None


def extract_error_detail(exc: BaseException) -> str | None:
    """Return the provider's error message from a failed response body, if any.

    Both providers answer errors with ``{"error": {"message": "..."}}``.
    """
    response = getattr(exc, "response", None)
    if not isinstance(response, httpx.Response):
        return None
    try:
        body: Any = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    error = body.get("error")
    if isinstance(error, dict):
        message = error.get("message")
        if isinstance(message, str) and message:
            return message
    return None


def _auth_hint(provider: str, status_code: int | None) -> str | None:
    """Generate a hint for auth errors where naming the env var is useful."""
    if status_code not in AUTH_STATUS_CODES:
        return None
    env_var = _API_KEY_ENV_VARS.get(provider, "API key")
    return f"Check credentials/permissions (try setting {env_var} or Config.api_key)."


def wrap_transport_error(
    exc: BaseException,
    *,
    provider: str,
    uri: str,
    message: str | None = None,
) -> CogitoError:
    """Map httpx exceptions into TransportError with status metadata."""
    if isinstance(exc, asyncio.CancelledError):
        raise exc

    # Already one of ours; leave it alone.
    if isinstance(exc, CogitoError):
        return exc

    status_code = extract_status_code(exc)
    detail = extract_error_detail(exc)
    msg = message or f"{provider} request failed"

    status_note = f" (status={status_code})" if isinstance(status_code, int) else ""
    cause = detail or str(exc)
    return TransportError(
        f"{msg}{status_note}: {cause}" if cause else f"{msg}{status_note}",
        hint=_auth_hint(provider, status_code),
        status_code=status_code,
        provider=provider,
        uri=uri,
    )
