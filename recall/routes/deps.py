from __future__ import annotations

from fastapi import Depends, Header

from ..services.identity_svc import resolve_token


def bearer_token(authorization: str | None = Header(None)) -> str | None:
    """Token from an ``Authorization: Bearer <token>`` header, if any."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def current_user(token: str | None = Depends(bearer_token)) -> str:
    return resolve_token(token)
