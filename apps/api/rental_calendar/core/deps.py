"""Shared request dependencies."""
from __future__ import annotations

from fastapi import Header, HTTPException, status


def get_acting_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """Return the caller's user id as forwarded by the authentication gateway."""

    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing X-User-Id header")
    return x_user_id.strip()
