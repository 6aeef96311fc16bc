"""
Shared request dependencies.
"""

from typing import Optional

from fastapi import Header, Query

from wing.services.base import InvalidArgumentError


def get_owner_id(x_user_id: Optional[str] = Header(default=None, alias="X-User-Id")) -> str:
    """Caller identity. Every graph read/write is scoped by it."""
    owner_id = (x_user_id or "").strip()
    if not owner_id:
        raise InvalidArgumentError("API", "X-User-Id header is required")
    return owner_id


def get_domestic_flag(is_domestic: Optional[str] = Query(default=None, alias="isDomestic")) -> bool:
    # Only the literal string "true" selects the domestic path.
    return is_domestic == "true"
