"""
Authentication dependencies for FastAPI routes.

Extracts user identity from the X-User-Id header set by the frontend after
it signs the user in.
"""
from __future__ import annotations

import logging

from fastapi import Header, HTTPException, status

logger = logging.getLogger(__name__)


async def get_current_user_id(
    x_user_id: str = Header(..., alias="X-User-Id"),
) -> str:
    """Extract the authenticated user ID from the request header. Raises 401 if blank."""
    if not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-User-Id header.",
        )
    return x_user_id.strip()
