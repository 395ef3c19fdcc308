"""
Authentication Dependencies

Token issuance and verification happen upstream (gateway / auth service);
requests reach this API with the authenticated user in the X-User-Id header.
"""
from fastapi import HTTPException, Header
from typing import Optional

from app.settings import get_settings

# Fixed user for local development with ALLOW_NO_AUTH=true
DEV_USER_ID = "00000000-0000-0000-0000-000000000001"


async def get_current_user_id(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id")
) -> str:
    """
    Return the caller's user ID.

    Falls back to the development user when allow_no_auth is enabled.
    """
    if x_user_id and x_user_id.strip():
        return x_user_id.strip()

    if get_settings().allow_no_auth:
        return DEV_USER_ID

    raise HTTPException(status_code=401, detail="Authentication required")
