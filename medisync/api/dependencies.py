"""
Shared route dependencies
"""
import re
from typing import Optional

from fastapi import Header, HTTPException, status

from medisync.config import settings
from medisync.database import get_db
from medisync.services.gemini_service import get_gemini_service
from medisync.services.storage_service import get_storage_service

__all__ = ["get_db", "get_current_owner", "get_gemini_service", "get_storage_service"]

# Owner ids become a blob key segment
OWNER_ID_PATTERN = re.compile(r"^[A-Za-z0-9_.@-]{1,255}$")


def get_current_owner(x_user_id: Optional[str] = Header(None)) -> str:
    """
    Owner id scoping every stored row

    Taken from the X-User-Id header set by the fronting identity layer;
    falls back to DEMO_USER_ID when absent.
    """
    if not x_user_id or not x_user_id.strip():
        return settings.DEMO_USER_ID

    owner = x_user_id.strip()
    if not OWNER_ID_PATTERN.match(owner) or ".." in owner:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid user id")
    return owner
