# pitch2angels/auth/dependencies.py
import logging
import secrets
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from pitch2angels.config import settings

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    x_admin_key: Optional[str] = Header(None)
) -> str:
    """
    Guard for /api/admin routes.

    With ADMIN_API_KEY unset the routes stay open; otherwise the key must be
    sent as a bearer token or in the X-Admin-Key header.
    """
    expected = settings.ADMIN_API_KEY
    if not expected:
        return "admin"

    supplied = credentials.credentials if credentials else x_admin_key
    if not supplied or not secrets.compare_digest(supplied, expected):
        logger.warning("Rejected admin request with missing or invalid key")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "Unauthorized", "message": "A valid admin key is required"},
            headers={"WWW-Authenticate": "Bearer"},
        )
    return "admin"
