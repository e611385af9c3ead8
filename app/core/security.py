"""HTTP Basic authentication for the candidate endpoints."""

from __future__ import annotations

import logging
import secrets

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from app.core.config import settings

logger = logging.getLogger(__name__)

security = HTTPBasic()


def require_basic_auth(
    credentials: HTTPBasicCredentials = Depends(security),
) -> str:
    """Validate the request credentials and return the username.

    Raises ``HTTPException(401)`` with a ``WWW-Authenticate`` challenge when
    the username or password does not match the configured pair.
    """
    username_ok = secrets.compare_digest(
        credentials.username.encode("utf-8"),
        settings.BASIC_AUTH_USERNAME.encode("utf-8"),
    )
    password_ok = secrets.compare_digest(
        credentials.password.encode("utf-8"),
        settings.BASIC_AUTH_PASSWORD.encode("utf-8"),
    )
    if not (username_ok and password_ok):
        logger.warning("basic_auth_rejected", extra={"username": credentials.username})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Basic"},
        )
    return credentials.username
