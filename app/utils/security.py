"""
Delete-token utilities for the provider administration backend.

The delete form carries a short-lived token bound to the operation
(``purp="delete"``) and to the provider id (``sub``), signed with the
server-side ``CSRF_SECRET`` via python-jose. All configuration is sourced
from the application settings singleton so that secrets are never
hard-coded in source files.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from app.config import get_settings
from app.utils.constants import DELETE_TOKEN_PURPOSE

logger = logging.getLogger(__name__)


def create_delete_token(provider_id: int) -> str:
    """Create a signed token authorising the deletion of one provider.

    Args:
        provider_id: Primary key of the provider the token is bound to.

    Returns:
        A compact, URL-safe JWT string.

    Example::

        token = create_delete_token(provider.id)
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        "purp": DELETE_TOKEN_PURPOSE,
        "sub": str(provider_id),
        "iat": now,
        "exp": now + timedelta(minutes=settings.CSRF_TOKEN_MINUTES),
    }
    return jwt.encode(
        payload,
        settings.CSRF_SECRET,
        algorithm=settings.CSRF_ALGORITHM,
    )


def verify_delete_token(token: str | None, provider_id: int) -> bool:
    """Check that *token* authorises deleting the provider *provider_id*.

    Validates signature and expiration, then the purpose and subject
    claims. Never raises: any failure yields ``False``.

    Args:
        token: Token submitted with the delete form (may be missing).
        provider_id: Primary key of the provider being deleted.

    Returns:
        ``True`` only if the token was issued for this exact operation
        and provider.
    """
    if not token:
        return False

    settings = get_settings()
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.CSRF_SECRET,
            algorithms=[settings.CSRF_ALGORITHM],
        )
    except JWTError as exc:
        logger.debug("Delete token verification failed: %s", exc)
        return False

    return (
        payload.get("purp") == DELETE_TOKEN_PURPOSE
        and payload.get("sub") == str(provider_id)
    )
