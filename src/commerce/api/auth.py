"""Admin API key check for catalog management routes."""

import secrets

import structlog
from fastapi import Depends, Header

from commerce.api.dependencies import get_settings
from commerce.config import StoreSettings
from commerce.exceptions import AdminAccessError

logger = structlog.get_logger(__name__)


def require_admin_key(
    authorization: str = Header(default=""),
    settings: StoreSettings = Depends(get_settings),
) -> None:
    """Require ``Authorization: Bearer <ADMIN_API_KEY>``.

    Without a configured key, admin routes are refused in production and left
    open everywhere else so local development needs no setup.
    """
    if not settings.admin_api_key:
        if settings.is_production:
            logger.error("admin_key_not_configured")
            raise AdminAccessError("Admin access not configured", status_code=503)
        return

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not secrets.compare_digest(token.strip(), settings.admin_api_key):
        logger.warning("admin_key_rejected")
        raise AdminAccessError("Unauthorized", status_code=401)
