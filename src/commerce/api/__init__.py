"""Storefront API package."""

from commerce.api.dependencies import install_components
from commerce.api.errors import register_error_handlers
from commerce.api.routes import router

__all__ = ["router", "install_components", "register_error_handlers"]
