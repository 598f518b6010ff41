"""Question-answering API package."""

from assistant.api.routes import router

__all__ = ["router"]
