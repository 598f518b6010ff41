"""Storefront FastAPI application.

Serves the commerce API under /api/ecommerce and the question-answering stub
under /api/ask-ai. Commerce requests are wrapped in the Protean domain context.

Usage:
    uvicorn app:create_app --factory --app-dir src --host 0.0.0.0 --port 3000
    python src/app.py          # same, honouring HOST and PORT

PROTEAN_ENV selects the config overlay in commerce/domain.toml and the
environment-specific behaviour in StoreSettings.
"""

from datetime import UTC, datetime
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from assistant.api import router as assistant_router
from commerce.api import install_components, register_error_handlers
from commerce.api import router as commerce_router
from commerce.config import StoreSettings
from commerce.domain import commerce
from commerce.gateway.port import PaymentGateway
from commerce.utils.logging import add_context, clear_context

logger = structlog.get_logger(__name__)

COMMERCE_PREFIX = "/api/ecommerce"


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = "Not found" if exc.status_code == 404 else exc.detail
    return JSONResponse(status_code=exc.status_code, content={"error": message}, headers=exc.headers)


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", path=request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(
    settings: StoreSettings | None = None,
    gateway: PaymentGateway | None = None,
    initialize_domain: bool = True,
) -> FastAPI:
    """Build the application.

    ``initialize_domain`` is switched off by callers that have already
    initialized the commerce domain themselves.
    """
    settings = settings or StoreSettings.from_env()
    if initialize_domain:
        commerce.init()

    app = FastAPI(
        title="Storefront API",
        description="Product catalog, hosted checkout and payment reconciliation",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.allowed_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        """Bind request details for logging; push the domain context for commerce routes."""
        clear_context()
        add_context(request_id=request.headers.get("x-request-id") or uuid4().hex, path=request.url.path)

        if request.url.path.startswith(COMMERCE_PREFIX):
            with commerce.domain_context():
                return await call_next(request)
        return await call_next(request)

    install_components(app, settings, gateway)
    register_error_handlers(app)
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(Exception, _unhandled_error)

    app.include_router(commerce_router)
    app.include_router(assistant_router)

    @app.get("/health")
    async def health():
        return JSONResponse(content={"status": "ok", "timestamp": datetime.now(UTC).isoformat()})

    logger.info(
        "app_created",
        environment=settings.environment,
        payment_gateway=settings.payment_gateway,
        allowed_origins=list(settings.allowed_origins),
    )
    return app


def main():
    import os

    import uvicorn

    uvicorn.run(create_app(), host=os.getenv("HOST", "0.0.0.0"), port=int(os.getenv("PORT", "3000")))


if __name__ == "__main__":
    main()
