"""Exception-to-response mapping for the storefront API.

Protean's FastAPI integration covers domain validation errors; the handlers
here add the storefront's own errors. Responses always carry an ``error``
key, and server-side failures never echo internal details.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError
from protean.integrations.fastapi import register_exception_handlers

from commerce.exceptions import AdminAccessError, AuthenticationError, NotFoundError, ProcessingError


async def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": exc.message})


async def _object_not_found(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": "Not found"})


async def _webhook_rejected(request: Request, exc: AuthenticationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": f"Webhook Error: {exc.message}"})


async def _processing_failed(request: Request, exc: ProcessingError) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": exc.message})


async def _admin_refused(request: Request, exc: AdminAccessError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def _invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"field": ".".join(str(part) for part in error["loc"][1:]), "message": error["msg"]} for error in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"error": "Invalid request", "details": details})


def register_error_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)

    app.add_exception_handler(NotFoundError, _not_found)
    app.add_exception_handler(ObjectNotFoundError, _object_not_found)
    app.add_exception_handler(AuthenticationError, _webhook_rejected)
    app.add_exception_handler(ProcessingError, _processing_failed)
    app.add_exception_handler(AdminAccessError, _admin_refused)
    app.add_exception_handler(RequestValidationError, _invalid_request)
