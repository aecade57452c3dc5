"""Exception handlers rendering every failure as {success: false, error}."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from basketfx.exceptions import BasketFxError, InvalidInput

logger = logging.getLogger(__name__)


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


async def pipeline_error_handler(request: Request, exc: BasketFxError) -> JSONResponse:
    """Known pipeline failures map to their own status code."""
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return error_response(exc.message, exc.status_code)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are InvalidInput (400), not 422."""
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()) if p != 'body')}: {err.get('msg')}"
        for err in exc.errors()
    )
    message = f"Missing or invalid parameters ({details})" if details else "Missing or invalid parameters"
    return error_response(message, InvalidInput.status_code)


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything else is a 500 with a generic message; details go to the log."""
    logger.exception(f"Unhandled error in {request.method} {request.url.path}: {exc}")
    return error_response("Failed to prepare transaction", 500)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BasketFxError, pipeline_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
