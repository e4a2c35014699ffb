"""
Error handling middleware
"""
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from keygate.core.errors import KeygateError
from keygate.core.logging import logger


def error_body(message: str, error=None) -> dict:
    body = {"success": False, "message": message}
    if error is not None:
        body["error"] = error
    return body


async def gateway_error_handler(request: Request, exc: KeygateError) -> JSONResponse:
    """
    Render gateway errors as {success: false, message, error?}
    """
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"{exc.error_code}: {exc.message}",
        extra={
            "path": request.url.path,
            "status_code": exc.status_code,
            "upstream_error": exc.error
        }
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.error)
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Malformed bodies are a 400, not FastAPI's default 422
    """
    errors = [
        {"loc": list(err.get("loc", [])), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    logger.warning(
        "Validation Error",
        extra={"path": request.url.path, "errors": errors}
    )
    return JSONResponse(
        status_code=400,
        content=error_body("Invalid request data", errors)
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unexpected Error",
        extra={
            "path": request.url.path,
            "error_type": type(exc).__name__
        }
    )
    return JSONResponse(
        status_code=500,
        content=error_body("An unexpected error occurred")
    )


async def error_logging_middleware(request: Request, call_next):
    """
    Middleware for logging all errors
    """
    try:
        response = await call_next(request)
        return response
    except Exception as exc:
        logger.exception(
            "Unhandled Exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error_type": type(exc).__name__
            }
        )
        raise


def setup_error_handlers(app):
    """
    Configure error handlers for FastAPI app
    """
    app.middleware("http")(error_logging_middleware)
    app.exception_handler(KeygateError)(gateway_error_handler)
    app.exception_handler(RequestValidationError)(validation_error_handler)
    app.exception_handler(Exception)(unexpected_error_handler)
