import logging
from datetime import datetime, timezone
from typing import Dict, Optional
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

class AppError(Exception):
    """Operational error that is rendered as a JSON error body."""
    status_code = 500

    def __init__(self, message: str = "Internal Server Error", status_code: Optional[int] = None,
                 headers: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.headers = headers

class ValidationError(AppError):
    status_code = 400

class VerificationFailure(AppError):
    status_code = 401

    def __init__(self, message: str = "Invalid or expired OTP", **kwargs):
        super().__init__(message, **kwargs)

class UnauthorizedError(AppError):
    status_code = 401

    def __init__(self, message: str = "Unauthorized", **kwargs):
        super().__init__(message, **kwargs)

class RateLimitExceeded(AppError):
    status_code = 429

def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()

def error_body(message: str, status_code: int, path: str) -> dict:
    return {
        "error": {
            "message": message,
            "statusCode": status_code,
            "timestamp": _now_iso(),
            "path": path,
        }
    }

async def app_error_handler(request: Request, exc: AppError):
    logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.status_code, request.url.path),
        headers=exc.headers,
    )

async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    # Same flat body as the /api middleware limiter
    return JSONResponse(status_code=429, content={"error": exc.message}, headers=exc.headers)

async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request body"
    if errors:
        loc = ".".join(str(part) for part in errors[0].get("loc", ()) if part != "body")
        if loc:
            message = f"Invalid request body: {loc} {errors[0].get('msg', '')}".strip()
    return JSONResponse(status_code=400, content=error_body(message, 400, request.url.path))

async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404 and exc.detail == "Not Found":
        # Unmatched route
        return JSONResponse(
            status_code=404,
            content={
                "error": "Not Found",
                "message": f"Cannot {request.method} {request.url.path}",
                "timestamp": _now_iso(),
            },
        )
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail), exc.status_code, request.url.path),
        headers=getattr(exc, "headers", None),
    )

async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=error_body("Internal Server Error", 500, request.url.path))

def register_error_handlers(app: FastAPI):
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
