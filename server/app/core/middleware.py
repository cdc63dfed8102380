import logging
import time
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from app.core.config import settings
from app.core.rate_limiter import api_limiter, client_key

access_logger = logging.getLogger("app.access")

CONTENT_SECURITY_POLICY = "; ".join([
    "default-src 'self'",
    "style-src 'self' 'unsafe-inline'",
    "script-src 'self'",
    "img-src 'self' data: https: http:",
    "connect-src 'self'",
])

SECURITY_HEADERS = {
    "Content-Security-Policy": CONTENT_SECURITY_POLICY,
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Frame-Options": "SAMEORIGIN",
}

def install_middleware(app: FastAPI):
    # Registered innermost first: rate limiting runs inside the header and logging layers
    @app.middleware("http")
    async def rate_limit(request: Request, call_next):
        if not request.url.path.startswith("/api"):
            return await call_next(request)

        result = api_limiter.hit(client_key(request))
        if not result.allowed:
            return JSONResponse(
                status_code=429,
                content={"error": api_limiter.message},
                headers=result.headers,
            )
        response = await call_next(request)
        # A stricter router limiter may already have set these
        for name, value in result.headers.items():
            response.headers.setdefault(name, value)
        return response

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        if not settings.LOG_REQUESTS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        access_logger.info("%s %s %s %.1f ms", request.method, request.url.path, response.status_code, elapsed_ms)
        return response
