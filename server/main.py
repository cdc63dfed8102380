import logging
import time
from datetime import datetime, timezone
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from app.core.config import settings
from app.core.errors import register_error_handlers
from app.core.log_config import setup_logging, log_banner
from app.core.middleware import install_middleware
from app.auth.router import router as auth_router
from app.routers.users import router as users_router
from app.routers.ai import router as ai_router

setup_logging()
logger = logging.getLogger(__name__)

STARTED_AT = time.monotonic()

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Backend for the Geeta Saathi app",
    version=settings.VERSION
)

install_middleware(app)

app.add_middleware(GZipMiddleware, minimum_size=1000)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

@app.on_event("startup")
async def on_startup():
    log_banner(logger)

@app.get("/health")
async def health():
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": time.monotonic() - STARTED_AT,
        "environment": settings.ENVIRONMENT,
    }

# Include Routers
app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
app.include_router(users_router, prefix="/api/users", tags=["users"])
app.include_router(ai_router, prefix="/api/ai", tags=["ai"])

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=settings.PORT, reload=settings.is_development,
                proxy_headers=True, forwarded_allow_ips="*")
