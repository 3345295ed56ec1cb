"""
Foodhub API application
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from foodhub.api.v1 import auth, cart_items, merchants
from foodhub.config import settings
from foodhub.exceptions import register_exception_handlers
from foodhub.middleware.security import SecurityHeadersMiddleware, TimingMiddleware

if not settings.DEBUG:
    from foodhub.utils.logging_config import setup_logging
    setup_logging()
logger = logging.getLogger(__name__)


def _cors_origins() -> list:
    if settings.ENVIRONMENT != "production":
        return ["*"]
    origins = [origin.strip() for origin in settings.ALLOWED_ORIGINS.split(",") if origin.strip()]
    if not origins:
        logger.warning("ALLOWED_ORIGINS is empty, cross-origin requests will be rejected")
    return origins


# API docs are served in DEBUG only
app = FastAPI(
    title=settings.APP_NAME,
    description="Food delivery cart and merchant search API",
    version=settings.APP_VERSION,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    openapi_url="/openapi.json" if settings.DEBUG else None
)

app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(TimingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Process-Time"],
)

register_exception_handlers(app)

app.include_router(auth.router, prefix="/api/v1/auth", tags=["Authentication"])
app.include_router(cart_items.router, prefix="/api/v1/cart-items", tags=["Cart Items"])
app.include_router(merchants.router, prefix="/api/v1/merchants", tags=["Merchants"])


@app.get("/")
def root():
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT
    }


@app.get("/health")
def health_check():
    return {"status": "healthy", "version": settings.APP_VERSION}
