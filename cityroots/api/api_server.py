"""
FastAPI server for the City Roots storefront.

Serves the catalog, server-side carts, customer verification, orders and the
Razorpay payment endpoints under ``/api``.
"""
from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from cityroots import __version__
from cityroots.api.rate_limit import limiter
from cityroots.api.storefront import StorefrontServices, router, set_services
from cityroots.core.config import Settings, load_settings
from cityroots.core.exceptions import CityRootsException
from cityroots.core.logging_config import setup_logging
from cityroots.core.sentry_integration import capture_exception, init_sentry
from cityroots.integrations.cart_persistence import build_session_cart_storage
from cityroots.integrations.email_service import EmailService
from cityroots.integrations.razorpay import RazorpayClient
from cityroots.repositories import MemoryOrderRepository, MemoryProductRepository
from cityroots.services import CartService, OrderService, OtpService

logger = logging.getLogger(__name__)

DEV_ORIGINS = [
    "http://localhost:5000",
    "http://localhost:5173",
    "http://localhost:3000",
    "http://127.0.0.1:5000",
    "http://127.0.0.1:5173",
]


def build_services(settings: Settings) -> StorefrontServices:
    """Wire repositories, cart storage and integrations from settings."""
    products = MemoryProductRepository()
    carts = build_session_cart_storage(
        settings.cart_backend,
        redis_url=settings.redis_url,
        local_storage_path=settings.local_storage_path,
    )
    repo = MemoryOrderRepository()
    email = EmailService(settings.email)
    return StorefrontServices(
        settings=settings,
        products=products,
        carts=CartService(carts, products),
        orders=OrderService(repo, email),
        otp=OtpService(repo),
        razorpay=RazorpayClient(settings.razorpay),
        email=email,
    )


def create_api_app(
    settings: Settings | None = None,
    services: StorefrontServices | None = None,
) -> FastAPI:
    """
    Create the storefront FastAPI application.

    Args:
        settings: Loaded settings; read from the environment when omitted
        services: Pre-built services (tests inject fakes here)
    """
    settings = settings or (services.settings if services else load_settings())
    services = services or build_services(settings)
    set_services(services)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "City Roots API starting (env=%s, carts=%s, payments=%s)",
            settings.environment,
            settings.cart_backend,
            "on" if services.razorpay.enabled else "off",
        )
        yield
        await services.razorpay.close()
        logger.info("City Roots API shutting down")

    app = FastAPI(
        title="City Roots Storefront API",
        description="Catalog, cart, checkout and payment endpoints for City Roots",
        version=__version__,
        lifespan=lifespan,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    allowed_origins = list(settings.allowed_origins)
    if settings.is_dev:
        allowed_origins.extend(origin for origin in DEV_ORIGINS if origin not in allowed_origins)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With", "Sentry-Trace", "Baggage"],
        expose_headers=["Content-Length", "Content-Type"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        path = request.url.path
        if path.startswith("/api"):
            elapsed_ms = int((time.perf_counter() - started) * 1000)
            logger.info(f"{request.method} {path} {response.status_code} in {elapsed_ms}ms")
        return response

    @app.exception_handler(CityRootsException)
    async def handle_domain_error(request: Request, exc: CityRootsException):
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
        return JSONResponse(status_code=400, content={"detail": exc.message})

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        capture_exception(exc, path=request.url.path)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    app.include_router(router)

    @app.get("/")
    async def root():
        return {"service": "City Roots Storefront API", "version": __version__, "docs": "/api/docs"}

    return app


async def run_api_server(settings: Settings | None = None) -> None:
    """Run the API under uvicorn in the current event loop."""
    settings = settings or load_settings()
    app = create_api_app(settings)

    config = uvicorn.Config(app, host=settings.api_host, port=settings.api_port, log_level="info")
    server = uvicorn.Server(config)

    logger.info(f"Starting City Roots API on http://{settings.api_host}:{settings.api_port}")
    await server.serve()


def main() -> None:
    setup_logging()
    settings = load_settings()
    init_sentry(environment=settings.environment)
    app = create_api_app(settings)
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    main()
