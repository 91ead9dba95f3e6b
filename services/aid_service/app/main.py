"""FastAPI application for the Aid Service."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from libs.common.config import get_settings
from libs.common.error_handler import add_exception_handlers
from libs.common.middleware import add_observability_middleware
from libs.common.rate_limit import limiter, rate_limit_exceeded_handler
from services.aid_service.routers.admin import router as admin_router
from services.aid_service.routers.applications import router as applications_router
from services.aid_service.routers.bank_details import router as bank_details_router
from services.aid_service.routers.profile import router as profile_router
from slowapi.errors import RateLimitExceeded


def create_app() -> FastAPI:
    """Create and configure the Aid Service FastAPI app."""
    settings = get_settings()
    app = FastAPI(
        title="Aid Service",
        version="0.1.0",
        description="Financial aid applications, bank verification and admin review.",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Total-Count"],
    )
    add_observability_middleware(app)
    add_exception_handlers(app)

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "aid"}

    app.include_router(profile_router)
    app.include_router(bank_details_router)
    app.include_router(applications_router)
    app.include_router(admin_router)

    return app


app = create_app()
