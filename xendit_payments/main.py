"""
Xendit payments application.

WHAT: Builds the FastAPI app that serves the Xendit invoice callback and
the shop endpoint that creates invoices.

HOW: `create_app()` wires logging, error handlers, middleware and routers;
the module-level `app` is what uvicorn serves.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from xendit_payments import __version__
from xendit_payments.api import xendit
from xendit_payments.core.config import settings
from xendit_payments.core.exception_handlers import register_exception_handlers
from xendit_payments.core.logging import configure_logging
from xendit_payments.middleware import RequestContextMiddleware


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    WHY: A factory lets tests build the app with dependency overrides
    without touching a shared instance.

    Returns:
        Configured FastAPI application instance
    """
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Xendit invoice payments and callback reconciliation",
        version=settings.VERSION,
        docs_url=f"{settings.API_PREFIX}/docs",
        redoc_url=None,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
    )

    register_exception_handlers(app)

    # Outermost middleware runs first; the request id must exist before
    # any handler logs
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["Authorization", "Content-Type"],
    )
    app.add_middleware(RequestContextMiddleware)

    @app.get("/health", tags=["health"])
    async def health_check() -> dict:
        """Liveness probe; touches neither the database nor Xendit."""
        return {"status": "healthy", "version": __version__}

    # Xendit is configured with the callback URL /payments/xendit, outside
    # the API prefix
    app.include_router(xendit.webhooks_router)
    app.include_router(xendit.shop_router, prefix=settings.API_PREFIX)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "xendit_payments.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
