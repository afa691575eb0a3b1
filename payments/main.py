"""
FastAPI application entry point.
Configures routes, lifecycle events and error handlers.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from payments.api.payments import router as payments_router
from payments.config import Settings, get_settings
from payments.database import close_db, create_engine, create_session_maker, init_db
from payments.exceptions import InvalidPayload, StorageFailure
from payments.logging_config import configure_logging
from payments.services.payment_cache import PaymentCache
from payments.services.payment_recorder import PaymentRecorder
from payments.services.payment_store import PaymentStore
import logging


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application around its own engine, store and cache."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifecycle manager."""
        # Startup
        configure_logging(settings)
        logging.info(f"Starting up {settings.app_name}...")
        
        engine = create_engine(settings)
        await init_db(engine)
        
        store = PaymentStore(create_session_maker(engine))
        cache = PaymentCache(max_entries=settings.cache_max_entries)
        app.state.store = store
        app.state.cache = cache
        app.state.recorder = PaymentRecorder(store, cache)
        
        yield
        
        # Shutdown
        await close_db(engine)
        logging.info("Shutting down...")

    app = FastAPI(
        title="Idempotent Payments",
        description="Records each distinct payment payload exactly once",
        version="1.0.0",
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.state.settings = settings

    @app.exception_handler(InvalidPayload)
    async def invalid_payload_handler(request: Request, exc: InvalidPayload):
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(StorageFailure)
    async def storage_failure_handler(request: Request, exc: StorageFailure):
        logging.error(f"Storage failure on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to record payment"},
        )

    # Global Exception Handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logging.error(f"Global exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal Server Error"},
        )

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "app": settings.app_name,
            "env": settings.app_env,
        }

    @app.get("/", response_class=PlainTextResponse)
    async def read_root():
        return "Hello from the payments service!"

    app.include_router(payments_router)

    return app


app = create_app()
