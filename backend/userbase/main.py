from datetime import datetime, timezone
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from userbase.core.config import settings
from userbase.core.database import Database
from userbase.core.logging_config import configure_logging
from userbase.api.exception_handlers import register_exception_handlers
from userbase.api.routes import users

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage app lifecycle events.

    Startup: open the database handle and create tables if they don't exist
    Shutdown: dispose of the connection pool
    """
    db = Database(settings.DATABASE_URL).open()
    db.create_all()
    app.state.db = db
    logger.info(f"User service started (environment: {settings.ENVIRONMENT})")
    try:
        yield
    finally:
        db.close()
        logger.info("User service stopped")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Userbase API",
        description="User management service",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # All API routes are prefixed with /api for consistency
    app.include_router(users.router, prefix="/api")

    @app.get("/")
    async def root():
        """Root endpoint - service information"""
        return {
            "message": "User Management System",
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.get("/health")
    async def health():
        """Health check endpoint - used by monitoring/deployment tools"""
        return {"status": "healthy"}

    return app


configure_logging(settings.LOG_LEVEL)
app = create_app()


def run() -> None:
    """Start the server with uvicorn (console script: userbase-serve)"""
    import uvicorn

    uvicorn.run("userbase.main:app", host=settings.HOST, port=settings.PORT)
