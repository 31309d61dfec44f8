from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import Settings, load_settings
from database import AppContext
from errors import register_exception_handlers
from auth.routes import router as auth_router
from routers.projects import router as projects_router
from routers.tasks import router as tasks_router
from routers.dashboard import router as dashboard_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    context: AppContext = app.state.context
    logger.info(f"Starting Task Tracker API ({context.settings.environment})")
    context.startup()
    try:
        yield
    finally:
        context.shutdown()
        logger.info("Task Tracker API stopped")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application with its own context (settings + store connection).

    Args:
        settings: Explicit settings; read from the environment when omitted
    """
    settings = settings or load_settings()

    # Configure logging
    logging.basicConfig(level=settings.log_level)

    app = FastAPI(
        title="Task Tracker API",
        description="Projects, tasks and dashboard statistics, scoped to the authenticated user",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.context = AppContext.from_settings(settings)

    # CORS middleware for frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    register_exception_handlers(app)

    app.include_router(auth_router)
    app.include_router(projects_router)
    app.include_router(tasks_router)
    app.include_router(dashboard_router)

    # Health check
    @app.get("/health")
    def health_check():
        return {"status": "healthy"}

    return app


app = create_app()
