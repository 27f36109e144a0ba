from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, FastAPI, Request
from starlette.middleware.cors import CORSMiddleware

from services.section_management.api.section_router import router as section_router
from services.user_management.api.auth_router import router as auth_router
from shared.config import Settings
from shared.db import Database
from shared.exceptions import register_exception_handlers
from shared.logging_config import logger, setup_logging
from shared.middleware import RequestLoggingMiddleware


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """Build the API with its own settings and database handle."""
    settings = settings or Settings()
    database = database or Database(settings.database_url)
    setup_logging(settings.log_level, json_logs=settings.is_production)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await database.connect()
        logger.info("Academic portal API started (%s)", settings.environment)
        yield
        await database.close()
        logger.info("Academic portal API stopped")

    app = FastAPI(title="Academic Portal Backend", lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    api = APIRouter(prefix="/api")

    @api.get("/health")
    def health_check(request: Request):
        return {
            "status": "OK",
            "message": "Academic portal API is running",
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "environment": request.app.state.settings.environment,
        }

    api.include_router(auth_router)
    api.include_router(section_router)
    app.include_router(api)
    return app


app = create_app()
