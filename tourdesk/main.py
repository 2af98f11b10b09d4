"""Entry point for the Tourdesk FastAPI application."""

import logging

from fastapi import FastAPI

from tourdesk.api.v1 import router as v1_router
from tourdesk.core.config import settings
from tourdesk.core.database import Base, engine, verify_database_connection
from tourdesk.core.error_handlers import register_exception_handlers

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

verify_database_connection()

# Ensure database tables exist when the application starts (for development purposes).
Base.metadata.create_all(bind=engine)

app = FastAPI(title=settings.PROJECT_NAME)

register_exception_handlers(app)

app.include_router(v1_router, prefix=settings.API_PREFIX)


__all__ = ["app"]
