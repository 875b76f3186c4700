import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.logging import configure_logging
from app.core.exceptions import register_exception_handlers
from app.core.database import init_db
from app.middleware import CorrelationIdMiddleware, TimeoutMiddleware

configure_logging(settings.LOG_LEVEL, sql_echo=settings.DATABASE_ECHO)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.APP_NAME)

# Middleware: request timeout, then correlation id outermost so timeouts are logged with it
app.add_middleware(TimeoutMiddleware, timeout=settings.REQUEST_TIMEOUT_SECONDS)
app.add_middleware(CorrelationIdMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

# Route imports
from app.api.health import router as health_router
from app.api.hazards import router as hazards_router
from app.api.repairs import router as repairs_router
from app.api.workers import router as workers_router

# Register routers
app.include_router(health_router, tags=["health"])
app.include_router(hazards_router, tags=["hazards"])
app.include_router(repairs_router, tags=["repairs"])
app.include_router(workers_router, tags=["workers"])


# Exception handlers
register_exception_handlers(app)


@app.on_event("startup")
async def on_startup():
    logger.info("Starting app", extra={"app": settings.APP_NAME})

    if settings.CREATE_TABLES_ON_START:
        logger.info("CREATE_TABLES_ON_START enabled: creating tables")
        await init_db()


@app.on_event("shutdown")
async def on_shutdown():
    logger.info("Shutting down")
