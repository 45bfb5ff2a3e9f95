from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from redis.asyncio import Redis
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text

from app.admin.routes import admin as admin_routes
from app.auth.routes import auth, users
from app.commerce.routes import cart, orders
from app.core import redis as redis_module
from app.core.config import settings
from app.core.exceptions import register_exception_handlers
from app.core.log_config import RequestLoggingMiddleware, setup_logging
from app.core.rate_limit import limiter
from app.courses.routes import certificates, courses, progress, questions, reviews
from app.db import base  # noqa: F401  registers every model on Base.metadata
from app.db.session import SessionLocal
from app.instructors.routes import instructor, instructors
from app.notifications.routes import notifications as notifications_routes

setup_logging()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info("connecting_to_redis")
    redis_module.redis_client = Redis.from_url(
        settings.REDIS_URL, decode_responses=True, encoding="utf-8"
    )

    try:
        if redis_module.redis_client:
            await redis_module.redis_client.ping()
            logger.info("redis_connected")
    except Exception as e:
        logger.error("redis_connection_failed", error=str(e))

    yield

    logger.info("closing_redis")
    if redis_module.redis_client:
        await redis_module.redis_client.close()
    logger.info("redis_closed")


app = FastAPI(
    title=settings.PROJECT_NAME,
    debug=settings.DEBUG,
    lifespan=lifespan,
    description="Backend API for the LVUP EDU fitness education marketplace",
    version="1.0.0",
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]
register_exception_handlers(app, debug=settings.DEBUG)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(auth.router, prefix=f"{settings.API_V1_PREFIX}/auth", tags=["authentication"])
app.include_router(users.router, prefix=f"{settings.API_V1_PREFIX}/users", tags=["users"])

app.include_router(courses.router, prefix=settings.API_V1_PREFIX, tags=["courses"])
app.include_router(progress.router, prefix=settings.API_V1_PREFIX, tags=["progress"])
app.include_router(certificates.router, prefix=settings.API_V1_PREFIX, tags=["certificates"])
app.include_router(reviews.router, prefix=settings.API_V1_PREFIX, tags=["reviews"])
app.include_router(questions.router, prefix=settings.API_V1_PREFIX, tags=["questions"])

app.include_router(instructors.router, prefix=settings.API_V1_PREFIX, tags=["instructors"])
app.include_router(instructor.router, prefix=settings.API_V1_PREFIX, tags=["instructor"])

app.include_router(cart.router, prefix=settings.API_V1_PREFIX, tags=["cart"])
app.include_router(orders.router, prefix=settings.API_V1_PREFIX, tags=["orders"])

app.include_router(
    notifications_routes.router, prefix=settings.API_V1_PREFIX, tags=["notifications"]
)

app.include_router(admin_routes.router, prefix=f"{settings.API_V1_PREFIX}/admin", tags=["admin"])


@app.get("/")
async def root() -> dict[str, str]:
    return {"message": "LVUP EDU API", "version": "1.0.0", "status": "running"}


@app.get("/health")
async def health_check() -> dict[str, str]:
    redis_status = "unknown"
    db_status = "unknown"

    try:
        if redis_module.redis_client:
            await redis_module.redis_client.ping()
            redis_status = "healthy"
    except Exception:
        redis_status = "unhealthy"

    try:
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
            db_status = "healthy"
        finally:
            db.close()
    except Exception:
        db_status = "unhealthy"

    all_healthy = redis_status == "healthy" and db_status == "healthy"
    overall = "healthy" if all_healthy else "degraded"

    return {"status": overall, "redis": redis_status, "database": db_status}
