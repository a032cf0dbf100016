import time
from typing import Annotated
from xml.sax.saxutils import escape

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bjjlib.config import settings
from bjjlib.database import get_db
from bjjlib.exceptions import AuthenticationError, LibraryError
from bjjlib.logger import api_logger, app_logger, db_logger, redis_logger
from bjjlib.routers import admin, categories, tags, thumbnails, videos
from bjjlib.services.video_query_service import VideoQueryService

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    docs_url=f"{settings.api_prefix}/docs" if not settings.is_production else None,
    redoc_url=f"{settings.api_prefix}/redoc" if not settings.is_production else None,
    openapi_url=f"{settings.api_prefix}/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
    max_age=600,  # Cache preflight requests for 10 minutes
)


@app.middleware("http")
async def log_api_requests(request: Request, call_next):
    """Log every API call as `METHOD path status in Nms`."""
    start = time.perf_counter()
    response = await call_next(request)
    if request.url.path.startswith(settings.api_prefix):
        duration_ms = (time.perf_counter() - start) * 1000
        api_logger.info(
            f"{request.method} {request.url.path} {response.status_code} in {duration_ms:.0f}ms"
        )
    return response


@app.exception_handler(LibraryError)
async def library_error_handler(request: Request, exc: LibraryError):
    """Map domain errors to 400/404/409/401."""
    response = JSONResponse(status_code=exc.status_code, content={"detail": exc.message})
    if isinstance(exc, AuthenticationError):
        response.delete_cookie(settings.session_cookie_name)
    return response


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    """Log storage failures; callers only see a generic error."""
    db_logger.error(
        f"Storage failure on {request.method} {request.url.path}: {exc}", exc_info=exc
    )
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# Include routers
app.include_router(videos.router, prefix=settings.api_prefix, tags=["Videos"])
app.include_router(tags.router, prefix=settings.api_prefix, tags=["Tags"])
app.include_router(categories.router, prefix=settings.api_prefix, tags=["Categories"])
app.include_router(admin.router, prefix=settings.api_prefix, tags=["Admin"])
app.include_router(thumbnails.router, prefix=settings.api_prefix, tags=["Thumbnails"])


@app.on_event("startup")
async def startup_event():
    """Run on application startup."""
    app_logger.info(f"Starting {settings.app_name}")
    app_logger.info(f"Environment: {settings.environment}")
    app_logger.info(f"Debug mode: {settings.debug}")

    try:
        from bjjlib.database import SessionLocal, engine, init_db
        from bjjlib.services.session_service import SessionService

        with engine.connect():
            db_logger.info("Database connection successful")

        if settings.auto_create_tables:
            init_db()

        db = SessionLocal()
        try:
            SessionService.cleanup_expired_sessions(db)
        finally:
            db.close()
    except SQLAlchemyError as e:
        db_logger.error(f"Database startup failed: {e}")

    from bjjlib.redis_client import redis_client

    if redis_client.client:
        redis_logger.info("Redis connection successful")
    else:
        redis_logger.warning("Redis not available (caching disabled)")


@app.on_event("shutdown")
async def shutdown_event():
    """Run on application shutdown."""
    app_logger.info("Shutting down application")

    from bjjlib.redis_client import redis_client

    redis_client.close()
    redis_logger.info("Redis connection closed")


def _database_status() -> str:
    from bjjlib.database import engine

    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return "connected"
    except SQLAlchemyError as e:
        db_logger.error(f"Health check database error: {e}")
        return "error"


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "environment": settings.environment,
    }


@app.get(f"{settings.api_prefix}/health")
async def health_check():
    """Detailed health check endpoint."""
    from bjjlib.redis_client import redis_client

    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": "1.0.0",
        "environment": settings.environment,
        "database": _database_status(),
        "redis": redis_client.status(),
    }


@app.get("/sitemap.xml")
def sitemap(db: Annotated[Session, Depends(get_db)]):
    """Sitemap with the home page and one entry per video (newest 1000)."""
    base_url = settings.site_url.rstrip("/")
    recent = VideoQueryService.recent_videos(db, limit=1000)
    entries = [
        "  <url>\n"
        f"    <loc>{escape(f'{base_url}/?video={video.id}')}</loc>\n"
        f"    <lastmod>{video.created_at.date().isoformat()}</lastmod>\n"
        "    <changefreq>monthly</changefreq>\n"
        "    <priority>0.8</priority>\n"
        "  </url>"
        for video in recent
    ]

    body = "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
            "  <url>",
            f"    <loc>{escape(base_url)}/</loc>",
            "    <changefreq>daily</changefreq>",
            "    <priority>1.0</priority>",
            "  </url>",
            *entries,
            "</urlset>",
        ]
    )
    return Response(content=body, media_type="application/xml")
