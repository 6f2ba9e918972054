from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional
import logging

from blog_api.core.config import settings
from blog_api.core.exceptions import BlogAPIError, ErrorKind
from blog_api.core.storage import ImageStore
from blog_api.database.engine import Database
from blog_api.routers import blogs, images
from blog_api.schemas.common import ErrorResponse

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting application...")

    database = Database(
        settings.database_url,
        echo=settings.DB_ECHO,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_recycle=settings.DB_POOL_RECYCLE,
    )
    database.connect()
    if not database.ping():
        database.dispose()
        raise RuntimeError("Database connection failed")
    logger.info("✓ Connected to database")

    database.create_tables()
    logger.info("✓ Database tables initialized")

    app.state.database = database
    app.state.image_store = ImageStore(
        upload_dir=settings.UPLOAD_DIR,
        url_prefix=settings.UPLOAD_URL_PREFIX,
        max_file_size=settings.MAX_FILE_SIZE,
        allowed_types=settings.ALLOWED_IMAGE_TYPES,
    )
    logger.info(f"✓ Image store ready at {settings.UPLOAD_DIR}")

    logger.info("Application startup complete")

    yield

    logger.info("Application shutdown initiated...")
    database.dispose()
    logger.info("✓ Database connections closed")
    logger.info("Application shutdown complete")


app = FastAPI(
    title="Blog API",
    description="CRUD API for blog posts with cover image uploads",
    version="1.0.0",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_origin_regex=settings.CORS_ORIGIN_REGEX,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ========================================
# ERROR HANDLERS
# ========================================

def error_response(status_code: int, message: str, error: Optional[str] = None, path: Optional[str] = None) -> JSONResponse:
    body = ErrorResponse(
        message=message,
        error=None if settings.is_production else error,
        path=path,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def first_error_message(errors: list) -> str:
    """Pick a readable message out of a pydantic error list."""
    if not errors:
        return "Invalid request"
    err = errors[0]
    cause = err.get("ctx", {}).get("error")
    if cause is not None:
        return str(cause)
    location = ".".join(str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path"))
    return f"{location}: {err['msg']}" if location else err["msg"]


@app.exception_handler(BlogAPIError)
async def blog_api_error_handler(request: Request, exc: BlogAPIError):
    if exc.kind == ErrorKind.storage:
        logger.error(f"Storage error on {request.method} {request.url.path}: {exc.message} ({exc.detail})")
        return error_response(exc.status_code, exc.message, error=exc.detail)
    return error_response(exc.status_code, exc.message)


@app.exception_handler(ValidationError)
async def schema_validation_error_handler(request: Request, exc: ValidationError):
    return error_response(400, first_error_message(exc.errors()))


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    return error_response(400, first_error_message(list(exc.errors())))


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception(f"Database error on {request.method} {request.url.path}", exc_info=exc)
    return error_response(500, "Database operation failed", error=str(exc))


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404 and exc.detail == "Not Found":
        return error_response(404, "Route not found", path=request.url.path)
    return error_response(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return error_response(500, "Internal server error", error=str(exc))


# Include routers
app.include_router(blogs.router, prefix=settings.API_PREFIX)
app.include_router(images.router, prefix=settings.API_PREFIX)

# Uploaded cover images
app.mount(
    settings.UPLOAD_URL_PREFIX,
    StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False),
    name="uploads",
)


@app.get(f"{settings.API_PREFIX}/health")
def health_check(request: Request):
    database: Optional[Database] = getattr(request.app.state, "database", None)
    return {
        "success": True,
        "message": "Blog API is running successfully",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": "connected" if database is not None and database.ping() else "unavailable",
    }


@app.get("/")
def read_root():
    return {
        "success": True,
        "message": "Welcome to Blog API",
        "version": "1.0.0",
        "endpoints": {
            "health": f"{settings.API_PREFIX}/health",
            "blogs": f"{settings.API_PREFIX}/blogs",
            "single blog": f"{settings.API_PREFIX}/blogs/{{id}}",
            "image info": f"{settings.API_PREFIX}/image/{{filename}}",
            "uploads": f"{settings.UPLOAD_URL_PREFIX}/{{filename}}",
        },
        "docs": "/docs",
    }
