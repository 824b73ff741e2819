"""
User Service FastAPI Application

Main entry point for the user API.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Common library imports
from common.database import MongoDB
from common.storage import BlobStore, GridFSBlobStore, LocalBlobStore
from common.utils import error_response, success_response
from common.utils.exceptions import APIException, ServiceError, to_api_exception

# App-specific imports
from users.config import settings
from users.dependencies import init_user_services
from users.repository import MongoUserRepository
from users.router import router as users_router, storage_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)


# =============================================================================
# Database Instance
# =============================================================================
main_db = MongoDB()


def build_blob_store(db) -> BlobStore:
    """Create the blob store selected by STORAGE_BACKEND."""
    if settings.STORAGE_BACKEND == "gridfs":
        return GridFSBlobStore(
            db,
            bucket_name=settings.STORAGE_BUCKET,
            base_url=settings.PUBLIC_URL,
        )
    return LocalBlobStore(root=settings.STORAGE_ROOT, base_url=settings.PUBLIC_URL)


# =============================================================================
# Application Lifespan
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown tasks like database connections
    and service initialization.
    """
    logger.info("Starting User API...")
    settings.validate_required()

    await main_db.connect(
        uri=settings.MONGODB_URI,
        database_name=settings.MONGODB_DATABASE,
    )

    repository = MongoUserRepository(main_db.db)
    await repository.ensure_indexes()

    blob_store = build_blob_store(main_db.db)
    init_user_services(
        repository=repository,
        blob_store=blob_store,
        image_namespace=settings.USER_IMAGE_NAMESPACE,
    )
    logger.info(f"User services initialized (storage: {settings.STORAGE_BACKEND})")

    yield

    logger.info("Shutting down User API...")
    await main_db.disconnect()


# =============================================================================
# FastAPI Application
# =============================================================================
app = FastAPI(
    title="User API",
    description="User records with optional image attachments",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.is_development() else None,
    redoc_url="/redoc" if settings.is_development() else None,
)

# =============================================================================
# CORS Middleware
# =============================================================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Error Handling
# =============================================================================
@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException):
    """Render HTTP errors in the standard error response shape."""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(exc.message, code=exc.code, details=exc.details, errors=exc.errors),
        headers=exc.headers,
    )


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    """Translate domain errors into HTTP errors."""
    api_exc = to_api_exception(exc)
    if api_exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code}: {exc.message}")
    return await api_exception_handler(request, api_exc)


# =============================================================================
# Include Routers
# =============================================================================
API_PREFIX = "/api"

app.include_router(users_router, prefix=API_PREFIX)
app.include_router(storage_router)


# =============================================================================
# Health Check Endpoint
# =============================================================================
@app.get("/health", tags=["Health"])
async def health():
    """
    Health check endpoint.

    Returns the status of the API and database connection.
    """
    return success_response({
        "status": "ok",
        "version": "1.0.0",
        "database": main_db.is_connected,
        "storage": settings.STORAGE_BACKEND,
    })


# =============================================================================
# Run with Uvicorn
# =============================================================================
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development(),
    )
