"""FastAPI application for the Saturno Affiliates backend."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.config import Settings, get_settings
from src.db.postgres_client import Database
from src.db.redis_client import RedisClient
from src.routes import admin, products, stores
from src.routes.deps import enforce_rate_limit
from src.services.auth_service import AuthService
from src.utils.errors import ServiceError, map_database_error

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Configure logging
logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
logger = logging.getLogger(__name__)


def _error_response(status_code: int, error: str, message: str | None = None, details=None) -> JSONResponse:
    content = {"success": False, "error": error}
    if message is not None:
        content["message"] = message
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def register_exception_handlers(app: FastAPI, settings: Settings):
    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        return _error_response(exc.status_code, exc.error, exc.message, exc.details)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        details = [
            f"{'.'.join(str(part) for part in error['loc'][1:]) or 'body'}: {error['msg']}" for error in exc.errors()
        ]
        return _error_response(400, "Invalid data", "The request payload is invalid", details)

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
        mapped = map_database_error(exc, expose_details=settings.is_development)
        return _error_response(mapped.status, mapped.message, details=mapped.details)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and exc.detail == "Not Found":
            return _error_response(404, "Route not found", f"The route {request.method} {request.url.path} does not exist")
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return _error_response(500, "Internal server error", str(exc) if settings.is_development else "Something went wrong")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application; resources are opened in the lifespan and closed on shutdown."""
    settings = settings or get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db = Database(settings.database_url, pool_size=settings.db_pool_size, max_overflow=settings.db_max_overflow)
        db.create_tables()
        app.state.db = db

        app.state.redis_client = None
        if settings.redis_url:
            app.state.redis_client = RedisClient(
                settings.redis_url,
                max_requests=settings.rate_limit_requests,
                window_seconds=settings.rate_limit_window,
            )
        else:
            logger.info("REDIS_URL not set, rate limiting disabled")

        if not settings.admin_password or not settings.jwt_secret:
            logger.warning("ADMIN_PASSWORD or JWT_SECRET missing, admin login will fail")
        app.state.auth_service = AuthService(settings.admin_password, settings.jwt_secret, settings.jwt_expires_in)

        logger.info(f"{settings.project_name} started ({settings.environment})")
        try:
            yield
        finally:
            if app.state.redis_client is not None:
                app.state.redis_client.close()
            db.dispose()
            logger.info(f"{settings.project_name} stopped")

    app = FastAPI(
        title=settings.project_name,
        description="Affiliate product catalog with click tracking and admin management",
        version=settings.api_version,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    register_exception_handlers(app, settings)

    rate_limited = [Depends(enforce_rate_limit)]
    app.include_router(products.router, dependencies=rate_limited)
    app.include_router(stores.router, dependencies=rate_limited)
    app.include_router(admin.router, dependencies=rate_limited)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "OK",
            "service": settings.project_name,
            "version": settings.api_version,
            "environment": settings.environment,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.get("/")
    async def root():
        return {
            "message": f"Welcome to the {settings.project_name}",
            "version": settings.api_version,
            "docs": "/docs",
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=get_settings().port)
