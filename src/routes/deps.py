"""FastAPI dependencies: services bound to the application's resources, auth and rate limiting."""

import logging
from typing import Any

import redis
from fastapi import Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.db.postgres_client import Database
from src.services.admin_service import AdminService
from src.services.auth_service import AuthService
from src.services.catalog_service import CatalogService
from src.services.click_tracking_service import ClickTrackingService
from src.services.store_service import StoreService
from src.utils.errors import RateLimitError

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def client_ip(request: Request) -> str | None:
    return request.client.host if request.client else None


def get_db(request: Request) -> Database:
    return request.app.state.db


def get_catalog_service(db: Database = Depends(get_db)) -> CatalogService:
    return CatalogService(db)


def get_click_tracking_service(db: Database = Depends(get_db)) -> ClickTrackingService:
    return ClickTrackingService(db)


def get_store_service(db: Database = Depends(get_db)) -> StoreService:
    return StoreService(db)


def get_admin_service(db: Database = Depends(get_db)) -> AdminService:
    return AdminService(db)


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def require_admin(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> dict[str, Any]:
    """Resolve the bearer token into admin claims or fail with 401/403."""
    token = credentials.credentials if credentials else None
    return auth_service.require_admin(token)


async def enforce_rate_limit(request: Request):
    """Per-client request budget, skipped when Redis is not configured."""
    redis_client = getattr(request.app.state, "redis_client", None)
    if redis_client is None:
        return

    client_id = client_ip(request) or "anonymous"
    try:
        allowed = await run_in_threadpool(redis_client.rate_limit_check, client_id, "api")
    except redis.RedisError as e:
        logger.warning(f"Rate limit check skipped, Redis unavailable: {e}")
        return

    if not allowed:
        raise RateLimitError("Try again in a few minutes")
