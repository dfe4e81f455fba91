"""Admin routes. Everything except login requires an admin bearer token."""

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, Query, status

from src.routes.deps import get_admin_service, get_auth_service, require_admin
from src.schemas import (
    CategoryCreate,
    CategoryUpdate,
    LoginRequest,
    ProductCreate,
    ProductUpdate,
    StoreCreate,
    StoreUpdate,
)
from src.services.admin_service import AdminService
from src.services.auth_service import AuthService

router = APIRouter(prefix="/api/admin", tags=["admin"])
protected = APIRouter(dependencies=[Depends(require_admin)])


@router.post("/login")
def login(payload: LoginRequest, auth_service: AuthService = Depends(get_auth_service)):
    """Exchange the admin password for a token."""
    token = auth_service.login(payload.password)
    return {"success": True, "message": "Login successful", "data": token}


@protected.get("/test-token")
def test_token(claims: dict[str, Any] = Depends(require_admin)):
    return {
        "success": True,
        "message": "Token is valid",
        "data": {"user": claims, "timestamp": datetime.now(timezone.utc).isoformat()},
    }


@protected.get("/dashboard")
def dashboard(service: AdminService = Depends(get_admin_service)):
    return {"success": True, "data": service.dashboard()}


@protected.get("/reports/clicks")
def clicks_report(service: AdminService = Depends(get_admin_service)):
    return {"success": True, "data": service.clicks_report()}


# Products


@protected.get("/products")
def list_products(
    store_id: str | None = Query(None, alias="storeId"),
    service: AdminService = Depends(get_admin_service),
):
    return {"success": True, "data": service.list_products(store_id)}


@protected.post("/products", status_code=status.HTTP_201_CREATED)
def create_product(payload: ProductCreate, service: AdminService = Depends(get_admin_service)):
    return {"success": True, "message": "Product created", "data": service.create_product(payload)}


@protected.put("/products/{product_id}")
def update_product(product_id: str, payload: ProductUpdate, service: AdminService = Depends(get_admin_service)):
    return {"success": True, "message": "Product updated", "data": service.update_product(product_id, payload)}


@protected.delete("/products/{product_id}")
def delete_product(product_id: str, service: AdminService = Depends(get_admin_service)):
    service.delete_product(product_id)
    return {"success": True, "message": "Product deleted"}


# Stores


@protected.get("/stores")
def list_stores(service: AdminService = Depends(get_admin_service)):
    return {"success": True, "data": service.list_stores()}


@protected.post("/stores", status_code=status.HTTP_201_CREATED)
def create_store(payload: StoreCreate, service: AdminService = Depends(get_admin_service)):
    return {"success": True, "message": "Store created", "data": service.create_store(payload)}


@protected.put("/stores/{store_id}")
def update_store(store_id: str, payload: StoreUpdate, service: AdminService = Depends(get_admin_service)):
    return {"success": True, "message": "Store updated", "data": service.update_store(store_id, payload)}


@protected.delete("/stores/{store_id}")
def delete_store(store_id: str, service: AdminService = Depends(get_admin_service)):
    service.delete_store(store_id)
    return {"success": True, "message": "Store deleted"}


# Categories


@protected.get("/categories")
def list_categories(service: AdminService = Depends(get_admin_service)):
    return {"success": True, "data": service.list_categories()}


@protected.post("/categories", status_code=status.HTTP_201_CREATED)
def create_category(payload: CategoryCreate, service: AdminService = Depends(get_admin_service)):
    return {"success": True, "message": "Category created", "data": service.create_category(payload)}


@protected.put("/categories/{category_id}")
def update_category(category_id: str, payload: CategoryUpdate, service: AdminService = Depends(get_admin_service)):
    return {"success": True, "message": "Category updated", "data": service.update_category(category_id, payload)}


@protected.delete("/categories/{category_id}")
def delete_category(category_id: str, service: AdminService = Depends(get_admin_service)):
    service.delete_category(category_id)
    return {"success": True, "message": "Category deleted"}


router.include_router(protected)
