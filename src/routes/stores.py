"""Public store routes."""

from fastapi import APIRouter, Depends

from src.routes.deps import get_store_service
from src.services.store_service import StoreService

router = APIRouter(prefix="/api/stores", tags=["stores"])


@router.get("")
def list_stores(service: StoreService = Depends(get_store_service)):
    """List stores with their active product counts."""
    return {"success": True, "data": service.list_stores()}


@router.get("/{store_id}")
def get_store(store_id: str, service: StoreService = Depends(get_store_service)):
    """Get a store and its active products."""
    return {"success": True, "data": service.get_store(store_id)}
