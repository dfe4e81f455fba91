"""Public product routes: catalog listing, lookup and click tracking."""

import logging

from fastapi import APIRouter, Depends, Query, Request

from src.routes.deps import client_ip, get_catalog_service, get_click_tracking_service
from src.schemas import TrackClickRequest
from src.services.catalog_service import CatalogService, build_catalog_query
from src.services.click_tracking_service import ClickTrackingService
from src.utils.pagination import format_pagination_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("")
async def list_products(
    q: str | None = Query(None, description="Text matched against title, description and tags"),
    store_id: str | None = Query(None, alias="storeId"),
    category_ids: list[str] | None = Query(None, alias="categoryIds"),
    page: str | None = Query(None),
    per_page: str | None = Query(None, alias="perPage"),
    service: CatalogService = Depends(get_catalog_service),
):
    """List active products with search, filters and pagination."""
    query = build_catalog_query(q=q, store_id=store_id, category_ids=category_ids, page=page, per_page=per_page)
    items, total_items = await service.list_products(query)
    return {"success": True, **format_pagination_response(items, total_items, query.page.page, query.page.per_page)}


@router.get("/categories")
def list_categories(service: CatalogService = Depends(get_catalog_service)):
    """Categories that have at least one active product."""
    categories = service.list_categories()
    return {"success": True, "data": categories, "count": len(categories)}


@router.post("/track-click")
def track_click(
    payload: TrackClickRequest,
    request: Request,
    service: ClickTrackingService = Depends(get_click_tracking_service),
):
    """Record a click on a product before redirecting to its affiliate URL."""
    result = service.track_click(payload.product_id, client_ip(request), request.headers.get("user-agent"))
    return {"success": True, "message": "Click recorded", "data": result}


@router.get("/{product_id}")
def get_product(product_id: str, service: CatalogService = Depends(get_catalog_service)):
    """Get a single active product."""
    return {"success": True, "data": service.get_product(product_id)}
