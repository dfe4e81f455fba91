"""
Init file for the Pydantic API schemas.
"""

from .admin import ClickReport, Dashboard, LoginRequest, TokenOut
from .categories import CategoryCreate, CategoryOut, CategoryUpdate
from .products import (
    CategorySummary,
    ClickResult,
    ProductCreate,
    ProductOut,
    ProductUpdate,
    StoreSummary,
    TrackClickRequest,
)
from .stores import StoreCreate, StoreDetail, StoreOut, StoreProductOut, StoreUpdate

__all__ = [
    "CategoryCreate",
    "CategoryOut",
    "CategorySummary",
    "CategoryUpdate",
    "ClickReport",
    "ClickResult",
    "Dashboard",
    "LoginRequest",
    "ProductCreate",
    "ProductOut",
    "ProductUpdate",
    "StoreCreate",
    "StoreDetail",
    "StoreOut",
    "StoreProductOut",
    "StoreSummary",
    "StoreUpdate",
    "TokenOut",
]
