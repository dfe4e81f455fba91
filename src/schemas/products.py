"""
Pydantic models for product payloads.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import Field, StrictInt

from src.config import MAX_DB_INT

from src.schemas.common import CamelInput, CamelModel


class StoreSummary(CamelModel):
    id: int
    name: str
    logo_url: str | None = None
    domain: str | None = None
    description: str | None = None


class CategorySummary(CamelModel):
    id: int
    name: str
    slug: str


class ProductOut(CamelModel):
    id: int
    title: str
    description: str
    price: float
    original_price: float | None = None
    image_url: str
    affiliate_url: str
    stock: int
    tags: str
    store_id: int
    clicks: int
    rating: float | None = None
    review_count: int
    sold_count: int
    is_active: bool
    free_shipping: bool
    warranty: bool
    created_at: datetime
    updated_at: datetime
    store: StoreSummary | None = None
    categories: list[CategorySummary] = []


class TrackClickRequest(CamelInput):
    product_id: StrictInt = Field(..., gt=0, le=MAX_DB_INT)


class ClickResult(CamelModel):
    product_id: int
    title: str
    total_clicks: int
    affiliate_url: str


class ProductCreate(CamelInput):
    title: str = Field(..., min_length=3, max_length=255)
    description: str = Field(..., min_length=10)
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    original_price: Decimal | None = Field(None, gt=0, max_digits=10, decimal_places=2)
    image_url: str = Field(..., min_length=1)
    affiliate_url: str = Field(..., min_length=1)
    store_id: int = Field(..., gt=0, le=MAX_DB_INT)
    stock: int = Field(0, ge=0, le=MAX_DB_INT)
    tags: str | list[str] = ""
    is_active: bool = True
    category_ids: list[int] = []
    rating: float | None = Field(None, ge=0, le=5)
    review_count: int = Field(0, ge=0, le=MAX_DB_INT)
    sold_count: int = Field(0, ge=0, le=MAX_DB_INT)
    free_shipping: bool = True
    warranty: bool = False


class ProductUpdate(CamelInput):
    """Partial update; only keys present in the request body are applied."""

    title: str | None = Field(None, min_length=3, max_length=255)
    description: str | None = Field(None, min_length=10)
    price: Decimal | None = Field(None, gt=0, max_digits=10, decimal_places=2)
    original_price: Decimal | None = Field(None, gt=0, max_digits=10, decimal_places=2)
    image_url: str | None = None
    affiliate_url: str | None = None
    store_id: int | None = Field(None, gt=0, le=MAX_DB_INT)
    stock: int | None = Field(None, ge=0, le=MAX_DB_INT)
    tags: str | list[str] | None = None
    is_active: bool | None = None
    category_ids: list[int] | None = None
    rating: float | None = Field(None, ge=0, le=5)
    review_count: int | None = Field(None, ge=0, le=MAX_DB_INT)
    sold_count: int | None = Field(None, ge=0, le=MAX_DB_INT)
    free_shipping: bool | None = None
    warranty: bool | None = None
