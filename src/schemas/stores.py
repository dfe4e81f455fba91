"""
Pydantic models for store payloads.
"""

from datetime import datetime

from pydantic import Field

from src.schemas.common import CamelInput, CamelModel


class StoreOut(CamelModel):
    id: int
    name: str
    description: str | None = None
    logo_url: str | None = None
    domain: str | None = None
    created_at: datetime
    product_count: int = 0


class StoreProductOut(CamelModel):
    id: int
    title: str
    price: float
    image_url: str
    clicks: int
    created_at: datetime


class StoreDetail(StoreOut):
    products: list[StoreProductOut] = []


class StoreCreate(CamelInput):
    name: str = Field(..., min_length=2, max_length=255)
    description: str | None = None
    logo_url: str | None = None
    domain: str | None = Field(None, max_length=255)


class StoreUpdate(CamelInput):
    name: str | None = Field(None, min_length=2, max_length=255)
    description: str | None = None
    logo_url: str | None = None
    domain: str | None = Field(None, max_length=255)
