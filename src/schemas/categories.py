"""
Pydantic models for category payloads.
"""

from pydantic import Field

from src.schemas.common import CamelInput, CamelModel


class CategoryOut(CamelModel):
    id: int
    name: str
    slug: str
    description: str | None = None
    product_count: int = 0


class CategoryCreate(CamelInput):
    name: str = Field(..., min_length=1, max_length=255)
    slug: str | None = Field(None, max_length=255)
    description: str | None = None


class CategoryUpdate(CamelInput):
    name: str | None = Field(None, max_length=255)
    slug: str | None = Field(None, max_length=255)
    description: str | None = None
