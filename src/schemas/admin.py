"""
Pydantic models for the admin surface.
"""

from datetime import datetime

from pydantic import Field

from src.schemas.common import CamelInput, CamelModel
from src.schemas.products import ProductOut


class LoginRequest(CamelInput):
    password: str = Field(..., min_length=1)


class TokenOut(CamelModel):
    token: str
    role: str = "admin"
    expires_in: int


class DashboardStats(CamelModel):
    total_products: int
    total_stores: int
    total_clicks: int


class Dashboard(CamelModel):
    stats: DashboardStats
    recent_products: list[ProductOut]
    top_clicked_products: list[ProductOut]


class ClickReportRow(CamelModel):
    id: int
    title: str
    clicks: int
    created_at: datetime
    store_name: str


class ClickReportSummary(CamelModel):
    total_clicks: int
    total_products: int
    average_clicks: float


class ClickReport(CamelModel):
    summary: ClickReportSummary
    products: list[ClickReportRow]
