"""
Init file for the SQLAlchemy models.
"""

from .categories import Category
from .click_tracking import ClickTracking
from .product_categories import ProductCategory
from .products import Product
from .stores import Store

__all__ = [
    "Category",
    "ClickTracking",
    "Product",
    "ProductCategory",
    "Store",
]
