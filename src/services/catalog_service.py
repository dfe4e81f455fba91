"""Public product catalog: filtered listing, single-product lookup and category index."""

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from fastapi.concurrency import run_in_threadpool
from sqlalchemy import func, or_, select
from sqlalchemy.orm import selectinload

from src.db.postgres_client import Database
from src.models import Category, Product, ProductCategory
from src.schemas import CategoryOut, ProductOut
from src.utils.errors import InvalidInputError, NotFoundError
from src.utils.pagination import PageRequest, normalize_pagination, parse_int, parse_positive_int

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogQuery:
    """Normalized catalog filters. Empty fields mean "no filter"."""

    text: str | None = None
    store_id: int | None = None
    category_ids: tuple[int, ...] = ()
    page: PageRequest = field(default_factory=lambda: normalize_pagination())


def parse_category_ids(raw: Any) -> tuple[int, ...]:
    """Accept one id, a list of ids or comma-separated ids; drop anything that is not a positive int."""
    if raw is None:
        return ()
    if isinstance(raw, (str, int)):
        raw = [raw]

    ids: list[int] = []
    for value in raw:
        pieces = value.split(",") if isinstance(value, str) else [value]
        for piece in pieces:
            number = parse_positive_int(piece)
            if number is not None and number not in ids:
                ids.append(number)
    return tuple(ids)


def build_catalog_query(
    q: str | None = None,
    store_id: Any = None,
    category_ids: Any = None,
    page: Any = None,
    per_page: Any = None,
) -> CatalogQuery:
    """Build a CatalogQuery from untrusted query-string values."""
    text = q.strip() if isinstance(q, str) else None
    return CatalogQuery(
        text=text or None,
        store_id=parse_int(store_id),
        category_ids=parse_category_ids(category_ids),
        page=normalize_pagination(page, per_page),
    )


def catalog_conditions(query: CatalogQuery) -> list:
    """WHERE predicates shared by the listing and the count query."""
    conditions = [Product.is_active.is_(True)]

    if query.text:
        conditions.append(
            or_(
                Product.title.icontains(query.text, autoescape=True),
                Product.description.icontains(query.text, autoescape=True),
                Product.tags.icontains(query.text, autoescape=True),
            )
        )

    if query.store_id is not None:
        conditions.append(Product.store_id == query.store_id)

    # Matches products holding at least one of the requested categories
    if query.category_ids:
        conditions.append(Product.categories.any(Category.id.in_(query.category_ids)))

    return conditions


def product_loader_options() -> Iterable:
    return (selectinload(Product.store), selectinload(Product.categories))


class CatalogService:
    def __init__(self, db: Database):
        self.db = db

    async def list_products(self, query: CatalogQuery) -> tuple[list[ProductOut], int]:
        """
        List active products matching the query.

        The page and the total count are fetched concurrently on separate sessions.

        Args:
            query: Normalized filters and pagination

        Returns:
            Tuple of (products on the requested page, total matching products)
        """
        items, total_items = await asyncio.gather(
            run_in_threadpool(self.fetch_page, query),
            run_in_threadpool(self.count_products, query),
        )
        return items, total_items

    def fetch_page(self, query: CatalogQuery) -> list[ProductOut]:
        stmt = (
            select(Product)
            .where(*catalog_conditions(query))
            .options(*product_loader_options())
            .order_by(Product.created_at.desc(), Product.id.desc())
            .offset(query.page.skip)
            .limit(query.page.per_page)
        )
        with self.db.session() as session:
            products = session.scalars(stmt).all()
            return [ProductOut.model_validate(product) for product in products]

    def count_products(self, query: CatalogQuery) -> int:
        stmt = select(func.count(Product.id)).where(*catalog_conditions(query))
        with self.db.session() as session:
            return session.scalar(stmt) or 0

    def get_product(self, product_id: Any) -> ProductOut:
        """Return an active product with its store and categories."""
        parsed_id = parse_positive_int(product_id)
        if parsed_id is None:
            raise InvalidInputError("The product id must be a positive integer", error="Invalid id")

        stmt = (
            select(Product)
            .where(Product.id == parsed_id, Product.is_active.is_(True))
            .options(*product_loader_options())
        )
        with self.db.session() as session:
            product = session.scalars(stmt).first()
            if product is None:
                raise NotFoundError(
                    "The requested product does not exist or is not active", error="Product not found"
                )
            return ProductOut.model_validate(product)

    def list_categories(self) -> list[CategoryOut]:
        """Categories that hold at least one active product, with that count."""
        product_count = func.count(Product.id).label("product_count")
        stmt = (
            select(Category, product_count)
            .join(ProductCategory, ProductCategory.category_id == Category.id)
            .join(Product, Product.id == ProductCategory.product_id)
            .where(Product.is_active.is_(True))
            .group_by(Category.id)
            .order_by(Category.name)
        )
        with self.db.session() as session:
            rows = session.execute(stmt).all()
            return [
                CategoryOut.model_validate(category).model_copy(update={"product_count": count})
                for category, count in rows
            ]
