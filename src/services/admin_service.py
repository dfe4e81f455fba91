"""Admin management of products, stores and categories, plus click analytics."""

import logging
import re
from typing import Any

from sqlalchemy import delete, func, or_, select
from sqlalchemy.orm import Session

from src.config import MAX_CATEGORIES_PER_PRODUCT, MAX_DB_INT
from src.db.postgres_client import Database
from src.models import Category, Product, ProductCategory, Store
from src.schemas import (
    CategoryCreate,
    CategoryOut,
    CategoryUpdate,
    ClickReport,
    Dashboard,
    ProductCreate,
    ProductOut,
    ProductUpdate,
    StoreCreate,
    StoreOut,
    StoreUpdate,
)
from src.schemas.admin import ClickReportRow, ClickReportSummary, DashboardStats
from src.services.catalog_service import product_loader_options
from src.services.store_service import list_stores_with_counts
from src.utils.errors import ConflictError, InvalidInputError, NotFoundError
from src.utils.pagination import parse_int, parse_positive_int
from src.utils.sanitize import (
    LOCAL_UPLOAD_PREFIX,
    format_tags,
    sanitize_image_url,
    sanitize_string,
    sanitize_url,
    slugify,
)

logger = logging.getLogger(__name__)

DASHBOARD_LIST_SIZE = 5

_FQDN = re.compile(r"^(?=.{1,253}$)([a-z0-9]([a-z0-9-]{0,61}[a-z0-9])?\.)+[a-z]{2,63}$", re.IGNORECASE)

# Product columns that cannot be set to NULL through a partial update
_REQUIRED_PRODUCT_FIELDS = {
    "title",
    "description",
    "price",
    "image_url",
    "affiliate_url",
    "store_id",
    "stock",
    "tags",
    "is_active",
    "review_count",
    "sold_count",
    "free_shipping",
    "warranty",
}


def require_id(raw_id: Any, entity: str) -> int:
    parsed_id = parse_positive_int(raw_id)
    if parsed_id is None:
        raise InvalidInputError(f"The {entity} id must be a positive integer", error="Invalid id")
    return parsed_id


def validate_category_ids(session: Session, category_ids: list[int]) -> list[int]:
    """
    Enforce the per-product category limit and check that every category exists.

    Non-positive ids are dropped and duplicates collapsed, keeping request order.
    """
    if len(category_ids) > MAX_CATEGORIES_PER_PRODUCT:
        raise InvalidInputError(
            f"A product can have at most {MAX_CATEGORIES_PER_PRODUCT} categories", error="Too many categories"
        )

    unique_ids = list(dict.fromkeys(category_id for category_id in category_ids if category_id > 0))
    if any(category_id > MAX_DB_INT for category_id in unique_ids):
        raise InvalidInputError("One or more selected categories do not exist", error="Invalid categories")
    if unique_ids:
        found = session.scalar(select(func.count(Category.id)).where(Category.id.in_(unique_ids)))
        if found != len(unique_ids):
            raise InvalidInputError("One or more selected categories do not exist", error="Invalid categories")
    return unique_ids


def clean_image_url(url: str | None) -> str:
    if url and url.startswith("data:image/"):
        logger.warning("No image hosting configured; inline image data discarded")
        return ""
    return sanitize_image_url(url)


def clean_affiliate_url(url: str | None) -> str:
    sanitized = sanitize_url(url)
    if sanitized is None:
        raise InvalidInputError("The affiliate URL must be a valid http(s) URL", error="Invalid data")
    return sanitized


def clean_logo_url(url: str | None) -> str | None:
    if not url:
        return None
    if url.startswith("data:image/"):
        logger.warning("No image hosting configured; inline logo data discarded")
        return None
    if url.startswith(LOCAL_UPLOAD_PREFIX):
        return url
    sanitized = sanitize_url(url)
    if sanitized is None:
        raise InvalidInputError("The logo URL must be a valid http(s) URL", error="Invalid data")
    return sanitized


def clean_domain(domain: str | None) -> str | None:
    """Accept a full URL (https://example.com) or a bare domain (example.com)."""
    if not domain:
        return None
    if sanitize_url(domain) is None and not _FQDN.match(domain):
        raise InvalidInputError(
            "The domain must be a valid URL (https://example.com) or domain (example.com)", error="Invalid data"
        )
    return sanitize_string(domain)


class AdminService:
    def __init__(self, db: Database):
        self.db = db

    # Products

    def _load_product(self, session: Session, product_id: int) -> ProductOut:
        product = session.scalars(
            select(Product)
            .where(Product.id == product_id)
            .options(*product_loader_options())
            .execution_options(populate_existing=True)
        ).one()
        return ProductOut.model_validate(product)

    def _ensure_store(self, session: Session, store_id: int):
        if session.get(Store, store_id) is None:
            raise NotFoundError("The specified store does not exist", error="Store not found")

    def _replace_categories(self, session: Session, product_id: int, category_ids: list[int]):
        """Swap the whole category set of a product in bulk."""
        session.execute(delete(ProductCategory).where(ProductCategory.product_id == product_id))
        session.add_all(ProductCategory(product_id=product_id, category_id=category_id) for category_id in category_ids)
        session.flush()

    def list_products(self, store_id: Any = None) -> list[ProductOut]:
        """All products, including inactive ones, newest first."""
        stmt = (
            select(Product).options(*product_loader_options()).order_by(Product.created_at.desc(), Product.id.desc())
        )
        parsed_store_id = parse_int(store_id)
        if parsed_store_id is not None:
            stmt = stmt.where(Product.store_id == parsed_store_id)

        with self.db.session() as session:
            return [ProductOut.model_validate(product) for product in session.scalars(stmt).all()]

    def create_product(self, payload: ProductCreate) -> ProductOut:
        with self.db.session() as session:
            category_ids = validate_category_ids(session, payload.category_ids)
            self._ensure_store(session, payload.store_id)

            product = Product(
                title=sanitize_string(payload.title),
                description=sanitize_string(payload.description),
                price=payload.price,
                original_price=payload.original_price,
                image_url=clean_image_url(payload.image_url),
                affiliate_url=clean_affiliate_url(payload.affiliate_url),
                store_id=payload.store_id,
                stock=payload.stock,
                tags=format_tags(payload.tags),
                is_active=payload.is_active,
                rating=payload.rating,
                review_count=payload.review_count,
                sold_count=payload.sold_count,
                free_shipping=payload.free_shipping,
                warranty=payload.warranty,
            )
            session.add(product)
            session.flush()

            if category_ids:
                self._replace_categories(session, product.id, category_ids)

            logger.info(f"Created product {product.id} with categories {category_ids}")
            return self._load_product(session, product.id)

    def update_product(self, product_id: Any, payload: ProductUpdate) -> ProductOut:
        parsed_id = require_id(product_id, "product")
        changes = payload.model_dump(exclude_unset=True)

        with self.db.session() as session:
            product = session.get(Product, parsed_id)
            if product is None:
                raise NotFoundError("The specified product does not exist", error="Product not found")

            category_ids = changes.pop("category_ids", None)
            if category_ids is not None:
                category_ids = validate_category_ids(session, category_ids)

            if changes.get("store_id") is not None:
                self._ensure_store(session, changes["store_id"])

            for field, value in changes.items():
                if value is None and field in _REQUIRED_PRODUCT_FIELDS:
                    continue
                if field in ("title", "description"):
                    value = sanitize_string(value)
                elif field == "image_url":
                    value = clean_image_url(value)
                elif field == "affiliate_url":
                    value = clean_affiliate_url(value)
                elif field == "tags":
                    value = format_tags(value)
                setattr(product, field, value)
            session.flush()

            if category_ids is not None:
                self._replace_categories(session, parsed_id, category_ids)

            logger.info(f"Updated product {parsed_id}: {sorted(changes)}")
            return self._load_product(session, parsed_id)

    def delete_product(self, product_id: Any):
        parsed_id = require_id(product_id, "product")
        with self.db.session() as session:
            product = session.get(Product, parsed_id)
            if product is None:
                raise NotFoundError("The specified product does not exist", error="Product not found")
            session.delete(product)
        logger.info(f"Deleted product {parsed_id}")

    # Stores

    def list_stores(self) -> list[StoreOut]:
        """All stores with their total product count."""
        return list_stores_with_counts(self.db, active_only=False)

    def create_store(self, payload: StoreCreate) -> StoreOut:
        with self.db.session() as session:
            store = Store(
                name=sanitize_string(payload.name),
                description=sanitize_string(payload.description) or None,
                logo_url=clean_logo_url(payload.logo_url),
                domain=clean_domain(payload.domain),
            )
            session.add(store)
            session.flush()
            session.refresh(store)
            logger.info(f"Created store {store.id} ({store.name})")
            return StoreOut.model_validate(store)

    def update_store(self, store_id: Any, payload: StoreUpdate) -> StoreOut:
        parsed_id = require_id(store_id, "store")
        changes = payload.model_dump(exclude_unset=True)

        with self.db.session() as session:
            store = session.get(Store, parsed_id)
            if store is None:
                raise NotFoundError("The specified store does not exist", error="Store not found")

            if changes.get("name"):
                store.name = sanitize_string(changes["name"])
            if "description" in changes:
                store.description = sanitize_string(changes["description"]) or None
            if "logo_url" in changes:
                store.logo_url = clean_logo_url(changes["logo_url"])
            if "domain" in changes:
                store.domain = clean_domain(changes["domain"])

            session.flush()
            session.refresh(store)
            return StoreOut.model_validate(store)

    def delete_store(self, store_id: Any):
        """Delete a store that no product references."""
        parsed_id = require_id(store_id, "store")
        with self.db.session() as session:
            store = session.get(Store, parsed_id)
            if store is None:
                raise NotFoundError("The specified store does not exist", error="Store not found")

            product_count = session.scalar(select(func.count(Product.id)).where(Product.store_id == parsed_id))
            if product_count:
                raise InvalidInputError(
                    f"The store cannot be deleted because it has {product_count} product(s)",
                    error="Store has products",
                )
            session.delete(store)
        logger.info(f"Deleted store {parsed_id}")

    # Categories

    def list_categories(self) -> list[CategoryOut]:
        product_count = func.count(ProductCategory.id).label("product_count")
        stmt = (
            select(Category, product_count)
            .outerjoin(ProductCategory, ProductCategory.category_id == Category.id)
            .group_by(Category.id)
            .order_by(Category.name)
        )
        with self.db.session() as session:
            return [
                CategoryOut.model_validate(category).model_copy(update={"product_count": count})
                for category, count in session.execute(stmt).all()
            ]

    def _find_conflict(self, session: Session, name: str | None, slug: str | None, exclude_id: int | None = None):
        clauses = []
        if name:
            clauses.append(Category.name == name)
        if slug:
            clauses.append(Category.slug == slug)
        if not clauses:
            return

        stmt = select(Category).where(or_(*clauses))
        if exclude_id is not None:
            stmt = stmt.where(Category.id != exclude_id)
        existing = session.scalars(stmt).first()
        if existing is not None:
            details = "Name already in use" if existing.name == name else "Slug already in use"
            raise ConflictError("A category with this name or slug already exists", error="Category exists", details=details)

    def create_category(self, payload: CategoryCreate) -> CategoryOut:
        name = sanitize_string(payload.name)
        if not name:
            raise InvalidInputError("The category name is required", error="Invalid data")
        slug = slugify(payload.slug or name)
        if not slug:
            raise InvalidInputError("The category slug cannot be empty", error="Invalid data")

        with self.db.session() as session:
            self._find_conflict(session, name, slug)
            category = Category(name=name, slug=slug, description=sanitize_string(payload.description) or None)
            session.add(category)
            session.flush()
            logger.info(f"Created category {category.id} ({slug})")
            return CategoryOut.model_validate(category)

    def update_category(self, category_id: Any, payload: CategoryUpdate) -> CategoryOut:
        parsed_id = require_id(category_id, "category")
        changes = payload.model_dump(exclude_unset=True)

        with self.db.session() as session:
            category = session.get(Category, parsed_id)
            if category is None:
                raise NotFoundError("The specified category does not exist", error="Category not found")

            name = sanitize_string(changes.get("name")) or None
            slug = slugify(changes["slug"]) if changes.get("slug") else None
            self._find_conflict(session, name, slug, exclude_id=parsed_id)

            if name:
                category.name = name
            if slug:
                category.slug = slug
            if "description" in changes:
                category.description = sanitize_string(changes["description"]) or None

            session.flush()
            count = session.scalar(
                select(func.count(ProductCategory.id)).where(ProductCategory.category_id == parsed_id)
            )
            return CategoryOut.model_validate(category).model_copy(update={"product_count": count or 0})

    def delete_category(self, category_id: Any):
        """Delete a category that no product uses."""
        parsed_id = require_id(category_id, "category")
        with self.db.session() as session:
            category = session.get(Category, parsed_id)
            if category is None:
                raise NotFoundError("The specified category does not exist", error="Category not found")

            product_count = session.scalar(
                select(func.count(ProductCategory.id)).where(ProductCategory.category_id == parsed_id)
            )
            if product_count:
                raise InvalidInputError(
                    f"This category has {product_count} associated product(s)",
                    error="Category has products",
                )
            session.delete(category)
        logger.info(f"Deleted category {parsed_id}")

    # Reports

    def dashboard(self) -> Dashboard:
        with self.db.session() as session:
            total_products = session.scalar(select(func.count(Product.id))) or 0
            total_stores = session.scalar(select(func.count(Store.id))) or 0
            total_clicks = session.scalar(select(func.coalesce(func.sum(Product.clicks), 0))) or 0

            recent = session.scalars(
                select(Product)
                .options(*product_loader_options())
                .order_by(Product.created_at.desc(), Product.id.desc())
                .limit(DASHBOARD_LIST_SIZE)
            ).all()
            top_clicked = session.scalars(
                select(Product)
                .options(*product_loader_options())
                .order_by(Product.clicks.desc(), Product.id)
                .limit(DASHBOARD_LIST_SIZE)
            ).all()

            return Dashboard(
                stats=DashboardStats(
                    total_products=total_products, total_stores=total_stores, total_clicks=total_clicks
                ),
                recent_products=[ProductOut.model_validate(product) for product in recent],
                top_clicked_products=[ProductOut.model_validate(product) for product in top_clicked],
            )

    def clicks_report(self) -> ClickReport:
        """Every product ranked by clicks, with totals and the average."""
        stmt = (
            select(Product.id, Product.title, Product.clicks, Product.created_at, Store.name)
            .join(Store, Store.id == Product.store_id)
            .order_by(Product.clicks.desc(), Product.id)
        )
        with self.db.session() as session:
            rows = session.execute(stmt).all()

        products = [
            ClickReportRow(id=row[0], title=row[1], clicks=row[2], created_at=row[3], store_name=row[4])
            for row in rows
        ]
        total_clicks = sum(product.clicks for product in products)
        average = round(total_clicks / len(products), 2) if products else 0.0

        return ClickReport(
            summary=ClickReportSummary(
                total_clicks=total_clicks, total_products=len(products), average_clicks=average
            ),
            products=products,
        )
