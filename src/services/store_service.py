"""Public store directory."""

import logging
from typing import Any

from sqlalchemy import func, select

from src.db.postgres_client import Database
from src.models import Product, Store
from src.schemas import StoreDetail, StoreOut, StoreProductOut
from src.utils.errors import InvalidInputError, NotFoundError
from src.utils.pagination import parse_positive_int

logger = logging.getLogger(__name__)


def product_counts_subquery(active_only: bool):
    """Per-store product counts, for outer-joining onto stores."""
    stmt = select(Product.store_id, func.count(Product.id).label("product_count")).group_by(Product.store_id)
    if active_only:
        stmt = stmt.where(Product.is_active.is_(True))
    return stmt.subquery()


def list_stores_with_counts(db: Database, active_only: bool) -> list[StoreOut]:
    counts = product_counts_subquery(active_only)
    stmt = (
        select(Store, func.coalesce(counts.c.product_count, 0))
        .outerjoin(counts, counts.c.store_id == Store.id)
        .order_by(Store.name)
    )
    with db.session() as session:
        return [
            StoreOut.model_validate(store).model_copy(update={"product_count": count})
            for store, count in session.execute(stmt).all()
        ]


class StoreService:
    def __init__(self, db: Database):
        self.db = db

    def list_stores(self) -> list[StoreOut]:
        """All stores ordered by name, with their number of active products."""
        return list_stores_with_counts(self.db, active_only=True)

    def get_store(self, store_id: Any) -> StoreDetail:
        """Return a store and its active products, newest first."""
        parsed_id = parse_positive_int(store_id)
        if parsed_id is None:
            raise InvalidInputError("The store id must be a positive integer", error="Invalid id")

        with self.db.session() as session:
            store = session.get(Store, parsed_id)
            if store is None:
                raise NotFoundError("The requested store does not exist", error="Store not found")

            products = session.scalars(
                select(Product)
                .where(Product.store_id == parsed_id, Product.is_active.is_(True))
                .order_by(Product.created_at.desc(), Product.id.desc())
            ).all()

            return StoreDetail(
                **StoreOut.model_validate(store).model_dump(exclude={"product_count"}),
                product_count=len(products),
                products=[StoreProductOut.model_validate(product) for product in products],
            )
