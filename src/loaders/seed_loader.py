"""Load the sample catalog into the relational database."""

import json
import logging
from decimal import Decimal
from pathlib import Path

from sqlalchemy import select

from src.config import get_settings
from src.db.postgres_client import Database
from src.models import Category, Product, ProductCategory, Store
from src.utils.sanitize import format_tags

logger = logging.getLogger(__name__)

SEED_FILE = Path(__file__).resolve().parents[2] / "data" / "seed_catalog.json"


class SeedLoader:
    """Idempotent loader: rows already present (by slug, name or title) are left alone."""

    def __init__(self, db: Database, seed_file: Path = SEED_FILE):
        self.db = db
        self.seed_file = seed_file
        self._data = None

    @property
    def data(self) -> dict:
        if self._data is None:
            with open(self.seed_file, encoding="utf-8") as f:
                self._data = json.load(f)
        return self._data

    def load_categories(self) -> dict[str, int]:
        """Load categories, returning slug -> id."""
        with self.db.session() as session:
            for row in self.data["categories"]:
                exists = session.scalars(select(Category).where(Category.slug == row["slug"])).first()
                if exists is None:
                    session.add(Category(name=row["name"], slug=row["slug"], description=row.get("description")))
            session.flush()
            slugs = {slug: category_id for category_id, slug in session.execute(select(Category.id, Category.slug))}

        logger.info(f"Loaded {len(self.data['categories'])} categories")
        return slugs

    def load_stores(self) -> dict[str, int]:
        """Load stores, returning name -> id."""
        with self.db.session() as session:
            for row in self.data["stores"]:
                exists = session.scalars(select(Store).where(Store.name == row["name"])).first()
                if exists is None:
                    session.add(
                        Store(
                            name=row["name"],
                            description=row.get("description"),
                            logo_url=row.get("logoUrl"),
                            domain=row.get("domain"),
                        )
                    )
            session.flush()
            names = {name: store_id for store_id, name in session.execute(select(Store.id, Store.name))}

        logger.info(f"Loaded {len(self.data['stores'])} stores")
        return names

    def load_products(self, category_ids: dict[str, int], store_ids: dict[str, int]) -> int:
        """Load products and their category links. Returns the number of new products."""
        created = 0
        with self.db.session() as session:
            for row in self.data["products"]:
                exists = session.scalars(select(Product).where(Product.title == row["title"])).first()
                if exists is not None:
                    continue

                product = Product(
                    title=row["title"],
                    description=row["description"],
                    price=Decimal(row["price"]),
                    image_url=row.get("imageUrl", ""),
                    affiliate_url=row["affiliateUrl"],
                    stock=row.get("stock", 0),
                    tags=format_tags(row.get("tags", "")),
                    store_id=store_ids[row["store"]],
                )
                session.add(product)
                session.flush()
                session.add_all(
                    ProductCategory(product_id=product.id, category_id=category_ids[slug])
                    for slug in row.get("categories", [])
                )
                created += 1

        logger.info(f"Loaded {created} new products")
        return created

    def load_all(self):
        category_ids = self.load_categories()
        store_ids = self.load_stores()
        self.load_products(category_ids, store_ids)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    settings = get_settings()
    database = Database(settings.database_url)
    try:
        database.create_tables()
        SeedLoader(database).load_all()
    finally:
        database.dispose()
