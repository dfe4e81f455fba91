"""
Infrastructure Setup Script for the Saturno Affiliates Backend
This script checks the database and Redis connections, creates the tables and optionally seeds sample data.
"""

import argparse
import logging

from sqlalchemy import func, select

from src.config import get_settings
from src.db.postgres_client import Database
from src.db.redis_client import RedisClient
from src.loaders.seed_loader import SeedLoader
from src.models import Category, Product, Store

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def check_connections(db: Database) -> bool:
    """Check if the configured backends are reachable."""
    logger.info("Checking connections...")
    settings = get_settings()

    try:
        db.ping()
        logger.info("Database connection: OK")
    except Exception as e:
        logger.error(f"Database connection error: {e}")
        return False

    if settings.redis_url:
        redis_client = RedisClient(settings.redis_url)
        try:
            redis_client.ping()
            logger.info("Redis connection: OK")
        except Exception as e:
            logger.error(f"Redis connection error: {e}")
            return False
        finally:
            redis_client.close()
    else:
        logger.info("Redis not configured, rate limiting disabled")

    return True


def check_data_availability(db: Database) -> bool:
    """Check if catalog data is available."""
    with db.session() as session:
        product_count = session.scalar(select(func.count(Product.id)))
        store_count = session.scalar(select(func.count(Store.id)))
        category_count = session.scalar(select(func.count(Category.id)))

    logger.info(f"Products in database: {product_count}")
    logger.info(f"Stores in database: {store_count}")
    logger.info(f"Categories in database: {category_count}")

    if product_count == 0:
        logger.warning("No products found. Run with --seed to load sample data.")
        return False
    return True


def main() -> bool:
    parser = argparse.ArgumentParser(description="Prepare the Saturno Affiliates database")
    parser.add_argument("--seed", action="store_true", help="Load sample stores, categories and products")
    args = parser.parse_args()

    settings = get_settings()
    db = Database(settings.database_url, pool_size=settings.db_pool_size, max_overflow=settings.db_max_overflow)
    try:
        if not check_connections(db):
            logger.error("Connection check failed!")
            return False

        db.create_tables()

        if args.seed:
            SeedLoader(db).load_all()

        if not check_data_availability(db):
            return False

        logger.info("Setup complete! Ready to start the server.")
        return True
    finally:
        db.dispose()


if __name__ == "__main__":
    raise SystemExit(0 if main() else 1)
