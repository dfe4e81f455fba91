"""Affiliate click tracking."""

import logging

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError

from src.config import MAX_DB_INT
from src.db.postgres_client import Database
from src.models import ClickTracking, Product
from src.schemas import ClickResult
from src.utils.errors import InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)

UNKNOWN_IP = "unknown"
MAX_USER_AGENT_LENGTH = 512


class ClickTrackingService:
    def __init__(self, db: Database):
        self.db = db

    def track_click(self, product_id, client_ip: str | None = None, user_agent: str | None = None) -> ClickResult:
        """
        Count one click on an active product and log it.

        The counter is bumped by a single ``UPDATE ... SET clicks = clicks + 1`` so
        concurrent clicks never overwrite each other. The audit row is written in its
        own transaction afterwards; if that write fails the click still counts.

        Args:
            product_id: Product id from the request body
            client_ip: Client address, stored as "unknown" when missing
            user_agent: Raw User-Agent header, may be None

        Returns:
            ClickResult with the new total and the affiliate URL to redirect to

        Raises:
            InvalidInputError: product_id is not a positive integer
            NotFoundError: the product does not exist or is inactive
        """
        if isinstance(product_id, bool) or not isinstance(product_id, int) or not 1 <= product_id <= MAX_DB_INT:
            raise InvalidInputError("A valid product id is required", error="Invalid product id")

        stmt = (
            update(Product)
            .where(Product.id == product_id, Product.is_active.is_(True))
            .values(clicks=Product.clicks + 1)
            .returning(Product.id, Product.title, Product.clicks, Product.affiliate_url)
            .execution_options(synchronize_session=False)
        )
        with self.db.session() as session:
            row = session.execute(stmt).one_or_none()

        if row is None:
            raise NotFoundError("The product does not exist or is not active", error="Product not found")

        self._record_click(product_id, client_ip, user_agent)

        return ClickResult(product_id=row.id, title=row.title, total_clicks=row.clicks, affiliate_url=row.affiliate_url)

    def _record_click(self, product_id: int, client_ip: str | None, user_agent: str | None) -> bool:
        """Append the audit row. Returns False when it could not be written."""
        try:
            with self.db.session() as session:
                session.add(
                    ClickTracking(
                        product_id=product_id,
                        ip=client_ip or UNKNOWN_IP,
                        user_agent=user_agent[:MAX_USER_AGENT_LENGTH] if user_agent else None,
                    )
                )
            return True
        except SQLAlchemyError as e:
            logger.warning(f"Click on product {product_id} counted but not logged: {e}")
            return False
