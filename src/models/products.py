"""
Products SQLAlchemy model.
"""

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, Numeric, String, Text, func
from sqlalchemy.orm import relationship
from sqlalchemy.sql.schema import CheckConstraint

from src.db.postgres_bootstrap import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=False)
    price = Column(Numeric(10, 2), CheckConstraint("price > 0"), nullable=False)
    original_price = Column(Numeric(10, 2), nullable=True)  # Price before discount, shown struck through
    image_url = Column(Text, nullable=False, default="")
    affiliate_url = Column(String(2048), nullable=False)
    stock = Column(Integer, CheckConstraint("stock >= 0"), nullable=False, default=0)
    tags = Column(String(512), nullable=False, default="")  # Comma-separated lowercase tags

    store_id = Column(Integer, ForeignKey("stores.id", ondelete="RESTRICT"), nullable=False, index=True)

    clicks = Column(Integer, nullable=False, default=0, server_default="0")
    rating = Column(Float, nullable=True)
    review_count = Column(Integer, nullable=False, default=0)
    sold_count = Column(Integer, nullable=False, default=0)

    is_active = Column(Boolean, nullable=False, default=True, index=True)
    free_shipping = Column(Boolean, nullable=False, default=True)
    warranty = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, nullable=False, server_default=func.now(), index=True)
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    store = relationship("Store", back_populates="products")
    # Join rows are written explicitly through ProductCategory
    categories = relationship("Category", secondary="product_categories", viewonly=True, order_by="Category.name")

    def __repr__(self):
        return f"<Product(id={self.id}, title={self.title}, price={self.price}, store_id={self.store_id}, is_active={self.is_active})>"
