"""
Stores SQLAlchemy model.
"""

from sqlalchemy import Column, DateTime, Integer, String, Text, func
from sqlalchemy.orm import relationship

from src.db.postgres_bootstrap import Base


class Store(Base):
    __tablename__ = "stores"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    logo_url = Column(String(2048), nullable=True)
    domain = Column(String(255), nullable=True)  # Full URL or bare domain of the external store

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    products = relationship("Product", back_populates="store", passive_deletes="all")

    def __repr__(self):
        return f"<Store(id={self.id}, name={self.name}, domain={self.domain})>"
