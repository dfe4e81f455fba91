"""
Append-only log of affiliate clicks.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, func

from src.db.postgres_bootstrap import Base


class ClickTracking(Base):
    __tablename__ = "click_tracking"

    id = Column(Integer, primary_key=True, autoincrement=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    ip = Column(String(64), nullable=False, default="unknown")
    user_agent = Column(String(512), nullable=True)
    timestamp = Column(DateTime, nullable=False, server_default=func.now(), index=True)

    def __repr__(self):
        return f"<ClickTracking(id={self.id}, product_id={self.product_id}, ip={self.ip})>"
