"""
Declarative base shared by every SQLAlchemy model.
Kept apart from the connection module to prevent circular imports when creating the tables.
"""

from sqlalchemy.orm import declarative_base

Base = declarative_base()
