"""Database package: SQLAlchemy models, engine and session factory."""

from weightbalance.db.engine import SessionLocal, get_engine, init_db
from weightbalance.db.models import Base

__all__ = ["Base", "SessionLocal", "get_engine", "init_db"]
