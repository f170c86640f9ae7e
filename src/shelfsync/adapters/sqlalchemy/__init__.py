"""SQLAlchemy adapter package for shelfsync."""

from __future__ import annotations

from .mappings import create_all_tables, metadata, product_table
from .repositories import SqlAlchemyProductRepository
from .unit_of_work import (
    SqlAlchemyProductUnitOfWork,
    StartupError,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyProductRepository",
    "SqlAlchemyProductUnitOfWork",
    "StartupError",
    "create_all_tables",
    "metadata",
    "product_table",
    "shutdown",
    "startup",
]
