"""Domain port definitions for adapters."""

from __future__ import annotations

from .catalog import CatalogSink
from .fetching import SnapshotFetcher
from .persistence import ProductRepository
from .remote import RemoteCatalogWriter
from .unit_of_work import (
    ProductRepositories,
    ProductUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "CatalogSink",
    "ProductRepositories",
    "ProductRepository",
    "ProductUnitOfWork",
    "RemoteCatalogWriter",
    "RepositoryCollection",
    "SnapshotFetcher",
    "UnitOfWork",
]
