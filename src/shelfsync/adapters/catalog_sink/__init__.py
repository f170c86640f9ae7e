"""Catalog sink adapter package."""

from __future__ import annotations

from .client import CatalogSinkError, HttpCatalogSink

__all__ = ["CatalogSinkError", "HttpCatalogSink"]
