"""Errors raised by the order processing data sources."""

from __future__ import annotations


class OrderProcessingError(Exception):
    """Base for order processing domain errors."""


class DataSourceError(OrderProcessingError):
    """A source file is missing, unreadable or has the wrong shape."""


class CatalogError(DataSourceError):
    """The products or recipes table is missing or empty."""


class OrderSourceError(DataSourceError):
    """The order source is empty or does not match the expected schema."""
