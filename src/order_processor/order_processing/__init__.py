"""
Order Processing Module

Validation, aggregation and ingredient derivation for batches of orders.
"""

from .exceptions import CatalogError, DataSourceError, OrderProcessingError, OrderSourceError
from .models import (
    Catalog,
    IngredientRequirement,
    OrderBatch,
    OrderItem,
    OrderSummary,
    ProcessingResult,
    Product,
    RawOrderLine,
    ValidationResult,
)
from .processor import OrderAggregator, OrderProcessingService
from .repository import DataRepository
from .validation import OrderValidator

__all__ = [
    "Catalog",
    "CatalogError",
    "DataRepository",
    "DataSourceError",
    "IngredientRequirement",
    "OrderAggregator",
    "OrderBatch",
    "OrderItem",
    "OrderProcessingError",
    "OrderProcessingService",
    "OrderSourceError",
    "OrderSummary",
    "OrderValidator",
    "ProcessingResult",
    "Product",
    "RawOrderLine",
    "ValidationResult",
]
