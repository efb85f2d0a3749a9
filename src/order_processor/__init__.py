"""
Pizzeria Order Processor - Batch Order Aggregation CLI Tool

A small CLI tool that loads customer orders from JSON or CSV files,
validates them against the product catalog, consolidates them per order
and derives the raw-ingredient demand for the batch.
"""

__version__ = "0.1.0"

# Import main modules for CLI functionality
from . import order_processing
from . import utils

__all__ = ["order_processing", "utils"]
