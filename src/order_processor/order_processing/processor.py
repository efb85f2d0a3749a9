"""Order aggregation: grouping, validation, totals and ingredient demand."""

from __future__ import annotations

from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from ..utils.config import Config
from ..utils.logging import get_logger
from .models import (
    Catalog,
    OrderBatch,
    OrderItem,
    OrderSummary,
    ProcessingResult,
    RawOrderLine,
)
from .repository import DataRepository
from .validation import OrderValidator

logger = get_logger(__name__)

ErrorSink = Callable[[str], None]


def _log_validation_error(message: str) -> None:
    logger.warning(f"Validation Error: {message}")


def group_by_order_id(lines: Iterable[RawOrderLine]) -> Dict[str, List[RawOrderLine]]:
    """Group lines by order id, keeping first-seen order of groups and lines."""
    grouped: Dict[str, List[RawOrderLine]] = {}
    for line in lines:
        grouped.setdefault(line.order_id, []).append(line)
    return grouped


def sum_quantities(lines: Iterable[RawOrderLine]) -> Dict[str, int]:
    """Total quantity per product id, in first-seen product order."""
    quantities: Dict[str, int] = {}
    for line in lines:
        quantities[line.product_id] = quantities.get(line.product_id, 0) + line.quantity
    return quantities


class OrderAggregator:
    """Consolidate raw order lines into per-order summaries.

    Each group of lines sharing an order id is validated as a whole.
    Rejected groups are reported through the error sink and contribute
    nothing; accepted groups become an :class:`OrderSummary` and add their
    ingredient demand to the run totals.
    """

    def __init__(self, catalog: Catalog, validator: Optional[OrderValidator] = None) -> None:
        self.catalog = catalog
        self.validator = validator or OrderValidator(catalog.products)

    def process_valid_orders(
        self,
        lines: Sequence[RawOrderLine],
        error_sink: Optional[ErrorSink] = None,
    ) -> ProcessingResult:
        """Validate, summarize and total a batch of order lines.

        Never raises on bad order data; an invalid group is reported and
        skipped.

        Args:
            lines: Raw order lines, in source order
            error_sink: Receives every validation error message. Defaults to
                logging each one at WARNING level.

        Returns:
            Accepted summaries, ingredient totals and the reported errors
        """
        sink = error_sink or _log_validation_error
        summaries: List[OrderSummary] = []
        ingredient_totals: Dict[str, Decimal] = {}
        errors: List[str] = []

        groups = group_by_order_id(lines)
        for group in groups.values():
            result = self.validator.validate_group(group)
            if not result:
                for error in result.errors:
                    sink(error)
                errors.extend(result.errors)
                continue

            quantities = sum_quantities(group)
            summaries.append(self._build_summary(group, quantities))

            # Merge in one step so a group never contributes partially
            for name, amount in self._ingredient_demand(quantities).items():
                ingredient_totals[name] = ingredient_totals.get(name, Decimal("0")) + amount

        logger.info(
            f"Processed {len(groups)} order groups: "
            f"{len(summaries)} accepted, {len(groups) - len(summaries)} rejected"
        )
        return ProcessingResult(
            summaries=tuple(summaries),
            ingredient_totals=ingredient_totals,
            errors=tuple(errors),
        )

    def _build_summary(self, group: Sequence[RawOrderLine], quantities: Dict[str, int]) -> OrderSummary:
        first = group[0]
        items: List[OrderItem] = []
        total = Decimal("0")

        for product_id, quantity in quantities.items():
            product = self.catalog.product(product_id)
            if product is None:
                # Unreachable after group validation; skip rather than fail
                logger.debug(f"Order {first.order_id}: no catalog entry for {product_id}, skipping")
                continue
            line_total = product.unit_price * quantity
            items.append(
                OrderItem(
                    product_id=product_id,
                    product_name=product.name,
                    quantity=quantity,
                    unit_price=product.unit_price,
                    line_total=line_total,
                )
            )
            total += line_total

        return OrderSummary(
            order_id=first.order_id,
            items=tuple(items),
            total_price=total,
            delivery_at=first.delivery_at,
            created_at=first.created_at,
            delivery_address=first.delivery_address,
        )

    def _ingredient_demand(self, quantities: Dict[str, int]) -> Dict[str, Decimal]:
        demand: Dict[str, Decimal] = {}
        for product_id, quantity in quantities.items():
            for requirement in self.catalog.recipe(product_id):
                demand[requirement.name] = (
                    demand.get(requirement.name, Decimal("0")) + requirement.amount_per_unit * quantity
                )
        return demand


class OrderProcessingService:
    """High-level service: load the catalog and orders, then aggregate."""

    def __init__(self, repository: Optional[DataRepository] = None, config: Optional[Config] = None) -> None:
        self.repository = repository or DataRepository(config=config)
        self._catalog: Optional[Catalog] = None

    @property
    def catalog(self) -> Catalog:
        if self._catalog is None:
            self._catalog = self.repository.load_catalog()
        return self._catalog

    def load_catalog(self) -> Catalog:
        return self.catalog

    def load_orders(self, orders_path: Optional[str] = None) -> OrderBatch:
        return self.repository.load_orders(orders_path)

    def process_orders(
        self,
        orders_path: Optional[str] = None,
        error_sink: Optional[ErrorSink] = None,
    ) -> ProcessingResult:
        """Run one batch. Missing or empty sources raise DataSourceError."""
        # Catalog problems surface before any order is read
        self.load_catalog()
        return self.process_batch(self.load_orders(orders_path), error_sink=error_sink)

    def process_batch(
        self,
        batch: OrderBatch,
        error_sink: Optional[ErrorSink] = None,
    ) -> ProcessingResult:
        aggregator = OrderAggregator(self.catalog)
        return aggregator.process_valid_orders(batch.lines, error_sink=error_sink)
