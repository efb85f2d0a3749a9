"""Business-rule checks for single order lines and order groups."""

from __future__ import annotations

from typing import List, Mapping, Sequence

from .models import Product, RawOrderLine, ValidationResult


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


class OrderValidator:
    """Validate order lines against required fields and the product table.

    Validation is side-effect free: errors are returned to the caller,
    never logged here.
    """

    def __init__(self, products: Mapping[str, Product]) -> None:
        self._products = products

    def validate_order(self, line: RawOrderLine) -> ValidationResult:
        """Check one line. Every rule runs so that all problems surface together."""
        errors: List[str] = []

        if _is_blank(line.order_id):
            errors.append("OrderId cannot be empty")

        if _is_blank(line.product_id):
            errors.append("ProductId cannot be empty")

        if line.quantity <= 0:
            errors.append("Quantity must be positive")

        if _is_blank(line.delivery_address):
            errors.append("DeliveryAddress cannot be empty")

        # A blank product id has already been reported above
        if not _is_blank(line.product_id) and line.product_id not in self._products:
            errors.append(f"Product {line.product_id} does not exist")

        return ValidationResult.from_errors(errors)

    def validate_group(self, lines: Sequence[RawOrderLine]) -> ValidationResult:
        """Check every line of a group, then the group's delivery consistency.

        The consistency check only runs when all lines are individually
        valid and there is more than one line.
        """
        if not lines:
            return ValidationResult.failure(["Order group cannot be empty"])

        errors: List[str] = []
        for line in lines:
            result = self.validate_order(line)
            errors.extend(f"Order {line.order_id}: {error}" for error in result.errors)

        if not errors and len(lines) > 1:
            first = lines[0]
            inconsistent = any(
                line.delivery_at != first.delivery_at
                or line.created_at != first.created_at
                or line.delivery_address != first.delivery_address
                for line in lines[1:]
            )
            if inconsistent:
                errors.append(f"Order {first.order_id} has inconsistent delivery details across entries")

        return ValidationResult.from_errors(errors)
