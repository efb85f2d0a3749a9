"""Domain models for order aggregation."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RawOrderLine(BaseModel):
    """One product line of a customer order, as read from the order source."""

    model_config = ConfigDict(frozen=True)

    order_id: str
    product_id: str
    quantity: int
    delivery_at: datetime
    created_at: datetime
    delivery_address: str

    @field_validator("quantity", mode="before")
    @classmethod
    def _reject_bool_quantity(cls, v: Any) -> Any:
        # bool is an int subclass; lax mode would read true as 1
        if isinstance(v, bool):
            raise ValueError("quantity must be an integer, not a boolean")
        return v


class Product(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    unit_price: Decimal


class IngredientRequirement(BaseModel):
    """Amount of one raw ingredient needed per unit of a product."""

    model_config = ConfigDict(frozen=True)

    name: str
    amount_per_unit: Decimal


class OrderItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_id: str
    product_name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class OrderSummary(BaseModel):
    """Consolidated view of one accepted order group."""

    model_config = ConfigDict(frozen=True)

    order_id: str
    items: Tuple[OrderItem, ...] = ()
    total_price: Decimal = Decimal("0")
    delivery_at: datetime
    created_at: datetime
    delivery_address: str


@dataclass(frozen=True)
class Catalog:
    """Read-only product and recipe tables keyed by product id."""

    products: Mapping[str, Product]
    recipes: Mapping[str, Tuple[IngredientRequirement, ...]]

    def __post_init__(self) -> None:
        object.__setattr__(self, "products", MappingProxyType(dict(self.products)))
        object.__setattr__(
            self,
            "recipes",
            MappingProxyType({pid: tuple(reqs) for pid, reqs in self.recipes.items()}),
        )

    def product(self, product_id: str) -> Product | None:
        return self.products.get(product_id)

    def recipe(self, product_id: str) -> Tuple[IngredientRequirement, ...]:
        # No recipe means no ingredients are tracked for the product.
        return self.recipes.get(product_id, ())


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validation: success, or a non-empty list of errors."""

    errors: Tuple[str, ...] = ()

    @classmethod
    def success(cls) -> "ValidationResult":
        return cls()

    @classmethod
    def failure(cls, errors: Sequence[str]) -> "ValidationResult":
        if not errors:
            raise ValueError("A failed validation needs at least one error")
        return cls(tuple(errors))

    @classmethod
    def from_errors(cls, errors: Sequence[str]) -> "ValidationResult":
        return cls.failure(errors) if errors else cls.success()

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def __bool__(self) -> bool:
        return self.is_valid


class OrderBatch(BaseModel):
    """Order lines loaded from one source, plus the rows that were dropped."""

    lines: List[RawOrderLine] = Field(default_factory=list)
    row_errors: List[str] = Field(default_factory=list)


@dataclass(frozen=True)
class ProcessingResult:
    """Output of one aggregation pass."""

    summaries: Tuple[OrderSummary, ...] = ()
    ingredient_totals: Dict[str, Decimal] = field(default_factory=dict)
    errors: Tuple[str, ...] = ()

    @property
    def grand_total(self) -> Decimal:
        return sum((s.total_price for s in self.summaries), Decimal("0"))
