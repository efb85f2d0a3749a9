"""File-backed repository for the product catalog and order lines."""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import pandas as pd
from pydantic import ValidationError

from ..utils.config import Config
from ..utils.logging import get_logger
from .exceptions import CatalogError, DataSourceError, OrderSourceError
from .models import Catalog, IngredientRequirement, OrderBatch, Product, RawOrderLine

logger = get_logger(__name__)

PathLike = Union[str, Path]

# Source property names are matched on their normalized form (see _normalize_key)
PRODUCT_FIELDS: Dict[str, str] = {
    "productname": "name",
    "name": "name",
    "price": "unit_price",
    "unitprice": "unit_price",
}
INGREDIENT_FIELDS: Dict[str, str] = {
    "name": "name",
    "ingredientname": "name",
    "amount": "amount_per_unit",
    "amountperunit": "amount_per_unit",
}
ORDER_FIELDS: Dict[str, str] = {
    "orderid": "order_id",
    "productid": "product_id",
    "quantity": "quantity",
    "deliveryat": "delivery_at",
    "createdat": "created_at",
    "deliveryaddress": "delivery_address",
}
ORDER_TEXT_FIELDS: Tuple[str, ...] = ("order_id", "product_id", "delivery_address")


def _normalize_key(key: str) -> str:
    return str(key).replace("_", "").replace(" ", "").strip().lower()


def _remap(record: Mapping[str, Any], aliases: Mapping[str, str]) -> Dict[str, Any]:
    """Rename source keys to model field names; unknown keys are dropped."""
    out: Dict[str, Any] = {}
    for key, value in record.items():
        field_name = aliases.get(_normalize_key(key))
        if field_name is not None and field_name not in out:
            out[field_name] = value
    return out


def _describe(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'record'}: {err['msg']}"
        for err in exc.errors()
    )


class DataRepository:
    """Loads reference tables and order lines from the configured data files."""

    def __init__(
        self,
        config: Optional[Config] = None,
        products_path: Optional[PathLike] = None,
        ingredients_path: Optional[PathLike] = None,
        orders_path: Optional[PathLike] = None,
        csv_delimiter: Optional[str] = None,
    ) -> None:
        config = config or Config()
        self._products_path = Path(products_path) if products_path else config.products_path
        self._ingredients_path = Path(ingredients_path) if ingredients_path else config.ingredients_path
        self._orders_path = Path(orders_path) if orders_path else config.orders_path
        self._csv_delimiter = csv_delimiter or config.get("csv_delimiter") or ","

    @property
    def orders_path(self) -> Path:
        return self._orders_path

    # ------------------------------------------------------------------
    # Reference data
    # ------------------------------------------------------------------

    def load_products(self) -> Dict[str, Product]:
        data = self._read_json(self._products_path, error_cls=CatalogError)
        if not isinstance(data, dict) or not data:
            raise CatalogError(f"No products found in {self._products_path}")

        products: Dict[str, Product] = {}
        for product_id, record in data.items():
            if not isinstance(record, dict):
                raise CatalogError(f"Product {product_id} in {self._products_path} is not an object")
            try:
                products[product_id] = Product(**_remap(record, PRODUCT_FIELDS))
            except ValidationError as exc:
                raise CatalogError(f"Invalid product {product_id}: {_describe(exc)}") from exc

        logger.info(f"Loaded {len(products)} products from {self._products_path}")
        return products

    def load_recipes(self) -> Dict[str, Tuple[IngredientRequirement, ...]]:
        data = self._read_json(self._ingredients_path, error_cls=CatalogError)
        if not isinstance(data, dict) or not data:
            raise CatalogError(f"No ingredients found in {self._ingredients_path}")

        recipes: Dict[str, Tuple[IngredientRequirement, ...]] = {}
        for product_id, record in data.items():
            entries = self._recipe_entries(product_id, record)
            try:
                recipes[product_id] = tuple(
                    IngredientRequirement(**_remap(entry, INGREDIENT_FIELDS)) for entry in entries
                )
            except ValidationError as exc:
                raise CatalogError(f"Invalid recipe for product {product_id}: {_describe(exc)}") from exc

        logger.info(f"Loaded ingredients for {len(recipes)} products from {self._ingredients_path}")
        return recipes

    def _recipe_entries(self, product_id: str, record: Any) -> List[Dict[str, Any]]:
        # Either {"ingredients": [...]} or the bare list
        if isinstance(record, dict):
            record = _remap(record, {"ingredients": "ingredients"}).get("ingredients", [])
        if not isinstance(record, list) or not all(isinstance(entry, dict) for entry in record):
            raise CatalogError(f"Recipe for product {product_id} must be a list of ingredient objects")
        return record

    def load_catalog(self) -> Catalog:
        return Catalog(products=self.load_products(), recipes=self.load_recipes())

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

    def load_orders(self, path: Optional[PathLike] = None) -> OrderBatch:
        """Load order lines from a JSON array or a delimited text file.

        Rows that cannot be parsed are reported in ``row_errors`` and
        skipped. A source without any records is an error.
        """
        orders_path = Path(path) if path else self._orders_path
        if orders_path.suffix.lower() == ".json":
            records = self._read_json_orders(orders_path)
        else:
            records = self._read_delimited_orders(orders_path)

        if not records:
            raise OrderSourceError(f"No orders found in {orders_path}")

        batch = OrderBatch()
        for row_number, record in enumerate(records, start=1):
            line, error = self._parse_order(row_number, record)
            if line is not None:
                batch.lines.append(line)
            else:
                logger.warning(f"Skipping order row: {error}")
                batch.row_errors.append(error)

        logger.info(
            f"Loaded {len(batch.lines)} order lines from {orders_path} "
            f"({len(batch.row_errors)} rows skipped)"
        )
        return batch

    def _parse_order(self, row_number: int, record: Any) -> Tuple[Optional[RawOrderLine], str]:
        if not isinstance(record, dict):
            return None, f"Row {row_number}: expected an object, got {type(record).__name__}"

        fields = _remap(record, ORDER_FIELDS)
        # Missing text fields pass through blank and are rejected by validation
        for name in ORDER_TEXT_FIELDS:
            if fields.get(name) is None:
                fields[name] = ""
        try:
            return RawOrderLine(**fields), ""
        except ValidationError as exc:
            return None, f"Row {row_number}: {_describe(exc)}"

    def _read_json_orders(self, path: Path) -> List[Any]:
        data = self._read_json(path, error_cls=OrderSourceError)
        if not isinstance(data, list):
            raise OrderSourceError(f"{path} must contain a JSON array of orders")
        return data

    def _read_delimited_orders(self, path: Path) -> List[Dict[str, Any]]:
        if not path.exists():
            raise OrderSourceError(f"Orders file not found: {path}")
        try:
            frame = pd.read_csv(
                path,
                sep=self._csv_delimiter,
                dtype=str,
                keep_default_na=False,
                skipinitialspace=True,
                encoding="utf-8",
            )
        except pd.errors.EmptyDataError as exc:
            raise OrderSourceError(f"No orders found in {path}") from exc
        except pd.errors.ParserError as exc:
            raise OrderSourceError(f"Could not parse {path}: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise OrderSourceError(f"{path} is not valid UTF-8 text: {exc}") from exc
        except OSError as exc:
            raise OrderSourceError(f"Could not read {path}: {exc}") from exc

        present = {ORDER_FIELDS.get(_normalize_key(column)) for column in frame.columns}
        missing = sorted(set(ORDER_FIELDS.values()) - present)
        if missing:
            raise OrderSourceError(f"{path} is missing required columns: {missing}")

        return frame.to_dict(orient="records")

    @staticmethod
    def _read_json(path: Path, error_cls: type = DataSourceError) -> Any:
        if not path.exists():
            raise error_cls(f"File not found: {path}")
        try:
            with path.open("r", encoding="utf-8") as handle:
                # Decimal keeps prices and amounts at their declared scale
                return json.load(handle, parse_float=Decimal)
        except json.JSONDecodeError as exc:
            raise error_cls(f"Invalid JSON in {path}: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise error_cls(f"{path} is not valid UTF-8 text: {exc}") from exc
        except OSError as exc:
            raise error_cls(f"Could not read {path}: {exc}") from exc
