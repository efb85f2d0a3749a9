"""Pytest configuration and fixtures."""

import json
import logging
import os
import sys
from datetime import datetime
from decimal import Decimal
from pathlib import Path

import pytest

# Add src to Python path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from order_processor.order_processing.models import (  # noqa: E402
    Catalog,
    IngredientRequirement,
    Product,
    RawOrderLine,
)

DELIVERY_AT = datetime(2025, 5, 27, 18, 30)
CREATED_AT = datetime(2025, 5, 27, 17, 45)
ADDRESS = "12 Harbour Street"


def make_line(
    order_id="ORD1",
    product_id="P001",
    quantity=1,
    delivery_at=DELIVERY_AT,
    created_at=CREATED_AT,
    delivery_address=ADDRESS,
):
    return RawOrderLine(
        order_id=order_id,
        product_id=product_id,
        quantity=quantity,
        delivery_at=delivery_at,
        created_at=created_at,
        delivery_address=delivery_address,
    )


@pytest.fixture
def catalog():
    """Two pizzas with recipes and a side without one."""
    return Catalog(
        products={
            "P001": Product(name="Margherita", unit_price=Decimal("28.00")),
            "P002": Product(name="Pepperoni", unit_price=Decimal("32.50")),
            "P004": Product(name="Garlic Bread", unit_price=Decimal("12.00")),
        },
        recipes={
            "P001": [
                IngredientRequirement(name="Mozzarella", amount_per_unit=Decimal("1.10")),
                IngredientRequirement(name="Tomato Sauce", amount_per_unit=Decimal("1.75")),
            ],
            "P002": [
                IngredientRequirement(name="Mozzarella", amount_per_unit=Decimal("0.90")),
                IngredientRequirement(name="Pepperoni", amount_per_unit=Decimal("0.45")),
            ],
        },
    )


@pytest.fixture
def order_record():
    """A single order record as it appears in orders.json."""
    return {
        "orderId": "ORD1",
        "productId": "P001",
        "quantity": 2,
        "deliveryAt": "2025-05-27T18:30:00",
        "createdAt": "2025-05-27T17:45:00",
        "deliveryAddress": ADDRESS,
    }


@pytest.fixture
def data_dir(tmp_path, order_record):
    """A data directory with products, ingredients and a JSON orders file."""
    (tmp_path / "products.json").write_text(json.dumps({
        "P001": {"productName": "Margherita", "price": 28.00},
        "P002": {"productName": "Pepperoni", "price": 32.50},
    }))
    (tmp_path / "ingredients.json").write_text(json.dumps({
        "P001": {"ingredients": [
            {"name": "Mozzarella", "amount": 1.10},
            {"name": "Tomato Sauce", "amount": 1.75},
        ]},
        "P002": {"ingredients": [{"name": "Pepperoni", "amount": 0.45}]},
    }))
    second = dict(order_record, quantity=1)
    (tmp_path / "orders.json").write_text(json.dumps([order_record, second]))
    return tmp_path


@pytest.fixture
def env_file(tmp_path, data_dir, monkeypatch):
    """A .env file pointing DATA_DIR at the fixture data directory."""
    for key in ("DATA_DIR", "PRODUCTS_FILE", "INGREDIENTS_FILE", "ORDERS_FILE", "CSV_DELIMITER", "LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    path = tmp_path / "test.env"
    path.write_text(f"DATA_DIR={data_dir}\nLOG_LEVEL=DEBUG\n")
    yield path
    # load_dotenv writes straight into os.environ
    for key in ("DATA_DIR", "LOG_LEVEL"):
        os.environ.pop(key, None)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers installed by setup_logging so they don't outlive capsys."""
    yield
    logger = logging.getLogger("order_processor")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
