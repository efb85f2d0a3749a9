"""
Configuration utilities for the Pizzeria Order Processor CLI tool.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv


class Config:
    """Configuration manager for the order processor."""

    def __init__(self, env_file: Optional[str] = None) -> None:
        """Initialize configuration.

        If an env_file path is provided, load environment variables from it.
        Otherwise, do not auto-load a .env file to keep defaults predictable.
        """
        self.env_file = env_file
        self._load_environment()
        self._config = self._load_config()

    def _load_environment(self) -> None:
        """Load environment variables from explicit .env file if provided."""
        if not self.env_file:
            return
        env_path = Path(self.env_file)
        if env_path.exists():
            load_dotenv(env_path)

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        return {
            # Core settings
            "log_level": self._get_str("LOG_LEVEL", default="INFO"),
            # Data file locations
            "data_dir": self._get_str("DATA_DIR", default="Data"),
            "products_file": self._get_str("PRODUCTS_FILE", default="products.json"),
            "ingredients_file": self._get_str("INGREDIENTS_FILE", default="ingredients.json"),
            "orders_file": self._get_str("ORDERS_FILE", default="orders.json"),
            # Delimited order files
            "csv_delimiter": self._get_str("CSV_DELIMITER", default=","),
        }

    def _get_str(self, key: str, default: str = "") -> str:
        """Get string configuration value."""
        if self.env_file is None:
            return default
        return os.getenv(key, default)

    @property
    def data_dir(self) -> Path:
        return Path(self._config["data_dir"])

    @property
    def products_path(self) -> Path:
        return self.data_dir / self._config["products_file"]

    @property
    def ingredients_path(self) -> Path:
        return self.data_dir / self._config["ingredients_file"]

    @property
    def orders_path(self) -> Path:
        return self.data_dir / self._config["orders_file"]

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value."""
        return self._config.get(key, default)

    def __getitem__(self, key: str) -> Any:
        """Get configuration value using bracket notation."""
        return self._config[key]

    def __contains__(self, key: str) -> bool:
        """Check if configuration key exists."""
        return key in self._config
