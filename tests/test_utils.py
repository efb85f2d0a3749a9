"""Essential tests for utility modules - Config and Logging."""

import logging
from pathlib import Path

from order_processor.utils.config import Config
from order_processor.utils.logging import get_logger, setup_logging


def test_config_default_values():
    """Test config provides reasonable defaults."""
    config = Config()  # No .env file

    assert config.get("log_level") == "INFO"
    assert config.get("csv_delimiter") == ","
    assert config.products_path == Path("Data") / "products.json"
    assert config.ingredients_path == Path("Data") / "ingredients.json"
    assert config.orders_path == Path("Data") / "orders.json"


def test_config_loads_env_file(env_file, data_dir):
    """Test that config reads settings from an explicit .env file."""
    config = Config(str(env_file))

    assert config["data_dir"] == str(data_dir)
    assert config.get("log_level") == "DEBUG"
    assert config.orders_path == data_dir / "orders.json"
    assert "orders_file" in config


def test_config_missing_env_file_uses_defaults(tmp_path, monkeypatch):
    """Test that a missing .env file falls back to defaults."""
    monkeypatch.delenv("DATA_DIR", raising=False)
    config = Config(str(tmp_path / "absent.env"))
    assert config.get("data_dir") == "Data"


def test_logging_setup():
    """Test that logging can be set up for CLI usage."""
    logger = setup_logging(level="INFO")

    assert logger.name == "order_processor"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1


def test_logging_setup_debug_with_file(tmp_path):
    """Test DEBUG level with a log file handler."""
    log_file = tmp_path / "logs" / "run.log"
    logger = setup_logging("DEBUG", log_file=str(log_file))

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2
    assert log_file.parent.exists()
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()


def test_get_logger_names():
    """Test that module loggers hang off the package logger."""
    assert get_logger("order_processor.cli").name == "order_processor.cli"
    assert get_logger("reports").name == "order_processor.reports"


def test_log_file_keeps_debug_records_below_console_level(tmp_path, capsys):
    """Test that the log file records DEBUG even when the console shows WARNING."""
    log_file = tmp_path / "run.log"
    logger = setup_logging("WARNING", log_file=str(log_file))
    module_logger = get_logger("order_processing.processor")

    module_logger.debug("Validation Error: Order ORD1: Quantity must be positive")
    module_logger.warning("Skipping order row: Row 2: quantity")
    for handler in logger.handlers:
        handler.flush()

    console = capsys.readouterr().err
    assert "WARNING: Skipping order row: Row 2: quantity" in console
    assert "Validation Error" not in console

    written = log_file.read_text(encoding="utf-8")
    assert "DEBUG" in written
    assert "Validation Error: Order ORD1: Quantity must be positive" in written
    assert "order_processor.order_processing.processor" in written
    assert "test_log_file_keeps_debug_records_below_console_level" in written


def test_console_level_without_file():
    """Test that without a log file the logger follows the console level."""
    logger = setup_logging("ERROR")
    assert logger.level == logging.ERROR
    assert logger.handlers[0].level == logging.ERROR
