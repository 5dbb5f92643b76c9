"""Essential tests for utility modules - Config and Logging."""

import logging
import os
from unittest.mock import patch

from dajaj_pos.utils.config import Config
from dajaj_pos.utils.logging import get_logger, setup_logging


def test_config_default_values():
    """Test config provides reasonable defaults."""
    config = Config()  # No .env file

    assert config.get("mongo_db") == "DAJAJ_POS"
    assert config.get("bills_collection") == "bills"
    assert config.get("counters_collection") == "counters"
    assert config.get("log_level") == "INFO"
    assert config.get("token_max_attempts") == 10
    assert config.get("mongo_url") == ""


def test_config_ignores_environment_without_env_file(mock_env):
    """Without an env file the defaults win over the process environment."""
    config = Config()
    assert config.get("mongo_db") == "DAJAJ_POS"


def test_config_loads_env_file(tmp_path):
    """Test that config reads the bill store settings from an explicit .env file."""
    env_file = tmp_path / ".env"
    env_file.write_text(
        "DB_CONNECTION_URL=mongodb://db.local:27017\n"
        "DB_NAME=POS_PROD\n"
        "TOKEN_MAX_ATTEMPTS=5\n"
        "APP_URL=https://bills.dajaj.in\n"
    )
    with patch.dict(os.environ, {}, clear=True):
        config = Config(str(env_file))

    assert config["mongo_url"] == "mongodb://db.local:27017"
    assert config["mongo_db"] == "POS_PROD"
    assert config["token_max_attempts"] == 5
    assert config["app_url"] == "https://bills.dajaj.in"
    assert "mongo_url" in config
    assert "missing" not in config


def test_config_bad_integer_falls_back(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("TOKEN_MAX_ATTEMPTS=lots\n")
    with patch.dict(os.environ, {}, clear=True):
        config = Config(str(env_file))
    assert config["token_max_attempts"] == 10


def test_logging_setup():
    """Test that logging can be set up for CLI usage."""
    logger = setup_logging(level="INFO")

    assert logger.name == "dajaj_pos"
    assert logger.level == logging.INFO


def test_logging_setup_debug_and_default():
    assert setup_logging("DEBUG").level == logging.DEBUG
    assert setup_logging().level == logging.INFO


def test_logging_file_handler(tmp_path):
    log_file = tmp_path / "logs" / "pos.log"
    logger = setup_logging(level="INFO", log_file=str(log_file))

    logger.info("bill issued")
    for handler in logger.handlers:
        handler.flush()

    assert log_file.exists()
    assert "bill issued" in log_file.read_text()


def test_get_logger_is_child_of_package_logger():
    assert get_logger("dajaj_pos.billing.issuance").name == "dajaj_pos.billing.issuance"
    assert get_logger("helpers").name == "dajaj_pos.helpers"
