"""Configuration for the inventory service."""

from .logging_config import LoggingConfig, setup_logging
from .settings import InventorySettings, get_settings

__all__ = [
    "InventorySettings",
    "LoggingConfig",
    "get_settings",
    "setup_logging",
]
