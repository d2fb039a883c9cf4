"""Utility modules."""
from .logger import get_logger, configure_logging, set_message_context
from .exceptions import (
    SmsFlowError,
    ConfigError,
    ClassificationError,
    StoreError,
    PersistenceError
)

__all__ = [
    "get_logger",
    "configure_logging",
    "set_message_context",
    "SmsFlowError",
    "ConfigError",
    "ClassificationError",
    "StoreError",
    "PersistenceError"
]
