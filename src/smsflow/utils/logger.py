"""Logging infrastructure with message context."""
import logging
import os
import sys
import threading
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Optional


class MessageContextFilter(logging.Filter):
    """Add the current message id to log records (per request thread)."""

    def __init__(self):
        super().__init__()
        self._local = threading.local()

    @property
    def sms_id(self) -> Optional[str]:
        return getattr(self._local, "sms_id", None)

    @sms_id.setter
    def sms_id(self, value: Optional[str]):
        self._local.sms_id = value

    def filter(self, record):
        """Add sms_id to record."""
        record.sms_id = self.sms_id or "system"
        return True


class SmsFlowLogger:
    """Centralized logging manager."""

    def __init__(
        self,
        log_level: str = "INFO",
        log_dir: Optional[str] = None,
        max_file_size_mb: int = 10,
        backup_count: int = 30
    ):
        self.log_dir = Path(log_dir or os.getenv("SMSFLOW_LOG_DIR", "logs"))
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.log_file = self.log_dir / "combined.log"
        self.error_file = self.log_dir / "error.log"
        self.context_filter = MessageContextFilter()

        self.logger = logging.getLogger("smsflow")
        self.logger.setLevel(getattr(logging, log_level.upper()))
        self.logger.propagate = False

        # Remove existing handlers
        self.logger.handlers.clear()

        file_handler = RotatingFileHandler(
            self.log_file,
            maxBytes=max_file_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8"
        )
        file_handler.setLevel(logging.DEBUG)

        error_handler = RotatingFileHandler(
            self.error_file,
            maxBytes=max_file_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8"
        )
        error_handler.setLevel(logging.ERROR)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.INFO)

        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] [sms:%(sms_id)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

        for handler in (file_handler, error_handler, console_handler):
            handler.setFormatter(formatter)
            handler.addFilter(self.context_filter)
            self.logger.addHandler(handler)

    def set_message_context(self, sms_id: Optional[str]):
        """Set current message context for logging."""
        self.context_filter.sms_id = sms_id

    def get_logger(self) -> logging.Logger:
        """Get the configured logger."""
        return self.logger


# Global logger instance
_logger_instance: Optional[SmsFlowLogger] = None


def get_logger(log_level: str = "INFO") -> logging.Logger:
    """Get or create global logger instance."""
    global _logger_instance
    if _logger_instance is None:
        _logger_instance = SmsFlowLogger(log_level)
    return _logger_instance.get_logger()


def configure_logging(
    log_level: str,
    log_dir: Optional[str] = None,
    max_file_size_mb: int = 10,
    backup_count: int = 30
) -> logging.Logger:
    """Rebuild the global logger from loaded settings."""
    global _logger_instance
    _logger_instance = SmsFlowLogger(log_level, log_dir, max_file_size_mb, backup_count)
    return _logger_instance.get_logger()


def set_message_context(sms_id: Optional[str]):
    """Set message context for logging."""
    global _logger_instance
    if _logger_instance:
        _logger_instance.set_message_context(sms_id)
