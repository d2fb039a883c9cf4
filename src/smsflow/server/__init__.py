"""HTTP server module."""
from .app import create_app, validate_sms_input

__all__ = ["create_app", "validate_sms_input"]
