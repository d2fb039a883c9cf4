"""Custom exception classes for SMSFlow."""


class SmsFlowError(Exception):
    """Base exception for SMSFlow."""
    pass


class ConfigError(SmsFlowError):
    """Configuration-related errors."""

    def __init__(self, message: str, missing: list = None):
        super().__init__(message)
        self.missing = list(missing or [])


class ClassificationError(SmsFlowError):
    """Classification call or response parsing errors."""
    pass


class StoreError(SmsFlowError):
    """Tabular store operation failed."""

    def __init__(self, operation: str, cause: Exception):
        super().__init__(f"Store {operation} error: {cause}")
        self.operation = operation
        self.cause = cause


class PersistenceError(StoreError):
    """Creating a transaction record failed; fatal for the request."""
    pass
