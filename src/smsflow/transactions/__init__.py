"""Transaction model, normalization and duplicate detection."""
from .models import TransactionData, IncomingMessage, ProcessingResult, CATEGORIES, TRANSACTION_TYPES
from .normalizer import normalize
from .dedup import DuplicateGuard

__all__ = [
    "TransactionData",
    "IncomingMessage",
    "ProcessingResult",
    "CATEGORIES",
    "TRANSACTION_TYPES",
    "normalize",
    "DuplicateGuard",
]
