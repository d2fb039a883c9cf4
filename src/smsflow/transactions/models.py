"""Data models for SMS transaction processing."""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

CATEGORIES = (
    "food",
    "transport",
    "shopping",
    "utilities",
    "entertainment",
    "healthcare",
    "other",
)

TRANSACTION_TYPES = ("debit", "credit")

DEFAULT_SENDER = "Unknown"


@dataclass(frozen=True)
class TransactionData:
    """Structured result of classifying one SMS."""
    is_transaction: bool
    confidence: Optional[float] = None
    amount: Optional[float] = None
    vendor: Optional[str] = None
    category: Optional[str] = None
    date_time: Optional[str] = None
    currency: Optional[str] = None
    transaction_type: Optional[str] = None

    @classmethod
    def rejected(cls) -> "TransactionData":
        """Fail-closed result used whenever classification cannot be trusted."""
        return cls(is_transaction=False, confidence=0.0)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the camelCase field names of the wire format."""
        return {
            "isTransaction": self.is_transaction,
            "amount": self.amount,
            "vendor": self.vendor,
            "category": self.category,
            "dateTime": self.date_time,
            "currency": self.currency,
            "transactionType": self.transaction_type,
            "confidence": self.confidence,
        }


@dataclass
class IncomingMessage:
    """Raw inbound SMS as forwarded by the upstream client."""
    sms: str
    sender: str = DEFAULT_SENDER
    when: Optional[Union[int, float, str]] = None


@dataclass
class ProcessingResult:
    """Outcome of running one message through the ingestion pipeline."""
    original_sms: str
    sender: str
    timestamp: str
    formatted_timestamp: str
    message_length: int
    transaction: TransactionData
    outcome: str
    sms_id: Optional[str] = None
    stored_record: Dict[str, Any] = field(default_factory=dict)
    # {"originalText": ..., "extractedInfo": ...} kept for debugging, never stored
    raw_data: Dict[str, Any] = field(default_factory=dict)
