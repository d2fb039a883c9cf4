"""Maps raw classifier output onto the canonical TransactionData shape."""
import math
import re
from typing import Any, Mapping, Optional

from .models import CATEGORIES, TRANSACTION_TYPES, TransactionData

_NULL_STRINGS = {"", "null", "none", "unknown", "n/a", "na"}


def normalize(raw: Mapping[str, Any]) -> TransactionData:
    """
    Apply the null-default policy to a parsed classifier response.

    Args:
        raw: Mapping with camelCase keys as returned by the classifier

    Returns:
        Immutable TransactionData; non-transactions keep only confidence
    """
    confidence = _parse_confidence(raw.get("confidence"))

    if not raw.get("isTransaction"):
        return TransactionData(is_transaction=False, confidence=confidence)

    category = _clean_str(raw.get("category"))
    if category is not None:
        category = category.lower()
        if category not in CATEGORIES:
            category = "other"

    transaction_type = _clean_str(raw.get("transactionType"))
    if transaction_type is not None:
        transaction_type = transaction_type.lower()
        if transaction_type not in TRANSACTION_TYPES:
            transaction_type = None

    currency = _clean_str(raw.get("currency"))

    return TransactionData(
        is_transaction=True,
        confidence=confidence,
        amount=parse_amount(raw.get("amount")),
        vendor=_clean_str(raw.get("vendor")),
        category=category,
        date_time=_clean_str(raw.get("dateTime")),
        currency=currency.upper() if currency else None,
        transaction_type=transaction_type
    )


def parse_amount(value: Any) -> Optional[float]:
    """Parse a positive amount, removing currency symbols and separators."""
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        amount = float(value)
    else:
        cleaned = re.sub(r"[^\d.\-]", "", str(value).replace(",", ""))
        # "Rs." prefixes leave a stray leading dot behind
        cleaned = cleaned.lstrip(".")
        try:
            amount = float(cleaned)
        except ValueError:
            return None

    if math.isnan(amount) or math.isinf(amount) or amount <= 0:
        return None
    return amount


def _parse_confidence(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        confidence = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(confidence):
        return None
    return min(max(confidence, 0.0), 1.0)


def _clean_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    if text.lower() in _NULL_STRINGS:
        return None
    return text
