"""Duplicate suppression for re-delivered bank notifications."""
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Mapping, Optional

from .models import TransactionData
from ..store.base import TabularStore
from ..utils.logger import get_logger

logger = get_logger()

DEFAULT_WINDOW_SECONDS = 60

TIMESTAMP_FIELDS = ("dateTime", "timestamp")

# Smallest accepted epoch-ms value (1973-03-03); digit strings such as
# 20250827 are compact dates, not epochs.
MIN_EPOCH_MS = 10 ** 11


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DuplicateGuard:
    """Flags a candidate as a re-report when a same-amount record was stored recently.

    Matching is amount-only inside a trailing time window. Two distinct
    purchases of the same amount inside the window are indistinguishable
    from a re-delivery and will be suppressed.
    """

    def __init__(
        self,
        store: TabularStore,
        window_seconds: int = DEFAULT_WINDOW_SECONDS,
        clock: Callable[[], datetime] = utc_now
    ):
        self.store = store
        self.window = timedelta(seconds=window_seconds)
        self.clock = clock

    def is_duplicate(self, candidate: TransactionData, now: Optional[datetime] = None) -> bool:
        """
        Check whether the candidate was already stored inside the window.

        Args:
            candidate: Classified transaction about to be persisted
            now: Window end; defaults to the guard's clock

        Returns:
            True when a stored same-amount record falls in [now - window, now]
        """
        if candidate.amount is None:
            return False

        window_end = _as_utc(now or self.clock())
        window_start = window_end - self.window

        try:
            records = self.store.find_all(where={"amount": candidate.amount})
        except Exception as e:
            logger.error(f"Duplicate lookup failed, treating as new transaction: {e}")
            return False

        for record in records or []:
            if not isinstance(record, Mapping):
                continue
            stored_at = record_timestamp(record)
            if stored_at is None:
                continue
            if window_start <= stored_at <= window_end:
                logger.info(
                    f"Duplicate transaction detected: amount={candidate.amount} "
                    f"stored at {stored_at.isoformat()}"
                )
                return True

        return False


def record_timestamp(record: Mapping[str, Any]) -> Optional[datetime]:
    """Parse the stored time of a record, trying dateTime before timestamp."""
    for field_name in TIMESTAMP_FIELDS:
        parsed = parse_timestamp(record.get(field_name))
        if parsed is not None:
            return parsed
    return None


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse ISO-8601 strings or epoch milliseconds (>= MIN_EPOCH_MS) into an aware UTC datetime."""
    if value is None or isinstance(value, bool) or value == "":
        return None

    if isinstance(value, datetime):
        return _as_utc(value)

    if isinstance(value, (int, float)):
        return _from_epoch_ms(value)

    text = str(value).strip()
    if re.fullmatch(r"\d+(\.\d+)?", text):
        return _from_epoch_ms(float(text))

    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return _as_utc(datetime.fromisoformat(text))
    except ValueError:
        return None


def _from_epoch_ms(value: float) -> Optional[datetime]:
    if value < MIN_EPOCH_MS:
        return None
    try:
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def _as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
