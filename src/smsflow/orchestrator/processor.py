"""Per-message ingestion flow: timestamp -> Gemini -> duplicate check -> store.

Each call to `process` is independent; the orchestrator holds no mutable
state between messages, so one instance is shared by all request threads.
The duplicate window ends at the message's resolved timestamp, the same value
written to the stored dateTime column. The duplicate check reads before it writes without a transaction, so two
concurrent deliveries of the same notification can both be persisted.
"""
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from ..gemini.classifier import TransactionClassifier
from ..store.base import TabularStore
from ..transactions.dedup import DuplicateGuard, parse_timestamp, utc_now
from ..transactions.models import DEFAULT_SENDER, IncomingMessage, ProcessingResult, TransactionData
from ..utils.exceptions import PersistenceError, StoreError
from ..utils.logger import get_logger, set_message_context

logger = get_logger()

CONFIDENCE_THRESHOLD = 0.5

OUTCOME_DISCARDED = "discarded"
OUTCOME_DUPLICATE = "duplicate_skipped"
OUTCOME_PERSISTED = "persisted"


class IngestionOrchestrator:
    """Orchestrates the flow for one SMS: Gemini -> DuplicateGuard -> Store."""

    def __init__(
        self,
        classifier: TransactionClassifier,
        duplicate_guard: DuplicateGuard,
        store: TabularStore,
        confidence_threshold: float = CONFIDENCE_THRESHOLD,
        clock: Callable[[], datetime] = utc_now
    ):
        self.classifier = classifier
        self.duplicate_guard = duplicate_guard
        self.store = store
        self.confidence_threshold = confidence_threshold
        self.clock = clock

    def process(self, message: IncomingMessage) -> ProcessingResult:
        """
        Run one message through the pipeline.

        Args:
            message: Inbound SMS

        Returns:
            ProcessingResult with the terminal outcome

        Raises:
            PersistenceError: If the transaction was eligible but could not be stored
        """
        sms_id = uuid.uuid4().hex
        set_message_context(sms_id)
        try:
            return self._process(message, sms_id)
        finally:
            set_message_context(None)

    def _process(self, message: IncomingMessage, sms_id: str) -> ProcessingResult:
        sender = message.sender or DEFAULT_SENDER
        timestamp = self._resolve_timestamp(message.when)
        iso_timestamp = format_iso(timestamp)

        preview = message.sms[:50] + ("..." if len(message.sms) > 50 else "")
        logger.info(
            f"SMS received: length={len(message.sms)} sender={sender} "
            f"timestamp={iso_timestamp} preview={preview!r}"
        )

        transaction = self.classifier.classify(message.sms, sender)
        self._log_transaction_analysis(transaction)

        result = ProcessingResult(
            original_sms=message.sms,
            sender=sender,
            timestamp=iso_timestamp,
            formatted_timestamp=format_local(timestamp),
            message_length=len(message.sms),
            transaction=transaction,
            outcome=OUTCOME_DISCARDED,
            raw_data={"originalText": message.sms, "extractedInfo": transaction.to_dict()}
        )

        if not self.is_eligible(transaction):
            return result

        if self.duplicate_guard.is_duplicate(transaction, now=timestamp):
            logger.info(
                f"Skipping duplicate transaction: amount={transaction.amount} vendor={transaction.vendor}"
            )
            result.outcome = OUTCOME_DUPLICATE
            return result

        record = self.build_record(transaction, sms_id, iso_timestamp, sender)
        try:
            self.store.create(record)
        except Exception as e:
            cause = e.cause if isinstance(e, StoreError) else e
            logger.error(f"Failed to persist transaction: {cause}")
            raise PersistenceError("create", cause) from e

        logger.info(f"Transaction stored: amount={transaction.amount} vendor={transaction.vendor}")
        result.outcome = OUTCOME_PERSISTED
        result.sms_id = sms_id
        result.stored_record = record
        return result

    def is_eligible(self, transaction: TransactionData) -> bool:
        """A result is stored only when it is a transaction with confidence above threshold."""
        if not transaction.is_transaction or transaction.confidence is None:
            return False
        return transaction.confidence > self.confidence_threshold

    @staticmethod
    def build_record(
        transaction: TransactionData,
        sms_id: str,
        iso_timestamp: str,
        sender: str
    ) -> Dict[str, Any]:
        """Row written to the store; dateTime is the processing time, not the SMS text date."""
        return {
            "smsId": sms_id,
            "amount": transaction.amount,
            "vendor": transaction.vendor,
            "category": transaction.category,
            "dateTime": iso_timestamp,
            "currency": transaction.currency,
            "transactionType": transaction.transaction_type,
            "confidence": transaction.confidence,
            "sender": sender,
        }

    def _resolve_timestamp(self, when: Optional[Any]) -> datetime:
        if when is None or when == "":
            return self.clock()

        parsed = parse_timestamp(when)
        if parsed is None:
            logger.warning(f"Unparseable message timestamp {when!r}, using current time")
            return self.clock()
        return parsed

    @staticmethod
    def _log_transaction_analysis(transaction: TransactionData) -> None:
        if transaction.is_transaction:
            logger.info(
                f"Transaction detected: amount={transaction.amount} vendor={transaction.vendor} "
                f"category={transaction.category} type={transaction.transaction_type} "
                f"confidence={transaction.confidence}"
            )
        else:
            logger.debug("Non-transaction message processed")


def format_iso(timestamp: datetime) -> str:
    """UTC ISO-8601 with millisecond precision and a Z suffix."""
    utc = timestamp.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_local(timestamp: datetime) -> str:
    """Human-readable timestamp in the server's local zone and locale."""
    return timestamp.astimezone().strftime("%c")
