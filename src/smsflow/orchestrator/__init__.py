"""Ingestion orchestration module."""
from .processor import (
    IngestionOrchestrator,
    CONFIDENCE_THRESHOLD,
    OUTCOME_DISCARDED,
    OUTCOME_DUPLICATE,
    OUTCOME_PERSISTED,
)

__all__ = [
    "IngestionOrchestrator",
    "CONFIDENCE_THRESHOLD",
    "OUTCOME_DISCARDED",
    "OUTCOME_DUPLICATE",
    "OUTCOME_PERSISTED",
]
