"""Gemini classification gateway."""
from .classifier import TransactionClassifier, ClassifierResponse
from .prompts import build_transaction_prompt

__all__ = ["TransactionClassifier", "ClassifierResponse", "build_transaction_prompt"]
