"""Gemini-backed classification of SMS messages into transactions."""
import json
import re
from typing import Any, Dict, Optional, Union

from google import genai
from google.genai import types
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .prompts import build_transaction_prompt
from ..transactions.models import TransactionData
from ..transactions.normalizer import normalize
from ..utils.exceptions import ClassificationError
from ..utils.logger import get_logger

logger = get_logger()

DEFAULT_MODEL = "gemini-2.0-flash"


class ClassifierResponse(BaseModel):
    """Pydantic schema for the classifier's JSON answer."""
    model_config = ConfigDict(extra="ignore")

    isTransaction: bool
    confidence: float = Field(ge=0, le=1)
    amount: Optional[Union[float, str]] = None
    vendor: Optional[str] = None
    category: Optional[str] = None
    dateTime: Optional[str] = None
    currency: Optional[str] = None
    transactionType: Optional[str] = None


class TransactionClassifier:
    """Turns SMS text into TransactionData using Gemini; fails closed on any error."""

    def __init__(
        self,
        client=None,
        model_name: str = DEFAULT_MODEL,
        temperature: float = 0.0
    ):
        """
        Initialize the classifier.

        Args:
            client: google.genai Client (or compatible fake); None disables calls
            model_name: Gemini model used for classification
            temperature: Sampling temperature passed with every request
        """
        self.client = client
        self.model_name = model_name
        self.temperature = temperature

        if self.client is None:
            logger.error("GEMINI_API_KEY not configured; every message will be classified as non-transaction")
        else:
            logger.info(f"Transaction classifier initialized with {self.model_name}")

    @classmethod
    def from_api_key(
        cls,
        api_key: Optional[str],
        model_name: str = DEFAULT_MODEL,
        temperature: float = 0.0,
        timeout_seconds: Optional[float] = None
    ) -> "TransactionClassifier":
        """Build a classifier with a real Gemini client."""
        if not api_key:
            return cls(None, model_name, temperature)

        http_options = None
        if timeout_seconds:
            # google-genai expects milliseconds
            http_options = types.HttpOptions(timeout=int(timeout_seconds * 1000))
        client = genai.Client(api_key=api_key, http_options=http_options)
        return cls(client, model_name, temperature)

    def classify(self, sms_text: str, sender: str) -> TransactionData:
        """
        Classify one SMS.

        Args:
            sms_text: Message body
            sender: Sender identifier as reported by the phone

        Returns:
            TransactionData; TransactionData.rejected() on any failure
        """
        try:
            text = self._generate(build_transaction_prompt(sms_text, sender))
            logger.debug(f"Gemini response received ({len(text)} chars)")
            return normalize(self._parse_response(text))
        except Exception as e:
            logger.error(f"Gemini classification failed: {e} (sms preview: {sms_text[:50]!r})")
            return TransactionData.rejected()

    def _generate(self, prompt: str) -> str:
        if self.client is None:
            raise ClassificationError("GEMINI_API_KEY not configured")

        response = self.client.models.generate_content(
            model=self.model_name,
            contents=prompt,
            config=types.GenerateContentConfig(
                temperature=self.temperature,
                response_mime_type="application/json"
            )
        )

        if not response.text:
            raise ClassificationError("Gemini returned empty response")
        return response.text

    def _parse_response(self, response_text: str) -> Dict[str, Any]:
        """Parse the JSON object out of the model's answer."""
        cleaned = response_text.strip()

        # Remove markdown code fences
        cleaned = re.sub(r"```(?:json)?", "", cleaned, flags=re.IGNORECASE).strip()

        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError:
            data = self._parse_repaired(cleaned, response_text)

        if not isinstance(data, dict):
            raise ClassificationError(f"Expected a JSON object, got {type(data).__name__}")

        try:
            validated = ClassifierResponse(**data)
        except ValidationError as e:
            raise ClassificationError(f"Gemini response does not match expected schema: {e}")

        return validated.model_dump()

    @staticmethod
    def _parse_repaired(cleaned: str, response_text: str) -> Any:
        """Second attempt for answers that are not valid JSON as returned."""
        # Normalize smart quotes to standard double-quote
        cleaned = cleaned.replace("“", '"').replace("”", '"')

        # Remove trailing commas before closing brackets/braces
        cleaned = re.sub(r",\s*([\]}])", r"\1", cleaned)

        # If the model wrapped JSON in text, keep only the object
        json_match = re.search(r"\{.*\}", cleaned, re.DOTALL)
        if json_match:
            cleaned = json_match.group(0)

        try:
            return json.loads(cleaned)
        except json.JSONDecodeError as e:
            logger.debug(f"Response text: {response_text[:500]}")
            raise ClassificationError(f"Invalid JSON response from Gemini: {e}")
