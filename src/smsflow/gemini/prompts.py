"""Prompt template for SMS transaction classification."""
import json

from ..transactions.models import CATEGORIES

PENDING_MARKERS = ("will be", "pending", "scheduled", "authorize", "to be", "upcoming")
DEBIT_VERBS = ("debited", "spent", "purchase", "withdrawn")
CREDIT_VERBS = ("credited", "received", "deposit")


def _quoted(words) -> str:
    return ", ".join(f'"{word}"' for word in words)


def build_transaction_prompt(sms_text: str, sender: str) -> str:
    """Build the classification prompt for one message. Same inputs, same prompt."""
    return f"""You are a strict classifier of bank SMS notifications.

Decide whether the SMS below reports a CONFIRMED debit or credit on a bank account
that has already happened. If it does, extract the transaction details.

Sender: {json.dumps(sender, ensure_ascii=False)}
SMS Text: {json.dumps(sms_text, ensure_ascii=False)}

Return a JSON object with exactly this structure:
{{
  "isTransaction": boolean,
  "amount": number or null,
  "vendor": string or null,
  "category": one of {json.dumps(list(CATEGORIES))} or null,
  "dateTime": string (ISO 8601) or null,
  "currency": string (ISO 4217 code such as "INR", "USD", "EUR") or null,
  "transactionType": "debit" or "credit" or null,
  "confidence": number between 0 and 1
}}

Rules:
1. Only messages sent by a bank about the account holder's own account are eligible.
2. Promotional offers, OTPs, payment requests, bill or payment reminders are NOT transactions.
3. Any message about money that has not moved yet is NOT a transaction. Treat these
   markers as pending/future language: {_quoted(PENDING_MARKERS)}.
4. Extract amount only when it is explicitly tied to a debit or credit action.
   Return it as a plain number without currency symbols or thousands separators.
5. Infer category from what the money was spent on or received for.
6. transactionType is "debit" for {_quoted(DEBIT_VERBS)} and "credit" for
   {_quoted(CREDIT_VERBS)}.
7. dateTime is the date/time written in the SMS, converted to ISO 8601; null if absent.
8. Any field you cannot determine must be null.
9. If isTransaction is false, every field except confidence must be null.
10. Be conservative: if you are unsure, set isTransaction to false.
11. confidence is how certain you are that this is a confirmed bank transaction.

Return only the JSON object, no additional text.
"""
