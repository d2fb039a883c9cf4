"""SMSFlow: bank SMS transaction ingestion with Gemini and spreadsheet storage."""

__version__ = "1.0.0"
