"""Authentication utilities for Google APIs."""
import os
from typing import Optional

from google.oauth2 import service_account

from ..utils.logger import get_logger

logger = get_logger()

SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets"
]

TOKEN_URI = "https://oauth2.googleapis.com/token"


def get_credentials(
    client_email: Optional[str] = None,
    private_key: Optional[str] = None,
    service_account_path: Optional[str] = None
):
    """
    Get Google API credentials for a service account.

    Args:
        client_email: Service account email (used with private_key)
        private_key: PEM private key of the service account
        service_account_path: Path to service account JSON (optional)

    Returns:
        Credentials object for Google APIs

    Raises:
        ValueError: If no service account credential is configured
    """
    if client_email and private_key:
        logger.info("Using service account credential pair")
        return service_account.Credentials.from_service_account_info(
            {
                "type": "service_account",
                "client_email": client_email,
                "private_key": private_key,
                "token_uri": TOKEN_URI,
            },
            scopes=SCOPES
        )

    if service_account_path and os.path.exists(service_account_path):
        logger.info("Using service account file authentication")
        return service_account.Credentials.from_service_account_file(
            service_account_path,
            scopes=SCOPES
        )

    raise ValueError(
        "No authentication method configured. "
        "Provide GOOGLE_CLIENT_EMAIL and GOOGLE_PRIVATE_KEY or a service account file."
    )
