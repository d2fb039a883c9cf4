"""Tabular store backends for persisted transactions."""
from .base import TabularStore
from .xlsdb import XlsDBStore
from .sheets import SheetsStore
from .auth import get_credentials


def build_store(config, settings) -> TabularStore:
    """Create the store backend selected in settings."""
    if settings.store_backend == "sheets":
        credentials = get_credentials(
            client_email=config.client_email,
            private_key=config.private_key,
            service_account_path=config.service_account_path
        )
        return SheetsStore(config.sheet_id, config.sheet_name, credentials=credentials)

    if config.is_production:
        base_url = config.xlsdb_prod_url or settings.store_prod_url
    else:
        base_url = settings.store_dev_url

    return XlsDBStore(
        sheet_id=config.sheet_id,
        sheet_name=config.sheet_name,
        client_email=config.client_email,
        private_key=config.private_key,
        base_url=base_url,
        timeout=settings.store_request_timeout_seconds
    )


__all__ = ["TabularStore", "XlsDBStore", "SheetsStore", "get_credentials", "build_store"]
