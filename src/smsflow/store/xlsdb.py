"""Client for the xlsDB spreadsheet-backed row store service."""
from typing import Any, Dict, List, Mapping, Optional

import requests

from .base import Record, TabularStore
from ..utils.exceptions import StoreError
from ..utils.logger import get_logger

logger = get_logger()

DEV_URL = "http://localhost:5050/xlsDB"
PROD_URL = "https://xls-db.onrender.com/xlsDB"


class XlsDBStore(TabularStore):
    """Reads and writes one sheet of a spreadsheet through the xlsDB HTTP API."""

    def __init__(
        self,
        sheet_id: str,
        sheet_name: str,
        client_email: Optional[str],
        private_key: Optional[str],
        base_url: str = DEV_URL,
        timeout: float = 15,
        session: Optional[requests.Session] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.sheet_id = sheet_id
        self.sheet_name = sheet_name
        self.client_email = client_email or ""
        self.private_key = private_key or ""
        self.timeout = timeout
        self.session = session or requests.Session()

        self._validate_credentials()

    def _validate_credentials(self) -> None:
        if not self.client_email or not self.private_key:
            logger.warning(
                "xlsDB authentication credentials not configured "
                f"(client email: {bool(self.client_email)}, private key: {bool(self.private_key)})"
            )
        else:
            logger.info(
                f"xlsDB store configured with spreadsheet {self.sheet_id} and sheet {self.sheet_name}"
            )

    def find_one(self, where: Mapping[str, Any]) -> Optional[Record]:
        # get-one predates the service* credential field names
        body = {
            "where": dict(where),
            "sheetId": self.sheet_id,
            "sheetName": self.sheet_name,
            "client_email": self.client_email,
            "private_key": self.private_key,
        }
        data = self._request("findOne", "post", "get-one", body)
        return data or None

    def find_all(self, where: Mapping[str, Any]) -> List[Record]:
        body = self._body(where=dict(where))
        data = self._request("findAll", "post", "get-all", body)
        if not isinstance(data, list):
            error = ValueError(f"expected a list of records, got {type(data).__name__}")
            logger.error(f"xlsDB findAll operation failed: {error}")
            raise StoreError("findAll", error)
        return data

    def create(self, values: Mapping[str, Any]) -> Any:
        body = self._body(values=dict(values))
        return self._request("create", "post", "add", body)

    def update(self, where: Mapping[str, Any], new_values: Mapping[str, Any]) -> Any:
        body = self._body(newValues=dict(new_values), where=dict(where))
        return self._request("update", "put", "update", body)

    def _body(self, **payload: Any) -> Dict[str, Any]:
        payload.update({
            "sheetId": self.sheet_id,
            "sheetName": self.sheet_name,
            "serviceClientEmail": self.client_email,
            "servicePrivateKey": self.private_key,
        })
        return payload

    def _request(self, operation: str, method: str, path: str, body: Dict[str, Any]) -> Any:
        url = f"{self.base_url}/{path}"
        try:
            response = self.session.request(method, url, json=body, timeout=self.timeout)
            response.raise_for_status()
            if not response.content:
                return None
            return response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"xlsDB {operation} operation failed: {e}")
            raise StoreError(operation, e) from e
