"""Row store backed directly by a Google Sheets tab."""
from typing import Any, List, Mapping, Optional, Tuple

from googleapiclient.discovery import build

from .base import Record, TabularStore
from ..utils.exceptions import StoreError
from ..utils.logger import get_logger

logger = get_logger()


class SheetsStore(TabularStore):
    """Treats row 1 of a sheet as column headers and every later row as a record."""

    def __init__(self, spreadsheet_id: str, sheet_name: str, credentials=None, service=None):
        self.spreadsheet_id = spreadsheet_id
        self.sheet_name = sheet_name
        self.sheets_service = service or build("sheets", "v4", credentials=credentials, cache_discovery=False)

        logger.info(f"Sheets store initialized for {spreadsheet_id}/{sheet_name}")

    def find_one(self, where: Mapping[str, Any]) -> Optional[Record]:
        try:
            _, rows = self._read()
        except Exception as e:
            raise self._error("findOne", e) from e
        for _, record in rows:
            if _matches(record, where):
                return record
        return None

    def find_all(self, where: Mapping[str, Any]) -> List[Record]:
        try:
            _, rows = self._read()
        except Exception as e:
            raise self._error("findAll", e) from e
        return [record for _, record in rows if _matches(record, where)]

    def create(self, values: Mapping[str, Any]) -> Any:
        """Append values as a new row, extending the header with unseen columns."""
        try:
            headers, _ = self._read()
            new_columns = [key for key in values if key not in headers]
            if new_columns:
                headers = headers + new_columns
                self._write_headers(headers)

            row = [_cell(values.get(header)) for header in headers]
            return self.sheets_service.spreadsheets().values().append(
                spreadsheetId=self.spreadsheet_id,
                range=f"{self.sheet_name}!A1",
                valueInputOption="RAW",
                insertDataOption="INSERT_ROWS",
                body={"values": [row]}
            ).execute()
        except Exception as e:
            raise self._error("create", e) from e

    def update(self, where: Mapping[str, Any], new_values: Mapping[str, Any]) -> Any:
        """Rewrite every matching row; returns the number of rows updated."""
        try:
            headers, rows = self._read()
            new_columns = [key for key in new_values if key not in headers]
            if new_columns:
                headers = headers + new_columns
                self._write_headers(headers)

            data = []
            for row_number, record in rows:
                if not _matches(record, where):
                    continue
                merged = dict(record)
                merged.update(new_values)
                last_col = self._col_letter(len(headers) - 1)
                data.append({
                    "range": f"{self.sheet_name}!A{row_number}:{last_col}{row_number}",
                    "values": [[_cell(merged.get(header)) for header in headers]],
                })

            if data:
                self.sheets_service.spreadsheets().values().batchUpdate(
                    spreadsheetId=self.spreadsheet_id,
                    body={"valueInputOption": "RAW", "data": data}
                ).execute()

            logger.info(f"Updated {len(data)} rows in {self.sheet_name}")
            return {"updated": len(data)}
        except Exception as e:
            raise self._error("update", e) from e

    def _read(self) -> Tuple[List[str], List[Tuple[int, Record]]]:
        """Return headers and (1-indexed sheet row, record) pairs."""
        result = self.sheets_service.spreadsheets().values().get(
            spreadsheetId=self.spreadsheet_id,
            range=self.sheet_name,
            valueRenderOption="UNFORMATTED_VALUE"
        ).execute()

        values = result.get("values", [])
        if not values:
            return [], []

        headers = [str(header) for header in values[0]]
        rows = []
        for index, row in enumerate(values[1:], start=2):
            if not any(cell not in ("", None) for cell in row):
                continue
            record = {
                header: (row[i] if i < len(row) else None)
                for i, header in enumerate(headers)
            }
            rows.append((index, record))
        return headers, rows

    def _write_headers(self, headers: List[str]) -> None:
        self.sheets_service.spreadsheets().values().update(
            spreadsheetId=self.spreadsheet_id,
            range=f"{self.sheet_name}!A1",
            valueInputOption="RAW",
            body={"values": [headers]}
        ).execute()

    def _error(self, operation: str, cause: Exception) -> StoreError:
        logger.error(f"Sheets {operation} operation failed: {cause}")
        return StoreError(operation, cause)

    @staticmethod
    def _col_letter(col_index: int) -> str:
        """Convert 0-indexed column index to letter (0 -> A, 1 -> B, etc.)."""
        result = ""
        temp_index = col_index
        while temp_index >= 0:
            result = chr(temp_index % 26 + ord('A')) + result
            temp_index = temp_index // 26 - 1
        return result


def _matches(record: Mapping[str, Any], where: Mapping[str, Any]) -> bool:
    return all(_cell_equals(record.get(column), expected) for column, expected in where.items())


def _cell_equals(actual: Any, expected: Any) -> bool:
    """Numbers compare numerically; everything else by string value."""
    if isinstance(expected, bool):
        return str(actual).lower() == str(expected).lower()
    if isinstance(expected, (int, float)):
        try:
            return float(actual) == float(expected)
        except (TypeError, ValueError):
            return False
    if actual is None:
        return expected is None
    return str(actual) == str(expected)


def _cell(value: Any) -> Any:
    return "" if value is None else value
