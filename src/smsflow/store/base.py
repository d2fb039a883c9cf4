"""Common interface for tabular transaction stores."""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional

Record = Dict[str, Any]


class TabularStore(ABC):
    """Row store addressed by column-equality filters.

    Every operation raises StoreError carrying the operation name when the
    backend fails. No operation retries.
    """

    @abstractmethod
    def find_one(self, where: Mapping[str, Any]) -> Optional[Record]:
        """Return the first record matching every column in `where`."""

    @abstractmethod
    def find_all(self, where: Mapping[str, Any]) -> List[Record]:
        """Return all records matching every column in `where`."""

    @abstractmethod
    def create(self, values: Mapping[str, Any]) -> Any:
        """Append one record."""

    @abstractmethod
    def update(self, where: Mapping[str, Any], new_values: Mapping[str, Any]) -> Any:
        """Overwrite `new_values` on every record matching `where`."""
