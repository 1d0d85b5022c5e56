from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional


@dataclass
class StoredRecord:
    """A challan located in the store, plus the backend handle needed to write it."""

    record_key: str
    location: str
    data: Dict[str, Any] = field(default_factory=dict)
    handle: Any = None


class RecordStore(ABC):
    """
    Storage port used by the reconciler.

    Implementations wrap backend failures in TransientStoreError so callers
    can tell an outage apart from a record that does not exist.
    """

    name = "abstract"

    @abstractmethod
    def get(self, record_key: str, contact_address: Optional[str] = None) -> Optional[StoredRecord]:
        """Direct lookup. Returns None when the record is not at its expected address."""

    @abstractmethod
    def scan(self, record_key: str) -> Iterator[StoredRecord]:
        """Yield every record matching ``record_key`` outside the direct address."""

    @abstractmethod
    def update(self, record: StoredRecord, fields: Dict[str, Any]) -> None:
        """Merge ``fields`` into the record with a single write."""

    def describe(self) -> Dict[str, Any]:
        return {"backend": self.name}
