import logging
from typing import Any, Dict, Iterator, Sequence

from firebase_admin import firestore
from google.api_core.exceptions import GoogleAPIError
from google.cloud.firestore_v1.base_query import FieldFilter

from ..errors import TransientStoreError
from .base import RecordStore, StoredRecord

logger = logging.getLogger(__name__)


class FirestoreStore(RecordStore):
    """
    Challans stored as documents of one flat collection, matched on a
    challan-number field. Field names are tried in order.
    """

    name = "Cloud Firestore"

    def __init__(self, firebase_app=None, collection="challans",
                 key_fields: Sequence[str] = ("challan_number", "challanNumber"), client=None):
        if not key_fields:
            raise ValueError("FirestoreStore needs at least one record key field")
        self.collection_name = collection
        self.key_fields = list(key_fields)
        self.client = client or firestore.client(app=firebase_app)

    @property
    def collection(self):
        return self.client.collection(self.collection_name)

    def _query_first(self, field_name, record_key):
        try:
            query = self.collection.where(filter=FieldFilter(field_name, "==", record_key)).limit(1)
            for snapshot in query.stream():
                return snapshot
        except GoogleAPIError as e:
            raise TransientStoreError(str(e), payload={"collection": self.collection_name}) from e
        return None

    def _to_record(self, record_key, snapshot):
        return StoredRecord(
            record_key=record_key,
            location=snapshot.reference.path,
            data=snapshot.to_dict() or {},
            handle=snapshot.reference,
        )

    def get(self, record_key, contact_address=None):
        snapshot = self._query_first(self.key_fields[0], record_key)
        if snapshot is None:
            return None
        return self._to_record(record_key, snapshot)

    def scan(self, record_key) -> Iterator[StoredRecord]:
        # A "/" would make the id a nested path, which document() rejects
        if "/" not in record_key:
            doc_ref = self.collection.document(record_key)
            try:
                snapshot = doc_ref.get()
            except GoogleAPIError as e:
                raise TransientStoreError(str(e), payload={"collection": self.collection_name}) from e
            if snapshot.exists:
                logger.info("Found challan by document id", extra={"document": doc_ref.path})
                yield self._to_record(record_key, snapshot)

        for field_name in self.key_fields[1:]:
            snapshot = self._query_first(field_name, record_key)
            if snapshot is not None:
                logger.info("Found challan by alternate field", extra={"field": field_name})
                yield self._to_record(record_key, snapshot)

    def update(self, record: StoredRecord, fields: Dict[str, Any]) -> None:
        try:
            record.handle.update(fields)
        except GoogleAPIError as e:
            raise TransientStoreError(str(e), payload={"document": record.location}) from e

    def describe(self):
        return {"backend": self.name, "collection": self.collection_name, "key_fields": self.key_fields}
