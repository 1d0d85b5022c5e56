import logging
from typing import Any, Dict, Iterator, Optional

from firebase_admin import db
from firebase_admin.exceptions import FirebaseError

from ..errors import TransientStoreError
from .base import RecordStore, StoredRecord

logger = logging.getLogger(__name__)


def email_to_path(email: Optional[str]) -> str:
    """Realtime Database keys cannot contain '.', so emails are stored with ','."""
    return (email or "").replace(".", ",")


# Characters firebase_admin rejects in a path segment; "/" would nest the path instead
ILLEGAL_KEY_CHARS = frozenset(".$#[]/")


def is_addressable(segment: str) -> bool:
    return bool(segment) and not ILLEGAL_KEY_CHARS.intersection(segment)


class RealtimeDatabaseStore(RecordStore):
    """
    Challans stored hierarchically as ``<root>/<email-path>/<challan-number>``.
    """

    name = "Firebase Realtime Database"

    def __init__(self, firebase_app=None, root="challans_metadata"):
        self.firebase_app = firebase_app
        self.root = root.strip("/")

    def _ref(self, path):
        return db.reference(path, app=self.firebase_app)

    def get(self, record_key, contact_address=None):
        email_path = email_to_path(contact_address)
        if not email_path:
            logger.info("No email address on notification, skipping direct lookup",
                        extra={"record_key": record_key})
            return None

        if not (is_addressable(email_path) and is_addressable(record_key)):
            logger.warning("Challan path contains characters Firebase cannot address",
                           extra={"record_key": record_key, "email_path": email_path})
            return None

        path = f"{self.root}/{email_path}/{record_key}"
        ref = self._ref(path)
        try:
            value = ref.get()
        except FirebaseError as e:
            raise TransientStoreError(str(e), payload={"path": path}) from e

        if value is None:
            return None
        return StoredRecord(record_key=record_key, location=path, data=value, handle=ref)

    def scan(self, record_key) -> Iterator[StoredRecord]:
        if not is_addressable(record_key):
            logger.warning("Challan number cannot be stored in Firebase, nothing to scan",
                           extra={"record_key": record_key})
            return

        root_ref = self._ref(self.root)
        try:
            partitions = root_ref.get() or {}
        except FirebaseError as e:
            raise TransientStoreError(str(e), payload={"path": self.root}) from e

        for email_path in sorted(partitions):
            challans = partitions[email_path]
            if not isinstance(challans, dict) or record_key not in challans:
                continue
            logger.info("Found challan under email", extra={"email_path": email_path})
            yield StoredRecord(
                record_key=record_key,
                location=f"{self.root}/{email_path}/{record_key}",
                data=challans[record_key],
                handle=root_ref.child(email_path).child(record_key),
            )

    def update(self, record: StoredRecord, fields: Dict[str, Any]) -> None:
        try:
            record.handle.update(fields)
        except FirebaseError as e:
            raise TransientStoreError(str(e), payload={"path": record.location}) from e

    def describe(self):
        return {"backend": self.name, "root": self.root}
