from ..errors import ConfigurationError
from .base import RecordStore, StoredRecord

BACKENDS = ("realtime", "firestore")


def build_store(config, firebase_app=None) -> RecordStore:
    """Select the storage backend named by STORE_BACKEND."""
    backend = (config.get("STORE_BACKEND") or "realtime").lower()

    if backend == "realtime":
        from .realtime import RealtimeDatabaseStore
        return RealtimeDatabaseStore(firebase_app, root=config.get("STORE_ROOT", "challans_metadata"))

    if backend == "firestore":
        from .firestore import FirestoreStore
        return FirestoreStore(
            firebase_app,
            collection=config.get("FIRESTORE_COLLECTION", "challans"),
            key_fields=config.get("RECORD_KEY_FIELDS") or ("challan_number",),
        )

    raise ConfigurationError(
        f"Invalid STORE_BACKEND value: {backend}",
        payload={"supported": list(BACKENDS)},
    )


__all__ = ["BACKENDS", "RecordStore", "StoredRecord", "build_store"]
