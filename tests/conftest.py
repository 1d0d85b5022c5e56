import pytest
from faker import Faker

from payfast_bridge import create_app
from payfast_bridge.config import TestingConfig
from payfast_bridge.notifications import compute_validation_hash
from payfast_bridge.storage.base import RecordStore, StoredRecord
from payfast_bridge.storage.realtime import email_to_path

fake = Faker()


def pytest_configure(config):
    config.addinivalue_line(
        "markers",
        "payment: mark test as payment-notification related"
    )
    config.addinivalue_line(
        "markers",
        "storage: mark test as storage-backend related"
    )


class FakeRecordStore(RecordStore):
    """
    In-memory store shaped like the Realtime Database tree:
    ``{email_path: {challan_number: data}}``. Every call is recorded.
    """

    name = "In-memory test store"

    def __init__(self, partitions=None, fail_with=None):
        self.partitions = partitions if partitions is not None else {}
        self.fail_with = fail_with
        self.calls = []

    def _record(self, *call):
        self.calls.append(call)
        if self.fail_with is not None:
            raise self.fail_with

    def add(self, email, record_key, **data):
        data.setdefault("status", "unpaid")
        self.partitions.setdefault(email_to_path(email), {})[record_key] = data
        return data

    def lookup(self, email, record_key):
        return self.partitions[email_to_path(email)][record_key]

    def get(self, record_key, contact_address=None):
        self._record("get", record_key, contact_address)
        email_path = email_to_path(contact_address)
        if not email_path:
            return None
        data = self.partitions.get(email_path, {}).get(record_key)
        if data is None:
            return None
        return StoredRecord(record_key, f"{email_path}/{record_key}", data, handle=data)

    def scan(self, record_key):
        self._record("scan", record_key)
        for email_path in sorted(self.partitions):
            data = self.partitions[email_path].get(record_key)
            if data is not None:
                yield StoredRecord(record_key, f"{email_path}/{record_key}", data, handle=data)

    def update(self, record, fields):
        self._record("update", record.location, dict(fields))
        record.handle.update(fields)

    @property
    def updates(self):
        return [call for call in self.calls if call[0] == "update"]


@pytest.fixture
def store():
    return FakeRecordStore()


@pytest.fixture
def app(store):
    """Application wired to the in-memory store"""
    app = create_app("testing", store=store)
    yield app
    app.extensions["reconciler"].close()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def customer_email():
    return fake.email()


@pytest.fixture
def transaction_id():
    return fake.bothify(text="TXN-########")


@pytest.fixture
def signed_notification():
    """Build a notification body whose validation hash matches the testing secrets"""

    def _build(basket_id, err_code="000", **fields):
        body = {
            "basket_id": basket_id,
            "err_code": err_code,
            "validation_hash": compute_validation_hash(
                basket_id,
                err_code,
                TestingConfig.PAYFAST_SECURED_KEY,
                TestingConfig.PAYFAST_MERCHANT_ID,
            ),
        }
        body.update(fields)
        return body

    return _build


@pytest.fixture
def store_factory():
    """Build extra in-memory stores inside a test"""
    return FakeRecordStore
