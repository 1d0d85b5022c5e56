import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from payfast_bridge.challans import (
    FALLBACK,
    NOT_FOUND,
    PAYMENT_FAILED,
    PRIMARY,
    UPDATED,
    Reconciler,
)
from payfast_bridge.errors import TransientStoreError

pytestmark = pytest.mark.payment

EMAIL = "driver@example.com"


def fixed_clock():
    return 1764448963246


@pytest.fixture
def reconciler(store):
    reconciler = Reconciler(store, clock=fixed_clock)
    yield reconciler
    reconciler.close()


def test_primary_lookup_marks_challan_paid(store, reconciler):
    store.add(EMAIL, "CH-001")

    outcome = reconciler.reconcile("CH-001", "000", "TXN1", EMAIL, basket_id="CHALLAN-CH-001-1")

    assert outcome.status == UPDATED
    assert outcome.found_via == PRIMARY
    assert store.lookup(EMAIL, "CH-001") == {
        "status": "paid",
        "payment_transaction_id": "TXN1",
        "payment_date": 1764448963246,
        "payment_method": "PayFast",
        "basket_id": "CHALLAN-CH-001-1",
    }
    assert len(store.updates) == 1


def test_missing_contact_address_goes_through_fallback(store, reconciler):
    store.add(EMAIL, "CH-001")

    outcome = reconciler.reconcile("CH-001", "000", "TXN1", None)

    assert outcome.status == UPDATED
    assert outcome.found_via == FALLBACK
    assert [call[0] for call in store.calls] == ["get", "scan", "update"]
    assert store.lookup(EMAIL, "CH-001")["status"] == "paid"
    assert store.lookup(EMAIL, "CH-001")["payment_transaction_id"] == "TXN1"


def test_missing_transaction_id_is_marked_not_available(store, reconciler):
    store.add(EMAIL, "CH-001")

    reconciler.reconcile("CH-001", "00", None, EMAIL)

    assert store.lookup(EMAIL, "CH-001")["payment_transaction_id"] == "N/A"
    assert store.lookup(EMAIL, "CH-001")["basket_id"] == "CH-001"


def test_custom_payment_method(store):
    store.add(EMAIL, "CH-001")
    reconciler = Reconciler(store, payment_method="PayFast Sandbox", clock=fixed_clock)

    reconciler.reconcile("CH-001", "000", "TXN1", EMAIL)

    assert store.lookup(EMAIL, "CH-001")["payment_method"] == "PayFast Sandbox"


def test_fallback_finds_challan_under_another_email(store, reconciler):
    store.add("other@example.com", "CH-002")

    outcome = reconciler.reconcile("CH-002", "000", "TXN2", EMAIL)

    assert outcome.status == UPDATED
    assert outcome.found_via == FALLBACK
    assert outcome.location == "other@example,com/CH-002"
    assert store.lookup("other@example.com", "CH-002")["status"] == "paid"
    assert [call[0] for call in store.calls] == ["get", "scan", "update"]


def test_fallback_updates_only_first_match(store, reconciler):
    store.add("a@example.com", "CH-003")
    store.add("b@example.com", "CH-003")

    reconciler.reconcile("CH-003", "000", "TXN3", EMAIL)

    assert store.lookup("a@example.com", "CH-003")["status"] == "paid"
    assert store.lookup("b@example.com", "CH-003")["status"] == "unpaid"
    assert len(store.updates) == 1


def test_not_found_anywhere(store, reconciler):
    store.add(EMAIL, "CH-001")

    outcome = reconciler.reconcile("CH-404", "000", "TXN4", EMAIL)

    assert outcome.status == NOT_FOUND
    assert outcome.found_via is None
    assert store.updates == []
    assert store.lookup(EMAIL, "CH-001")["status"] == "unpaid"


@pytest.mark.parametrize("status_code", ["500", "001", "0000", "", "97"])
def test_failed_payment_never_touches_store(store, reconciler, status_code):
    store.add(EMAIL, "CH-001")

    outcome = reconciler.reconcile("CH-001", status_code, "TXN1", EMAIL)

    assert outcome.status == PAYMENT_FAILED
    assert outcome.status_code == status_code
    assert store.calls == []
    assert store.lookup(EMAIL, "CH-001")["status"] == "unpaid"


def test_store_failure_propagates_as_transient_error(store_factory):
    store = store_factory(fail_with=TransientStoreError("deadline exceeded"))
    reconciler = Reconciler(store)

    with pytest.raises(TransientStoreError) as exc:
        reconciler.reconcile("CH-001", "000", "TXN1", EMAIL)
    assert exc.value.status_code == 500


def test_background_fallback_returns_before_write(store):
    release = threading.Event()
    update = store.update

    def blocking_update(record, fields):
        release.wait(timeout=5)
        update(record, fields)

    store.update = blocking_update
    store.add("other@example.com", "CH-005")
    executor = ThreadPoolExecutor(max_workers=1)
    reconciler = Reconciler(store, await_fallback_write=False, executor=executor, clock=fixed_clock)

    outcome = reconciler.reconcile("CH-005", "000", "TXN5", EMAIL)

    assert outcome.status == UPDATED
    assert outcome.found_via == FALLBACK
    assert outcome.pending_write is not None
    assert store.lookup("other@example.com", "CH-005")["status"] == "unpaid"

    release.set()
    outcome.pending_write.result(timeout=5)
    assert store.lookup("other@example.com", "CH-005")["status"] == "paid"
    executor.shutdown()


def test_background_mode_still_awaits_primary_write(store_factory):
    store = store_factory()
    store.add(EMAIL, "CH-006")
    reconciler = Reconciler(store, await_fallback_write=False, clock=fixed_clock)

    outcome = reconciler.reconcile("CH-006", "000", "TXN6", EMAIL)

    assert outcome.pending_write is None
    assert store.lookup(EMAIL, "CH-006")["status"] == "paid"
    reconciler.close()


def test_background_executor_is_built_once_up_front(store, monkeypatch):
    created = []

    class CountingExecutor(ThreadPoolExecutor):
        def __init__(self, *args, **kwargs):
            created.append(self)
            super().__init__(*args, **kwargs)

    monkeypatch.setattr("payfast_bridge.challans.reconciler.ThreadPoolExecutor", CountingExecutor)
    reconciler = Reconciler(store, await_fallback_write=False)
    assert len(created) == 1

    seen = []
    barrier = threading.Barrier(4)

    def read_executor():
        barrier.wait(timeout=5)
        seen.append(reconciler.executor)

    threads = [threading.Thread(target=read_executor) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5)

    assert len(created) == 1
    assert all(executor is created[0] for executor in seen)

    reconciler.close()
    with pytest.raises(RuntimeError):
        created[0].submit(lambda: None)
    assert reconciler.executor is None


def test_awaiting_reconciler_has_no_executor(store):
    reconciler = Reconciler(store)
    assert reconciler.executor is None
    reconciler.close()


def test_injected_executor_is_not_shut_down(store):
    executor = ThreadPoolExecutor(max_workers=1)
    reconciler = Reconciler(store, await_fallback_write=False, executor=executor)

    reconciler.close()

    assert executor.submit(lambda: "still running").result(timeout=5) == "still running"
    executor.shutdown()
