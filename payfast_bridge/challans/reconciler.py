import logging
import time
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

from ..storage.base import RecordStore, StoredRecord

logger = logging.getLogger(__name__)

SUCCESS_CODES = frozenset({"000", "00"})
NOT_AVAILABLE = "N/A"

UPDATED = "updated"
PAYMENT_FAILED = "payment_failed"
NOT_FOUND = "not_found"

PRIMARY = "primary"
FALLBACK = "fallback"


def is_success_code(status_code) -> bool:
    return status_code in SUCCESS_CODES


def now_millis() -> int:
    return int(time.time() * 1000)


@dataclass
class ReconcileOutcome:
    status: str
    record_key: Optional[str] = None
    found_via: Optional[str] = None
    location: Optional[str] = None
    transaction_id: Optional[str] = None
    status_code: Optional[str] = None
    pending_write: Optional[Future] = None

    @property
    def updated(self) -> bool:
        return self.status == UPDATED


class Reconciler:
    """
    Marks a challan as paid once PayFast confirms the payment.

    The record is looked up at its direct address first. When that misses, the
    store is scanned and the first match is updated. With
    ``await_fallback_write=False`` the fallback update is handed to an executor
    and the outcome is returned before the write is durable.
    """

    def __init__(
        self,
        store: RecordStore,
        payment_method: str = "PayFast",
        await_fallback_write: bool = True,
        executor: Optional[Executor] = None,
        clock=now_millis,
    ):
        self.store = store
        self.payment_method = payment_method
        self.await_fallback_write = await_fallback_write
        self._owns_executor = executor is None and not await_fallback_write
        if self._owns_executor:
            executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="fallback-write")
        self.executor = executor
        self._clock = clock

    def payment_fields(self, transaction_id, basket_id):
        return {
            "status": "paid",
            "payment_transaction_id": transaction_id or NOT_AVAILABLE,
            "payment_date": self._clock(),
            "payment_method": self.payment_method,
            "basket_id": basket_id,
        }

    def reconcile(
        self,
        record_key: str,
        status_code: str,
        transaction_id: Optional[str] = None,
        contact_address: Optional[str] = None,
        basket_id: Optional[str] = None,
    ) -> ReconcileOutcome:
        if not is_success_code(status_code):
            logger.info("Payment failed, challan left untouched",
                        extra={"record_key": record_key, "err_code": status_code})
            return ReconcileOutcome(
                status=PAYMENT_FAILED,
                record_key=record_key,
                transaction_id=transaction_id,
                status_code=status_code,
            )

        fields = self.payment_fields(transaction_id, basket_id or record_key)

        record = self.store.get(record_key, contact_address)
        if record is not None:
            logger.info("Found challan at direct address", extra={"location": record.location})
            self.store.update(record, fields)
            logger.info("Challan updated", extra={"location": record.location})
            return self._updated(record, PRIMARY, transaction_id, status_code)

        logger.warning("Challan not at direct address, searching all partitions",
                       extra={"record_key": record_key, "email_address": contact_address})

        record = next(iter(self.store.scan(record_key)), None)
        if record is None:
            logger.error("Challan not found in any partition", extra={"record_key": record_key})
            return ReconcileOutcome(
                status=NOT_FOUND,
                record_key=record_key,
                transaction_id=transaction_id,
                status_code=status_code,
            )

        outcome = self._updated(record, FALLBACK, transaction_id, status_code)
        if self.await_fallback_write:
            self.store.update(record, fields)
            logger.info("Challan updated", extra={"location": record.location})
        else:
            outcome.pending_write = self._submit_update(record, fields)
        return outcome

    def _updated(self, record: StoredRecord, found_via, transaction_id, status_code):
        return ReconcileOutcome(
            status=UPDATED,
            record_key=record.record_key,
            found_via=found_via,
            location=record.location,
            transaction_id=transaction_id,
            status_code=status_code,
        )

    def _submit_update(self, record: StoredRecord, fields) -> Future:
        future = self.executor.submit(self.store.update, record, fields)

        def _log_result(done: Future):
            error = done.exception()
            if error is not None:
                logger.error("Background challan update failed",
                             extra={"location": record.location, "error": str(error)})
            else:
                logger.info("Challan updated", extra={"location": record.location})

        future.add_done_callback(_log_result)
        return future

    def close(self):
        if self._owns_executor and self.executor is not None:
            self.executor.shutdown(wait=True)
            self.executor = None
