"""Services package."""

from payments.services.fingerprint import derive
from payments.services.payment_cache import PaymentCache
from payments.services.payment_recorder import (
    PaymentRecorder,
    RecordOutcome,
    RecordStatus,
)
from payments.services.payment_store import PaymentStore

__all__ = [
    "derive",
    "PaymentCache",
    "PaymentRecorder",
    "RecordOutcome",
    "RecordStatus",
    "PaymentStore",
]
