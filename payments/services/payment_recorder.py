"""
Payment Recorder - records each distinct payload exactly once.

Lookup order for a submission:
1. Reject payloads without ccNumber or amount
2. Derive the fingerprint
3. Volatile cache        -> CACHE_HIT
4. Durable store         -> STORE_HIT (cache filled)
5. insert_if_absent      -> CREATED, or STORE_HIT if a concurrent
                            caller inserted between steps 4 and 5
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable

from payments.exceptions import InvalidPayload
from payments.logging_config import mask_card_number, short_fingerprint
from payments.schemas.payment import PaymentPayload, PaymentRecord
from payments.services.fingerprint import derive
from payments.services.payment_cache import PaymentCache
from payments.services.payment_store import PaymentStore

logger = logging.getLogger(__name__)


class RecordStatus(str, Enum):
    """Which path produced the returned record."""
    
    CACHE_HIT = "CACHE_HIT"
    STORE_HIT = "STORE_HIT"
    CREATED = "CREATED"
    
    @property
    def created(self) -> bool:
        return self is RecordStatus.CREATED
    
    @property
    def message(self) -> str:
        """Human-readable description for API responses."""
        messages = {
            RecordStatus.CACHE_HIT: "Idempotent response: Data already exists.",
            RecordStatus.STORE_HIT: "Idempotent response: Data fetched from database.",
            RecordStatus.CREATED: "Data successfully created.",
        }
        return messages[self]


@dataclass(frozen=True)
class RecordOutcome:
    fingerprint: str
    record: PaymentRecord
    status: RecordStatus


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PaymentRecorder:
    """Two-tier idempotent recorder over an injected cache and store."""
    
    def __init__(
        self,
        store: PaymentStore,
        cache: PaymentCache,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.cache = cache
        self.clock = clock
    
    async def record(self, payload: PaymentPayload) -> RecordOutcome:
        """
        Record a payment submission.
        
        Raises InvalidPayload for missing fields and StorageFailure
        for durable store faults. Every caller submitting the same
        payload receives the same stored record.
        """
        if not payload.is_complete:
            raise InvalidPayload()
        
        fingerprint = derive(payload)
        short = short_fingerprint(fingerprint)
        
        cached = self.cache.get(fingerprint)
        if cached is not None:
            logger.info(f"Payment {short} served from cache")
            return RecordOutcome(fingerprint, cached, RecordStatus.CACHE_HIT)
        
        stored = await self.store.get(fingerprint)
        if stored is not None:
            self.cache.put(fingerprint, stored)
            logger.info(f"Payment {short} served from store")
            return RecordOutcome(fingerprint, stored, RecordStatus.STORE_HIT)
        
        record, created = await self.store.insert_if_absent(
            fingerprint, payload, self.clock()
        )
        self.cache.put(fingerprint, record)
        
        if not created:
            logger.info(f"Payment {short} inserted concurrently, returning stored record")
            return RecordOutcome(fingerprint, record, RecordStatus.STORE_HIT)
        
        logger.info(
            f"Payment {short} created: card {mask_card_number(payload.cc_number)}, "
            f"amount {payload.amount}"
        )
        return RecordOutcome(fingerprint, record, RecordStatus.CREATED)
