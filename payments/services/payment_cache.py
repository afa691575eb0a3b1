"""
Payment Cache - in-process mirror of durable payment records.

Never authoritative: an entry, when present, equals the stored record
for its fingerprint, and an absent entry says nothing. Lost on restart.
"""

import logging
from collections import OrderedDict
from typing import List, Optional, Tuple

from payments.logging_config import short_fingerprint
from payments.schemas.payment import PaymentRecord

logger = logging.getLogger(__name__)


class PaymentCache:
    """
    Fingerprint -> record mapping, insertion ordered.
    
    Unbounded unless max_entries is set, in which case the least
    recently used entry is dropped on overflow. No method awaits, so
    calls never interleave on the event loop.
    """
    
    def __init__(self, max_entries: Optional[int] = None):
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self._entries: "OrderedDict[str, PaymentRecord]" = OrderedDict()
    
    def get(self, fingerprint: str) -> Optional[PaymentRecord]:
        record = self._entries.get(fingerprint)
        if record is not None and self.max_entries is not None:
            self._entries.move_to_end(fingerprint)
        return record
    
    def put(self, fingerprint: str, record: PaymentRecord) -> None:
        """Overwrite or insert. Only call with a record confirmed durable."""
        self._entries[fingerprint] = record
        if self.max_entries is not None:
            self._entries.move_to_end(fingerprint)
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Evicted {short_fingerprint(evicted)} from payment cache")
    
    def snapshot(self) -> List[Tuple[str, PaymentRecord]]:
        """Copy of all entries for diagnostics."""
        return list(self._entries.items())
    
    def __len__(self) -> int:
        return len(self._entries)
    
    def __contains__(self, fingerprint: object) -> bool:
        return fingerprint in self._entries
