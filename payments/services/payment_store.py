"""
Payment Store - durable, create-if-absent storage of payment records.

The primary key on ``payments.id`` is the single serialization point:
``insert_if_absent`` issues one ``INSERT ... ON CONFLICT (id) DO NOTHING``
so that concurrent inserts of the same fingerprint resolve inside the
database, never in application code.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from payments.exceptions import StorageFailure
from payments.logging_config import short_fingerprint
from payments.models.payment import Payment
from payments.schemas.payment import PaymentPayload, PaymentRecord

logger = logging.getLogger(__name__)

# Dialect-specific INSERT constructs supporting ON CONFLICT DO NOTHING
_INSERT_BY_DIALECT = {
    "sqlite": sqlite_insert,
    "postgresql": pg_insert,
}


def describe_error(e: Exception) -> str:
    """Driver error text without the statement or its bound parameters."""
    if isinstance(e, DBAPIError) and e.orig is not None:
        return f"{type(e.orig).__name__}: {e.orig}"
    return f"{type(e).__name__}: {e}"


def format_timestamp(now: datetime) -> str:
    """UTC ISO-8601 with millisecond precision, e.g. 2024-01-31T12:00:00.123Z."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    now = now.astimezone(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


class PaymentStore:
    """Durable store for payment records, keyed by fingerprint."""
    
    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        bind = session_maker.kw.get("bind")
        dialect = bind.dialect.name if bind is not None else None
        if dialect not in _INSERT_BY_DIALECT:
            raise ValueError(f"Unsupported database dialect for payment store: {dialect}")
        self.session_maker = session_maker
        self._insert = _INSERT_BY_DIALECT[dialect]
    
    async def get(self, fingerprint: str) -> Optional[PaymentRecord]:
        """Point lookup by primary key."""
        try:
            async with self.session_maker() as session:
                result = await session.execute(
                    select(Payment).where(Payment.id == fingerprint)
                )
                row = result.scalar_one_or_none()
                return PaymentRecord.from_row(row) if row else None
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Store lookup failed for {short_fingerprint(fingerprint)}: {describe_error(e)}")
            raise StorageFailure("get", describe_error(e)) from e
    
    async def insert_if_absent(
        self,
        fingerprint: str,
        payload: PaymentPayload,
        now: datetime,
    ) -> Tuple[PaymentRecord, bool]:
        """
        Insert a record unless one exists for the fingerprint.
        
        Returns (record, True) when this call created the row, or
        (existing record, False) when another caller got there first.
        Only a conflict on the primary key is absorbed; any other
        integrity error surfaces as StorageFailure.
        """
        values = {
            "id": fingerprint,
            "cc_number": payload.cc_number,
            "amount": payload.amount,
            "created_at": format_timestamp(now),
        }
        stmt = (
            self._insert(Payment)
            .values(**values)
            .on_conflict_do_nothing(index_elements=["id"])
        )
        
        try:
            async with self.session_maker() as session:
                async with session.begin():
                    result = await session.execute(stmt)
                    if result.rowcount > 0:
                        logger.debug(f"Inserted payment {short_fingerprint(fingerprint)}")
                        return PaymentRecord(**values), True
                    
                    # Primary key already taken: read back the winner
                    existing = await session.execute(
                        select(Payment).where(Payment.id == fingerprint)
                    )
                    row = existing.scalar_one_or_none()
                    if row is None:
                        raise StorageFailure(
                            "insert_if_absent",
                            f"insert of {short_fingerprint(fingerprint)} was ignored "
                            "but no existing row was found",
                        )
                    logger.debug(f"Payment {short_fingerprint(fingerprint)} already stored")
                    return PaymentRecord.from_row(row), False
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Store insert failed for {short_fingerprint(fingerprint)}: {describe_error(e)}")
            raise StorageFailure("insert_if_absent", describe_error(e)) from e
    
    async def list_all(self) -> List[PaymentRecord]:
        """All stored records, oldest first."""
        try:
            async with self.session_maker() as session:
                result = await session.execute(
                    select(Payment).order_by(Payment.created_at, Payment.id)
                )
                return [PaymentRecord.from_row(row) for row in result.scalars()]
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Store listing failed: {describe_error(e)}")
            raise StorageFailure("list_all", describe_error(e)) from e
