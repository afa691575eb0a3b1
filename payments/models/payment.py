"""Payment model - one row per distinct payload fingerprint."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from payments.database import Base


class Payment(Base):
    """
    Durable payment record.
    id is the payload fingerprint; the primary key is the idempotency guard.
    """
    
    __tablename__ = "payments"
    
    # SHA-256 fingerprint of the canonical payload
    id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
    )
    
    # Card identifier (sensitive, never logged)
    cc_number: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    
    # Decimal string, kept as text to avoid precision loss
    amount: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    
    # ISO-8601 UTC string, set once on insert
    created_at: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
    )
    
    def __repr__(self) -> str:
        return f"<Payment {self.id[:12]}>"
