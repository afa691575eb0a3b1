"""
Payment schemas.
Wire names follow the public API (ccNumber, createdAt).
"""

from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from payments.models.payment import Payment


class PaymentPayload(BaseModel):
    """
    Caller-supplied content subject to idempotency.
    Fields may be absent here; presence is enforced by the recorder.
    Only the wire names (ccNumber, amount) are read.
    """
    
    model_config = ConfigDict(frozen=True)
    
    cc_number: Optional[str] = Field(default=None, alias="ccNumber")
    amount: Optional[str] = None
    
    @field_validator("cc_number", "amount", mode="before")
    @classmethod
    def _unusable_value_is_missing(cls, value: Any) -> Optional[str]:
        # Amounts are decimal strings; a JSON number is not accepted as one
        if not isinstance(value, str):
            return None
        # Lone surrogates ("\ud800") parse as JSON but have no UTF-8 form
        try:
            value.encode("utf-8")
        except UnicodeEncodeError:
            return None
        return value
    
    @property
    def is_complete(self) -> bool:
        return bool(self.cc_number) and bool(self.amount)


class PaymentRecord(BaseModel):
    """Persisted result of one payload. Immutable once created."""
    
    model_config = ConfigDict(frozen=True, populate_by_name=True)
    
    id: str
    cc_number: str = Field(alias="ccNumber")
    amount: str
    created_at: str = Field(alias="createdAt")
    
    @classmethod
    def from_row(cls, row: Payment) -> "PaymentRecord":
        return cls(
            id=row.id,
            cc_number=row.cc_number,
            amount=row.amount,
            created_at=row.created_at,
        )


class PaymentResponse(BaseModel):
    """Body for POST /payment."""
    
    uuid: str
    data: PaymentRecord
    message: str


class AllDataResponse(BaseModel):
    """Body for GET /all-data."""
    
    cache: List[Tuple[str, PaymentRecord]]
    database: List[PaymentRecord]


class ErrorResponse(BaseModel):
    error: str
