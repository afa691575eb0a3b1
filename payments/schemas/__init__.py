"""Request/response schemas."""

from payments.schemas.payment import (
    AllDataResponse,
    ErrorResponse,
    PaymentPayload,
    PaymentRecord,
    PaymentResponse,
)

__all__ = [
    "AllDataResponse",
    "ErrorResponse",
    "PaymentPayload",
    "PaymentRecord",
    "PaymentResponse",
]
