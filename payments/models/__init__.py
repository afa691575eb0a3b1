"""Models package for database models."""

from payments.models.payment import Payment

__all__ = [
    "Payment",
]
