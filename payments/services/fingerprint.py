"""
Fingerprint derivation for payment payloads.

The canonical form is compact JSON with keys in the fixed order
``ccNumber``, ``amount`` and non-ASCII characters kept as UTF-8.
The digest is SHA-256 rendered as 64 lowercase hex characters.
"""

import hashlib
import json

from payments.schemas.payment import PaymentPayload

# Serialization order of payload fields; never derived from dict iteration
CANONICAL_FIELDS = (
    ("ccNumber", "cc_number"),
    ("amount", "amount"),
)

FINGERPRINT_LENGTH = 64


def canonicalize(payload: PaymentPayload) -> bytes:
    """Byte-identical output for structurally equal payloads."""
    ordered = {wire: getattr(payload, attr) for wire, attr in CANONICAL_FIELDS}
    return json.dumps(
        ordered,
        separators=(",", ":"),
        ensure_ascii=False,
    ).encode("utf-8")


def derive(payload: PaymentPayload) -> str:
    """Derive the fingerprint of a payload. Caller guarantees both fields are set."""
    return hashlib.sha256(canonicalize(payload)).hexdigest()
