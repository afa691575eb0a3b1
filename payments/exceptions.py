"""Domain errors raised by the payment recorder."""


class PaymentError(Exception):
    """Base class for payment recording errors."""


class InvalidPayload(PaymentError):
    """A required payload field is missing or empty. Never retried."""

    def __init__(self, message: str = "ccNumber and amount are required."):
        super().__init__(message)
        self.message = message


class StorageFailure(PaymentError):
    """The durable store failed (I/O or unexpected constraint error)."""

    def __init__(self, operation: str, message: str):
        super().__init__(f"{operation}: {message}")
        self.operation = operation
