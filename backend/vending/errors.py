# Overview: Exception taxonomy for the vending engine and its capabilities.

"""
Validation failures live in vending.validation (ValidationError, a
ValueError). Everything raised by the engine or its collaborators derives
from VendingError. A failed login is not an error: see AuthResult.
"""


class VendingError(Exception):
    """Base class for vending machine errors."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class StaleMachineError(VendingError):
    """Raised when a machine state is used after a transition consumed it."""


class PurchaseError(VendingError):
    """Raised for purchase rule violations. Engine state is unchanged."""


class ProductNotFoundError(PurchaseError):
    pass


class InsufficientStockError(PurchaseError):
    pass


class RepositoryError(VendingError):
    """Raised when a repository cannot read or persist a record."""


class PaymentError(VendingError):
    """Raised by payment terminals. Fatal unless it is a PaymentRequestError."""


class PaymentRequestError(PaymentError):
    """A single payment request failed; the payment loop retries."""


class RefundError(PaymentError):
    """The terminal could not hand back change."""
