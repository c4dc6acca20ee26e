"""
Payment Lifecycle Events
=========================
Payloads handed to PaymentManager listeners after purchase and verify.
"""

from dataclasses import dataclass

from pardakht.payment.models import Invoice, Receipt


@dataclass(frozen=True)
class PaymentPurchased:
    """Fired after the gateway issued a transaction id for an invoice."""
    invoice: Invoice
    transaction_id: str
    driver: str


@dataclass(frozen=True)
class PaymentVerified:
    """Fired after a payment was verified by the gateway."""
    receipt: Receipt
    driver: str
