"""
Pardakht
=========
Driver-based client for Iranian payment gateways (Zarinpal, Zibal).
Purchase → pay (redirect) → verify, behind one PaymentManager.
"""

from pardakht.common.exceptions import (
    GatewayError, InvalidConfigError, InvalidPaymentError, PurchaseFailedError,
)
from pardakht.payment.config import PaymentConfig
from pardakht.payment.events import PaymentPurchased, PaymentVerified
from pardakht.payment.gateways import BaseGateway, register_gateway
from pardakht.payment.models import Invoice, Receipt, RedirectResponse
from pardakht.payment.service import PaymentManager

__version__ = "0.1.0"

__all__ = [
    "BaseGateway", "GatewayError", "InvalidConfigError", "InvalidPaymentError",
    "Invoice", "PaymentConfig", "PaymentManager", "PaymentPurchased",
    "PaymentVerified", "PurchaseFailedError", "Receipt", "RedirectResponse",
    "register_gateway",
]
