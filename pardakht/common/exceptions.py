"""
Pardakht - Custom Exceptions
=============================
Gateway-level exceptions raised by drivers and the payment manager.
Callers catch these to branch on business outcomes.
"""

from typing import Any, Dict, Optional


class GatewayError(Exception):
    """Base exception for all gateway-related errors."""
    def __init__(
        self,
        message: str = "Payment gateway error.",
        code: int = 0,
        raw_data: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.raw_data = raw_data if raw_data is not None else {}
        super().__init__(self.message)


class InvalidConfigError(GatewayError):
    """Raised when a driver has no settings, no class mapping, or an unusable class."""
    pass


class PurchaseFailedError(GatewayError):
    """Raised when the provider rejects a purchase request."""
    pass


class InvalidPaymentError(GatewayError):
    """Raised when the provider rejects verification (payment not confirmed)."""
    pass
