"""
Payment Configuration
======================
Explicit configuration handed to PaymentManager: default driver name,
per-driver settings blocks and the driver → class map.
Map values are gateway classes or dotted import paths.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Type, Union

from pardakht.config import settings
from pardakht.payment.gateways import BaseGateway, default_gateway_classes

GatewayRef = Union[Type[BaseGateway], str]


@dataclass(frozen=True)
class PaymentConfig:
    default: str = "zarinpal"
    drivers: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    map: Dict[str, GatewayRef] = field(default_factory=default_gateway_classes)

    def driver_settings(self, name: str) -> Optional[Dict[str, Any]]:
        return self.drivers.get(name)

    def driver_class(self, name: str) -> Optional[GatewayRef]:
        return self.map.get(name)

    @classmethod
    def from_settings(cls) -> "PaymentConfig":
        """Build the configuration from environment-backed settings."""
        return cls(
            default=settings.PAYMENT_GATEWAY,
            drivers={
                "zarinpal": {
                    "merchant_id": settings.ZARINPAL_MERCHANT_ID,
                    "sandbox": settings.ZARINPAL_SANDBOX,
                    "description": settings.ZARINPAL_DESCRIPTION,
                    "callback_url": settings.PAYMENT_CALLBACK_URL,
                    "timeout": settings.PAYMENT_HTTP_TIMEOUT,
                },
                "zibal": {
                    "merchant": settings.ZIBAL_MERCHANT,
                    "sandbox": settings.ZIBAL_SANDBOX,
                    "description": settings.ZIBAL_DESCRIPTION,
                    "callback_url": settings.PAYMENT_CALLBACK_URL,
                    "timeout": settings.PAYMENT_HTTP_TIMEOUT,
                },
            },
        )
