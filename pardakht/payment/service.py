"""
Payment Service
=================
PaymentManager: resolves a gateway driver by name, merges its settings with
runtime overrides and drives the purchase → pay → verify flow of an invoice.

Driver resolution order: via() > invoice.driver > config default.
A manager holds the state of ONE fluent chain; call fresh() between flows.
"""

import importlib
import logging
from typing import Any, Callable, Dict, List, Optional, Union

import httpx

from pardakht.common.exceptions import InvalidConfigError
from pardakht.payment.config import PaymentConfig
from pardakht.payment.events import PaymentPurchased, PaymentVerified
from pardakht.payment.gateways import BaseGateway, satisfies_contract
from pardakht.payment.models import Invoice, Receipt, RedirectResponse, validate_amount

logger = logging.getLogger("pardakht.payment")

Listener = Callable[[Union[PaymentPurchased, PaymentVerified]], None]


class PaymentManager:

    def __init__(
        self,
        config: PaymentConfig,
        client: Optional[httpx.Client] = None,
        listeners: Optional[List[Listener]] = None,
    ):
        self._config = config
        self._client = client
        self._listeners: List[Listener] = list(listeners or [])

        self._driver: Optional[str] = None
        self._invoice: Optional[Invoice] = None
        self._gateway: Optional[BaseGateway] = None
        self._config_overrides: Dict[str, Any] = {}
        self._callback_url: Optional[str] = None

    # ==========================================
    # 🔧 Chain Setup
    # ==========================================

    def via(self, driver: str) -> "PaymentManager":
        self._driver = driver
        return self

    def config(self, key: Union[str, Dict[str, Any]], value: Any = None) -> "PaymentManager":
        """Override driver settings for this chain (single key or a mapping)."""
        if isinstance(key, dict):
            self._config_overrides.update(key)
        else:
            self._config_overrides[key] = value
        return self

    def callback_url(self, url: str) -> "PaymentManager":
        self._callback_url = url
        return self

    def amount(self, amount: int) -> "PaymentManager":
        self.invoice.amount = validate_amount(amount)
        return self

    def transaction_id(self, transaction_id: str) -> "PaymentManager":
        self.invoice.transaction_id = transaction_id
        return self

    def subscribe(self, listener: Listener) -> "PaymentManager":
        self._listeners.append(listener)
        return self

    @property
    def invoice(self) -> Invoice:
        if self._invoice is None:
            self._invoice = Invoice()
        return self._invoice

    @property
    def driver_name(self) -> str:
        if self._driver is not None:
            return self._driver
        if self._invoice is not None and self._invoice.driver is not None:
            return self._invoice.driver
        return self._config.default

    # ==========================================
    # 💳 Purchase / Pay / Verify
    # ==========================================

    def purchase(
        self,
        invoice: Optional[Invoice] = None,
        on_complete: Optional[Callable[[str, str], Any]] = None,
    ) -> "PaymentManager":
        """Send the invoice to the gateway and store the returned transaction id."""
        if invoice is not None:
            self._invoice = invoice

        current = self.invoice
        if self._callback_url is not None:
            current.callback_url = self._callback_url

        gateway = self._resolve_gateway()
        gateway.set_invoice(current)

        transaction_id = gateway.purchase()
        current.transaction_id = transaction_id

        driver = self.driver_name
        logger.info(f"Invoice {current.uuid} purchased via {driver}: {transaction_id}")
        self._emit(PaymentPurchased(invoice=current, transaction_id=transaction_id, driver=driver))

        if on_complete is not None:
            on_complete(driver, transaction_id)

        self._gateway = gateway
        return self

    def pay(self) -> RedirectResponse:
        if self._gateway is None:
            self._gateway = self._resolve_gateway()
            self._gateway.set_invoice(self.invoice)
        return self._gateway.pay()

    def verify(self) -> Receipt:
        # Re-resolved so overrides applied after purchase take effect
        gateway = self._resolve_gateway()
        gateway.set_invoice(self.invoice)

        receipt = gateway.verify()

        driver = self.driver_name
        logger.info(f"Invoice {self.invoice.uuid} verified via {driver}: ref={receipt.reference_id}")
        self._emit(PaymentVerified(receipt=receipt, driver=driver))
        return receipt

    def fresh(self) -> "PaymentManager":
        """Clear all chain state so the manager can start an independent flow."""
        self._driver = None
        self._invoice = None
        self._gateway = None
        self._config_overrides = {}
        self._callback_url = None
        return self

    # ==========================================
    # 🔍 Driver Resolution
    # ==========================================

    def _resolve_gateway(self) -> BaseGateway:
        driver = self.driver_name
        settings = self._driver_settings(driver)
        gateway_cls = self._driver_class(driver)
        logger.debug(f"Resolved driver {driver} → {gateway_cls.__name__}")
        return gateway_cls(settings, client=self._client)

    def _driver_settings(self, driver: str) -> Dict[str, Any]:
        settings = self._config.driver_settings(driver)
        if settings is None:
            raise InvalidConfigError(f"Configuration for payment driver [{driver}] not found.")
        return {**settings, **self._config_overrides}

    def _driver_class(self, driver: str) -> type:
        ref = self._config.driver_class(driver)
        if ref is None:
            raise InvalidConfigError(f"No class mapping found for payment driver [{driver}].")

        gateway_cls = _import_class(ref) if isinstance(ref, str) else ref
        if gateway_cls is None:
            raise InvalidConfigError(f"Gateway driver class [{ref}] not found for driver [{driver}].")
        if not satisfies_contract(gateway_cls):
            raise InvalidConfigError(
                f"Gateway driver class [{ref}] for driver [{driver}] does not implement the gateway contract."
            )
        return gateway_cls

    def _emit(self, event: Union[PaymentPurchased, PaymentVerified]):
        for listener in self._listeners:
            listener(event)


def _import_class(path: str) -> Optional[type]:
    """Resolve "package.module.ClassName". Returns None when it cannot be imported."""
    module_name, _, attr = path.rpartition(".")
    if not module_name:
        return None
    try:
        module = importlib.import_module(module_name)
    except ImportError:
        return None
    return getattr(module, attr, None)
