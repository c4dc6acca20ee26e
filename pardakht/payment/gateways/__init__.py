"""
Payment Gateway Abstraction
=============================
Each gateway implements set_invoice(), purchase(), pay() and verify().
Registry pattern for gateway class lookup by name.
"""

import inspect
import logging
from typing import Any, Dict, List, Mapping, Optional, Type

import httpx

from pardakht.payment.models import Invoice, Receipt, RedirectResponse

logger = logging.getLogger("pardakht.gateway")

JSON_HEADERS = {"Accept": "application/json"}
DEFAULT_TIMEOUT = 15

CONTRACT_METHODS = ("set_invoice", "purchase", "pay", "verify")


class BaseGateway:
    """Gateway interface. Drivers are built fresh for every call."""
    name: str = ""
    label: str = ""  # Persian display name

    def __init__(self, settings: Mapping[str, Any], client: Optional[httpx.Client] = None):
        self.settings = dict(settings)
        self.client = client
        self.invoice: Optional[Invoice] = None

    def set_invoice(self, invoice: Invoice) -> "BaseGateway":
        self.invoice = invoice
        return self

    def purchase(self) -> str:
        raise NotImplementedError

    def pay(self) -> RedirectResponse:
        raise NotImplementedError

    def verify(self) -> Receipt:
        raise NotImplementedError

    # ── shared helpers ──

    def _callback_url(self) -> str:
        if self.invoice.callback_url is not None:
            return self.invoice.callback_url
        return self.settings.get("callback_url") or ""

    def _description(self) -> str:
        return self.invoice.description or self.settings.get("description") or ""

    def _post(self, url: str, payload: Dict[str, Any]) -> Any:
        """POST JSON and return the decoded body. Transport errors propagate."""
        logger.debug(f"{self.name} POST {url}")
        timeout = self.settings.get("timeout", DEFAULT_TIMEOUT)
        if self.client is not None:
            resp = self.client.post(url, json=payload, headers=JSON_HEADERS, timeout=timeout)
        else:
            resp = httpx.post(url, json=payload, headers=JSON_HEADERS, timeout=timeout)
        return resp.json()


def satisfies_contract(obj: Any) -> bool:
    """True when obj is a class built as cls(settings, client=...) exposing every gateway operation."""
    if not isinstance(obj, type):
        return False
    if not all(callable(getattr(obj, m, None)) for m in CONTRACT_METHODS):
        return False
    try:
        inspect.signature(obj).bind({}, client=None)
    except (TypeError, ValueError):
        return False
    return True


# ── Registry ──

_GATEWAYS: Dict[str, Type[BaseGateway]] = {}


def register_gateway(name: str, cls: Type[BaseGateway]):
    _GATEWAYS[name] = cls


def get_gateway_class(name: str) -> Optional[Type[BaseGateway]]:
    return _GATEWAYS.get(name)


def get_all_gateway_names() -> List[str]:
    return list(_GATEWAYS.keys())


def default_gateway_classes() -> Dict[str, Type[BaseGateway]]:
    """Name → class map of the bundled drivers."""
    # Import driver modules to trigger register_gateway() calls
    import pardakht.payment.gateways.zarinpal  # noqa: F401
    import pardakht.payment.gateways.zibal     # noqa: F401
    return dict(_GATEWAYS)
