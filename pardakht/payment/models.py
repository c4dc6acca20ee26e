"""
Payment Data Holders
=====================
Invoice (mutable, one per payment flow), Receipt (verified payment) and
RedirectResponse (where to send the user). None of these are persisted.
"""

import html
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Union

from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse as HTTPRedirect

from pardakht.common.helpers import new_uuid


def validate_amount(amount: Any) -> int:
    """Amount must be a non-negative int in the gateway's minor unit."""
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValueError(f"Invoice amount must be an integer, got {amount!r}")
    if amount < 0:
        raise ValueError(f"Invoice amount must not be negative, got {amount}")
    return amount


@dataclass
class Invoice:
    """Payment request in progress."""
    amount: int = 0                     # smallest currency unit (Rial)
    description: str = ""
    transaction_id: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)
    uuid: str = field(default_factory=new_uuid)   # correlation id, never sent to the gateway
    driver: Optional[str] = None
    callback_url: Optional[str] = None

    def __post_init__(self):
        validate_amount(self.amount)

    def detail(self, key: Union[str, Dict[str, Any]], value: Any = None) -> "Invoice":
        """Attach one detail, or merge a mapping of details."""
        if isinstance(key, dict):
            self.details.update(key)
        else:
            self.details[key] = value
        return self

    def via(self, driver: str) -> "Invoice":
        self.driver = driver
        return self


@dataclass(frozen=True)
class Receipt:
    """Proof of a successfully verified payment."""
    reference_id: str
    driver: str
    date: datetime
    raw_data: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RedirectResponse:
    """Redirect to a gateway payment page."""
    url: str
    data: Dict[str, Any] = field(default_factory=dict)   # POST redirects only
    method: str = "GET"

    def to_dict(self) -> Dict[str, Any]:
        return {"url": self.url, "method": self.method, "data": dict(self.data)}

    def to_json_response(self) -> JSONResponse:
        return JSONResponse(self.to_dict())

    def render(self) -> Union[HTTPRedirect, HTMLResponse]:
        """
        Render as an HTTP response.
        GET → 302 redirect. POST → HTML page with an auto-submitting form.
        """
        if self.method.upper() == "GET":
            return HTTPRedirect(self.url, status_code=302)

        inputs = "".join(
            '<input type="hidden" name="{}" value="{}">'.format(
                html.escape(str(key), quote=True),
                html.escape(str(value), quote=True),
            )
            for key, value in self.data.items()
        )
        page = (
            '<html><body><form id="payment-form" action="{}" method="POST">{}</form>'
            '<script>document.getElementById("payment-form").submit();</script></body></html>'
        ).format(html.escape(self.url, quote=True), inputs)
        return HTMLResponse(page)
