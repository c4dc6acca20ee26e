"""
Zarinpal Gateway
=================
REST/JSON (API v4). Sandbox switches the whole host.
Docs: https://www.zarinpal.com/docs/paymentGateway/
"""

import logging
from typing import Any, Dict

from pardakht.common.exceptions import InvalidPaymentError, PurchaseFailedError
from pardakht.common.helpers import now_utc, safe_int
from pardakht.payment.gateways import BaseGateway, register_gateway
from pardakht.payment.models import Receipt, RedirectResponse

logger = logging.getLogger("pardakht.gateway.zarinpal")

ZARINPAL_BASE_URL = "https://payment.zarinpal.com"
ZARINPAL_SANDBOX_URL = "https://sandbox.zarinpal.com"
ZARINPAL_REQUEST_PATH = "/pg/v4/payment/request.json"
ZARINPAL_VERIFY_PATH = "/pg/v4/payment/verify.json"
ZARINPAL_START_PATH = "/pg/StartPay/"

SUCCESS_CODE = 100
ALREADY_VERIFIED_CODE = 101

METADATA_FIELDS = ("mobile", "email", "order_id")


def _error_message(body: Dict[str, Any], fallback: str) -> str:
    # Zarinpal sometimes sends an empty "errors" object instead of omitting it
    errors = body.get("errors")
    if isinstance(errors, dict) and errors:
        message = errors.get("message")
        if message is not None:
            return str(message)
    return fallback


def _data_section(body: Dict[str, Any]) -> Dict[str, Any]:
    # "data" is an empty list on error responses
    data = body.get("data")
    return data if isinstance(data, dict) else {}


class ZarinpalGateway(BaseGateway):
    name = "zarinpal"
    label = "زرین‌پال"

    @property
    def base_url(self) -> str:
        return ZARINPAL_SANDBOX_URL if self.settings.get("sandbox") else ZARINPAL_BASE_URL

    def purchase(self) -> str:
        body = self._post(self.base_url + ZARINPAL_REQUEST_PATH, self._purchase_data())
        data = _data_section(body)
        code = safe_int(data.get("code"))
        logger.info(f"Zarinpal request [{self.invoice.uuid}]: {body}")

        if code != SUCCESS_CODE:
            msg = _error_message(body, "Purchase failed with Zarinpal.")
            logger.warning(f"Zarinpal request rejected [{self.invoice.uuid}]: code={code} {msg}")
            raise PurchaseFailedError(msg, code=code or 0, raw_data=body)

        return str(data["authority"])

    def pay(self) -> RedirectResponse:
        return RedirectResponse(url=f"{self.base_url}{ZARINPAL_START_PATH}{self.invoice.transaction_id or ''}")

    def verify(self) -> Receipt:
        authority = self.invoice.transaction_id
        body = self._post(self.base_url + ZARINPAL_VERIFY_PATH, {
            "merchant_id": self.settings.get("merchant_id") or "",
            "amount": self.invoice.amount,
            "authority": authority,
        })
        data = _data_section(body)
        code = safe_int(data.get("code"))
        logger.info(f"Zarinpal verify [{authority}]: {body}")

        if code not in (SUCCESS_CODE, ALREADY_VERIFIED_CODE):
            msg = _error_message(body, "Payment verification failed with Zarinpal.")
            logger.warning(f"Zarinpal verify rejected [{authority}]: code={code} {msg}")
            raise InvalidPaymentError(msg, code=code or 0, raw_data=body)

        ref_id = data.get("ref_id")
        return Receipt(
            reference_id=str(ref_id) if ref_id is not None else "",
            driver=self.name,
            date=now_utc(),
            raw_data=data,
        )

    def _purchase_data(self) -> Dict[str, Any]:
        payload = {
            "merchant_id": self.settings.get("merchant_id") or "",
            "amount": self.invoice.amount,
            "callback_url": self._callback_url(),
            "description": self._description(),
        }

        details = self.invoice.details
        metadata = {key: details[key] for key in METADATA_FIELDS if details.get(key) is not None}
        if metadata:
            payload["metadata"] = metadata

        if self.settings.get("currency") is not None:
            payload["currency"] = self.settings["currency"]

        return payload


register_gateway(ZarinpalGateway.name, ZarinpalGateway)
