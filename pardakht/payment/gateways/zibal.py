"""
Zibal Gateway
==============
REST/JSON. Sandbox: merchant="zibal" → auto-succeed, same host.
Docs: https://help.zibal.ir/IPG/API/
"""

import logging
from typing import Any, Dict

from pardakht.common.exceptions import InvalidPaymentError, PurchaseFailedError
from pardakht.common.helpers import now_utc, safe_int
from pardakht.payment.gateways import BaseGateway, register_gateway
from pardakht.payment.models import Receipt, RedirectResponse

logger = logging.getLogger("pardakht.gateway.zibal")

ZIBAL_BASE_URL = "https://gateway.zibal.ir"
ZIBAL_REQUEST_URL = ZIBAL_BASE_URL + "/v1/request"
ZIBAL_VERIFY_URL = ZIBAL_BASE_URL + "/v1/verify"
ZIBAL_START_PATH = "/start/"

SUCCESS_CODE = 100
ALREADY_VERIFIED_CODE = 201
SANDBOX_MERCHANT = "zibal"

VERIFY_ERRORS = {
    102: "Merchant not found.",
    103: "Merchant is inactive.",
    104: "Invalid merchant.",
    202: "Payment was not successful or has not been paid.",
    203: "Invalid trackId.",
}

# invoice detail key → Zibal request field
OPTIONAL_FIELDS = (
    ("order_id", "orderId"),
    ("mobile", "mobile"),
    ("allowed_cards", "allowedCards"),
    ("national_code", "nationalCode"),
)


class ZibalGateway(BaseGateway):
    name = "zibal"
    label = "زیبال"

    def purchase(self) -> str:
        data = self._post(ZIBAL_REQUEST_URL, self._purchase_data())
        result = safe_int(data.get("result"))
        logger.info(f"Zibal request [{self.invoice.uuid}]: {data}")

        if result != SUCCESS_CODE:
            msg = data.get("message") or "Purchase failed with Zibal."
            logger.warning(f"Zibal request rejected [{self.invoice.uuid}]: code={result} {msg}")
            raise PurchaseFailedError(str(msg), code=result or 0, raw_data=data)

        return str(data["trackId"])

    def pay(self) -> RedirectResponse:
        return RedirectResponse(url=f"{ZIBAL_BASE_URL}{ZIBAL_START_PATH}{self.invoice.transaction_id or ''}")

    def verify(self) -> Receipt:
        track_id = self.invoice.transaction_id
        data = self._post(ZIBAL_VERIFY_URL, {
            "merchant": self._merchant(),
            "trackId": track_id,
        })
        result = safe_int(data.get("result"))
        logger.info(f"Zibal verify [{track_id}]: {data}")

        if result not in (SUCCESS_CODE, ALREADY_VERIFIED_CODE):
            msg = VERIFY_ERRORS.get(result) or data.get("message") or "Payment verification failed with Zibal."
            logger.warning(f"Zibal verify rejected [{track_id}]: code={result} {msg}")
            raise InvalidPaymentError(str(msg), code=result or 0, raw_data=data)

        ref_number = data.get("refNumber")
        if ref_number is None:
            ref_number = data.get("trackId")
        if ref_number is None:
            ref_number = ""
        return Receipt(
            reference_id=str(ref_number),
            driver=self.name,
            date=now_utc(),
            raw_data=data,
        )

    def _merchant(self) -> str:
        if self.settings.get("sandbox"):
            return SANDBOX_MERCHANT
        return str(self.settings.get("merchant") or "")

    def _purchase_data(self) -> Dict[str, Any]:
        payload = {
            "merchant": self._merchant(),
            "amount": self.invoice.amount,
            "callbackUrl": self._callback_url(),
        }

        description = self._description()
        if description:
            payload["description"] = description

        details = self.invoice.details
        for key, field_name in OPTIONAL_FIELDS:
            if details.get(key) is not None:
                payload[field_name] = details[key]

        return payload


register_gateway(ZibalGateway.name, ZibalGateway)
