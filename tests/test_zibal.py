import pytest

from pardakht.common.exceptions import InvalidPaymentError, PurchaseFailedError
from pardakht.payment.gateways.zibal import ZibalGateway
from pardakht.payment.models import Invoice

from conftest import ZIBAL_SETTINGS

REQUEST_URL = "https://gateway.zibal.ir/v1/request"
VERIFY_URL = "https://gateway.zibal.ir/v1/verify"

TRACK_ID = "15966442233311"


def make_gateway(client, invoice, **overrides):
    return ZibalGateway({**ZIBAL_SETTINGS, **overrides}, client=client).set_invoice(invoice)


# ── Purchase ──

def test_purchase_success_returns_track_id(server, client):
    server.add(REQUEST_URL, {"trackId": 15966442233311, "result": 100, "message": "success"})
    invoice = Invoice(amount=160000, description="Test Zibal order")

    assert make_gateway(client, invoice).purchase() == TRACK_ID

    sent = server.last_json
    assert sent == {
        "merchant": "test-zibal-merchant",
        "amount": 160000,
        "callbackUrl": "https://example.com/callback",
        "description": "Test Zibal order",
    }


def test_purchase_omits_empty_description(server, client):
    server.add(REQUEST_URL, {"trackId": 1, "result": 100})

    make_gateway(client, Invoice(amount=1000), description="").purchase()

    assert "description" not in server.last_json


def test_purchase_sends_each_optional_detail(server, client):
    server.add(REQUEST_URL, {"trackId": 99887766, "result": 100})
    invoice = Invoice(amount=1000).detail({
        "order_id": "ORD-456",
        "mobile": "09121234567",
        "allowed_cards": ["6037991234567890"],
        "national_code": "0012345678",
        "email": "ignored@example.com",
    })

    make_gateway(client, invoice).purchase()

    sent = server.last_json
    assert sent["orderId"] == "ORD-456"
    assert sent["mobile"] == "09121234567"
    assert sent["allowedCards"] == ["6037991234567890"]
    assert sent["nationalCode"] == "0012345678"
    assert "email" not in sent


def test_purchase_sends_only_present_details(server, client):
    server.add(REQUEST_URL, {"trackId": 1, "result": 100})

    make_gateway(client, Invoice(amount=1000).detail("mobile", "09121234567")).purchase()

    sent = server.last_json
    assert sent["mobile"] == "09121234567"
    assert "orderId" not in sent
    assert "allowedCards" not in sent
    assert "nationalCode" not in sent


def test_purchase_failure_raises(server, client):
    body = {"result": 102, "message": "merchant یافت نشد."}
    server.add(REQUEST_URL, body)

    with pytest.raises(PurchaseFailedError) as exc:
        make_gateway(client, Invoice(amount=1000)).purchase()

    assert exc.value.message == "merchant یافت نشد."
    assert exc.value.code == 102
    assert exc.value.raw_data == body


def test_purchase_failure_without_message_uses_generic(server, client):
    server.add(REQUEST_URL, {"result": 105})

    with pytest.raises(PurchaseFailedError, match="Purchase failed with Zibal."):
        make_gateway(client, Invoice(amount=1000)).purchase()


def test_string_result_code_is_accepted(server, client):
    server.add(REQUEST_URL, {"trackId": 42, "result": "100"})

    assert make_gateway(client, Invoice(amount=1000)).purchase() == "42"


def test_sandbox_sends_sentinel_merchant_on_same_host(server, client):
    server.add(REQUEST_URL, {"trackId": 42, "result": 100})
    server.add(VERIFY_URL, {"result": 100, "refNumber": 7})
    invoice = Invoice(amount=1000)
    gateway = make_gateway(client, invoice, sandbox=True, merchant="real-merchant")

    invoice.transaction_id = gateway.purchase()
    assert str(server.last.url) == REQUEST_URL
    assert server.last_json["merchant"] == "zibal"

    gateway.verify()
    assert str(server.last.url) == VERIFY_URL
    assert server.last_json["merchant"] == "zibal"

    assert gateway.pay().url == "https://gateway.zibal.ir/start/42"


# ── Pay ──

def test_pay_returns_start_url(client):
    redirect = make_gateway(client, Invoice(amount=1000, transaction_id=TRACK_ID)).pay()

    assert redirect.url == f"https://gateway.zibal.ir/start/{TRACK_ID}"
    assert redirect.method == "GET"


# ── Verify ──

def test_verify_success_returns_receipt(server, client):
    body = {
        "paidAt": "2025-01-15T10:30:00",
        "amount": 160000,
        "result": 100,
        "status": 1,
        "refNumber": 123456789,
        "cardNumber": "6274-12**-****-5544",
        "orderId": "ORD-456",
        "message": "success",
    }
    server.add(VERIFY_URL, body)

    receipt = make_gateway(client, Invoice(amount=160000, transaction_id=TRACK_ID)).verify()

    assert receipt.reference_id == "123456789"
    assert receipt.driver == "zibal"
    assert receipt.raw_data == body
    assert server.last_json == {"merchant": "test-zibal-merchant", "trackId": TRACK_ID}


def test_verify_already_verified_is_success(server, client):
    server.add(VERIFY_URL, {"result": 201, "refNumber": 999})

    receipt = make_gateway(client, Invoice(amount=1, transaction_id=TRACK_ID)).verify()

    assert receipt.reference_id == "999"


def test_verify_falls_back_to_track_id(server, client):
    server.add(VERIFY_URL, {"result": 100, "trackId": 555})

    receipt = make_gateway(client, Invoice(amount=1, transaction_id="555")).verify()

    assert receipt.reference_id == "555"


@pytest.mark.parametrize("code, message", [
    (102, "Merchant not found."),
    (103, "Merchant is inactive."),
    (104, "Invalid merchant."),
    (202, "Payment was not successful or has not been paid."),
    (203, "Invalid trackId."),
])
def test_verify_known_error_codes(server, client, code, message):
    body = {"result": code, "message": "provider text"}
    server.add(VERIFY_URL, body)

    with pytest.raises(InvalidPaymentError) as exc:
        make_gateway(client, Invoice(amount=1, transaction_id=TRACK_ID)).verify()

    assert exc.value.message == message
    assert exc.value.code == code
    assert exc.value.raw_data == body


def test_verify_unknown_code_uses_provider_message(server, client):
    server.add(VERIFY_URL, {"result": 999, "message": "خطای ناشناخته"})

    with pytest.raises(InvalidPaymentError, match="خطای ناشناخته"):
        make_gateway(client, Invoice(amount=1, transaction_id=TRACK_ID)).verify()


def test_verify_unknown_code_without_message_uses_generic(server, client):
    server.add(VERIFY_URL, {"result": 999})

    with pytest.raises(InvalidPaymentError, match="Payment verification failed with Zibal."):
        make_gateway(client, Invoice(amount=1, transaction_id=TRACK_ID)).verify()


def test_none_details_are_not_sent(server, client):
    server.add(REQUEST_URL, {"trackId": 1, "result": 100})
    invoice = Invoice(amount=1000).detail({"mobile": None, "order_id": None, "national_code": "0012345678"})

    make_gateway(client, invoice).purchase()

    sent = server.last_json
    assert "mobile" not in sent
    assert "orderId" not in sent
    assert sent["nationalCode"] == "0012345678"


def test_verify_with_null_track_id_gives_empty_reference(server, client):
    server.add(VERIFY_URL, {"result": 100, "trackId": None})

    receipt = make_gateway(client, Invoice(amount=1, transaction_id=TRACK_ID)).verify()

    assert receipt.reference_id == ""


def test_pay_without_transaction_id_has_empty_suffix(client):
    redirect = make_gateway(client, Invoice(amount=1000)).pay()

    assert redirect.url == "https://gateway.zibal.ir/start/"
