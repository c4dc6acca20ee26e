import json

import httpx
import pytest

from pardakht.payment.config import PaymentConfig
from pardakht.payment.gateways.zarinpal import ZarinpalGateway
from pardakht.payment.gateways.zibal import ZibalGateway


class FakeGatewayServer:
    """Answers POSTs with canned JSON per URL and records every request."""

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, url, body, status_code=200):
        self.routes[url] = (status_code, body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        if url not in self.routes:
            return httpx.Response(404, json={"message": f"no fake for {url}"})
        status_code, body = self.routes[url]
        return httpx.Response(status_code, json=body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    @property
    def last_json(self) -> dict:
        return json.loads(self.last.content)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))


ZARINPAL_SETTINGS = {
    "merchant_id": "test-merchant-id",
    "sandbox": False,
    "description": "Test payment via Zarinpal",
    "callback_url": "https://example.com/callback",
}

ZIBAL_SETTINGS = {
    "merchant": "test-zibal-merchant",
    "sandbox": False,
    "description": "Test payment via Zibal",
    "callback_url": "https://example.com/callback",
}


@pytest.fixture
def server():
    return FakeGatewayServer()


@pytest.fixture
def client(server):
    with server.client() as c:
        yield c


@pytest.fixture
def payment_config():
    return PaymentConfig(
        default="zarinpal",
        drivers={"zarinpal": dict(ZARINPAL_SETTINGS), "zibal": dict(ZIBAL_SETTINGS)},
        map={"zarinpal": ZarinpalGateway, "zibal": ZibalGateway},
    )
