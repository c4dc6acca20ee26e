"""
Payment Module - Dependencies
==============================
FastAPI dependencies for using PaymentManager inside route handlers.
These are injected via Depends().

A manager holds the state of one payment flow, so every request gets its own.
"""

from functools import lru_cache

import httpx
from fastapi import Depends, HTTPException

from pardakht.common.exceptions import GatewayError
from pardakht.config.settings import PAYMENT_HTTP_TIMEOUT
from pardakht.payment.config import PaymentConfig
from pardakht.payment.service import PaymentManager


@lru_cache()
def get_payment_config() -> PaymentConfig:
    """Environment-backed configuration, built once per process."""
    return PaymentConfig.from_settings()


def get_payment_manager(config: PaymentConfig = Depends(get_payment_config)):
    """FastAPI dependency: yields a fresh PaymentManager, closes its HTTP client after request."""
    client = httpx.Client(timeout=PAYMENT_HTTP_TIMEOUT)
    try:
        yield PaymentManager(config, client=client)
    finally:
        client.close()


def raise_http(error: GatewayError, status_code: int = 400):
    """Convert a gateway exception to an HTTP exception."""
    raise HTTPException(status_code=status_code, detail=error.message)
