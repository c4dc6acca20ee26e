"""
Pardakht - Centralized Configuration
=====================================
All environment variables and constants are loaded here.
No other module should call os.getenv() directly.
"""

import os
from dotenv import load_dotenv

load_dotenv()


# ==========================================
# 🏦 Gateway Selection
# ==========================================
PAYMENT_GATEWAY = os.getenv("PAYMENT_GATEWAY", "zarinpal")

# Shared default for every driver; can be overridden per invoice or per call
PAYMENT_CALLBACK_URL = os.getenv("PAYMENT_CALLBACK_URL", "")

PAYMENT_HTTP_TIMEOUT = float(os.getenv("PAYMENT_HTTP_TIMEOUT") or "15")


# ==========================================
# 💳 Zarinpal
# ==========================================
ZARINPAL_MERCHANT_ID = os.getenv("ZARINPAL_MERCHANT_ID", "")
ZARINPAL_SANDBOX = os.getenv("ZARINPAL_SANDBOX", "false").lower() == "true"
ZARINPAL_DESCRIPTION = os.getenv("ZARINPAL_DESCRIPTION", "Payment via Zarinpal")


# ==========================================
# 💳 Zibal
# ==========================================
ZIBAL_MERCHANT = os.getenv("ZIBAL_MERCHANT", "")
ZIBAL_SANDBOX = os.getenv("ZIBAL_SANDBOX", "false").lower() == "true"
ZIBAL_DESCRIPTION = os.getenv("ZIBAL_DESCRIPTION", "Payment via Zibal")
