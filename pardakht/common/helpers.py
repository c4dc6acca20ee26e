"""
Pardakht - Shared Helpers
==========================
Pure utility functions with NO gateway or module dependencies.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Optional


def now_utc() -> datetime:
    """Returns current UTC datetime (timezone-aware)."""
    return datetime.now(timezone.utc)


def safe_int(value: Any) -> Optional[int]:
    """Safely convert a provider value to int. Returns None on failure."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    try:
        return int(str(value).strip())
    except (ValueError, TypeError):
        return None


def new_uuid() -> str:
    return str(uuid.uuid4())
