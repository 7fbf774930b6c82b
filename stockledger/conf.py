"""
Stock Ledger configuration.

Usage in settings.py:
    STOCK_LEDGER = {
        "ALERT_ON_MOVEMENT": True,
        "SCAN_CHUNK_SIZE": 500,
        "DEFAULT_ACTOR": "system",
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class LedgerSettings:
    """Stock Ledger configuration settings."""

    # Emit low_stock_detected after a movement leaves a record at/below its reorder point
    ALERT_ON_MOVEMENT: bool = True

    # Rows fetched per round-trip while scanning for low stock
    SCAN_CHUNK_SIZE: int = 500

    # Actor recorded on movements when the caller does not pass one
    DEFAULT_ACTOR: str = "system"


def get_ledger_settings() -> LedgerSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "STOCK_LEDGER", {})
    return LedgerSettings(**{
        k: v for k, v in user_settings.items()
        if k in LedgerSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_ledger_settings(), name)


ledger_settings = _LazySettings()
