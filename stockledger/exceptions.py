"""
Exceptions for Stock Ledger.

All errors are LedgerError subclasses with a structured code for
programmatic handling. Catch by type, branch on ``code`` or read ``data``.
"""

from decimal import Decimal
from typing import Any


class LedgerError(Exception):
    """
    Structured exception for ledger operations.

    Usage:
        try:
            ledger.reserve('ITM002', 'WH001', Decimal('200'))
        except InsufficientAvailable as e:
            print(f"Only {e.available} available")

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data (key, attempted quantities, balances)
    """

    default_code = 'LEDGER_ERROR'

    _default_messages = {
        'LEDGER_ERROR': 'Stock ledger error',
        'INVARIANT_VIOLATION': 'Operation would break a stock invariant',
        'INSUFFICIENT_AVAILABLE': 'Requested quantity is not available',
        'OVER_RELEASE': 'Release exceeds reserved quantity',
        'RESERVATION_MISMATCH': 'Issue exceeds reserved quantity',
        'NOT_FOUND': 'Item/warehouse not found',
        'INVALID_QUANTITY': 'Invalid quantity (must be positive)',
        'REASON_REQUIRED': 'Reason is required',
        'SAME_WAREHOUSE': 'Transfer source and destination are the same warehouse',
    }

    def __init__(self, code: str | None = None, message: str | None = None, **data):
        self.code = code or self.default_code
        self.message = message or self._default_messages.get(self.code, self.code)
        self.data = data
        super().__init__(self.message)

    def __str__(self) -> str:
        if not self.data:
            return f"[{self.code}] {self.message}"
        context = ', '.join(f"{k}={v}" for k, v in self.data.items())
        return f"[{self.code}] {self.message} ({context})"

    @property
    def available(self) -> Decimal:
        """Shortcut for data['available']."""
        return self.data.get('available', Decimal('0'))

    @property
    def requested(self) -> Decimal:
        """Shortcut for data['requested']."""
        return self.data.get('requested', Decimal('0'))

    @property
    def key(self) -> tuple[str | None, str | None]:
        """(item, warehouse) the failure refers to."""
        return self.data.get('item'), self.data.get('warehouse')

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'data': {
                k: str(v) if isinstance(v, Decimal) else v
                for k, v in self.data.items()
            }
        }


class InvariantViolation(LedgerError):
    """Mutation would leave on_hand < 0 or reserved outside [0, on_hand]."""

    default_code = 'INVARIANT_VIOLATION'


class InsufficientAvailable(LedgerError):
    """Reservation or issue larger than the available quantity. Recoverable."""

    default_code = 'INSUFFICIENT_AVAILABLE'


class OverRelease(LedgerError):
    default_code = 'OVER_RELEASE'


class ReservationMismatch(LedgerError):
    default_code = 'RESERVATION_MISMATCH'


class NotFound(LedgerError):
    """Unknown (or inactive) item, warehouse or item/warehouse pair."""

    default_code = 'NOT_FOUND'


class InvalidQuantity(LedgerError):
    default_code = 'INVALID_QUANTITY'


class ReasonRequired(LedgerError):
    default_code = 'REASON_REQUIRED'
