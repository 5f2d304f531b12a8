"""Account ledger domain exports"""

from .exceptions import AccountNotFoundError, InvalidLedgerOperationError, LedgerTimeoutError
from .models import (
    ACCOUNT_TYPES,
    CHECKING,
    INTERVALS,
    LIVE_LEDGER,
    SAVINGS,
    TIME_TRAVEL_LEDGER,
    LedgerAccount,
    Obligation,
    Transaction,
    compute_balance,
    to_cents,
)
from .reconciliation import BalanceReconciler

__all__ = [
    "ACCOUNT_TYPES",
    "CHECKING",
    "INTERVALS",
    "LIVE_LEDGER",
    "SAVINGS",
    "TIME_TRAVEL_LEDGER",
    "AccountNotFoundError",
    "BalanceReconciler",
    "InvalidLedgerOperationError",
    "LedgerAccount",
    "LedgerTimeoutError",
    "Obligation",
    "Transaction",
    "compute_balance",
    "to_cents",
]
