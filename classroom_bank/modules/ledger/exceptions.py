"""Ledger domain specific exceptions."""

from classroom_bank.core.errors import NotFoundError, StoreTimeoutError, ValidationError


class AccountNotFoundError(NotFoundError):
    """Raised when no account exists for a holder and account type."""

    def __init__(self, account_holder: str, account_type: str, ledger: str = "live") -> None:
        super().__init__(f"{ledger} {account_type} account for {account_holder} not found")
        self.account_holder = account_holder
        self.account_type = account_type
        self.ledger = ledger


class InvalidLedgerOperationError(ValidationError):
    """Raised when amounts or account pairs are not acceptable."""


class LedgerTimeoutError(StoreTimeoutError):
    """Raised when a ledger store call exceeds the configured timeout."""
