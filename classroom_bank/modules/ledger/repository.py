"""Repository protocol for the account ledger store."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Iterable, Protocol, Sequence

from .models import LedgerAccount, Obligation, Transaction


class LedgerRepository(Protocol):
    """Abstract repository interface for account persistence."""

    async def get_account(self, account_holder: str, account_type: str, ledger: str) -> LedgerAccount | None:
        ...

    async def list_accounts(self, account_holder: str, ledger: str) -> Sequence[LedgerAccount]:
        ...

    async def list_accounts_with_obligations(self, ledger: str) -> Sequence[LedgerAccount]:
        ...

    async def create_account(
        self,
        *,
        profile_id: int,
        account_holder: str,
        account_type: str,
        ledger: str,
        bills: Iterable[Obligation] = (),
        payments: Iterable[Obligation] = (),
    ) -> LedgerAccount:
        ...

    async def delete_accounts(self, account_holder: str, ledger: str) -> int:
        ...

    async def append_transactions(
        self,
        account_id: int,
        transactions: Iterable[Transaction],
        movements: Iterable[datetime] = (),
    ) -> LedgerAccount:
        ...

    async def append_obligation(self, account_id: int, obligation: Obligation) -> LedgerAccount:
        ...

    async def set_balance(self, account_id: int, balance: Decimal) -> LedgerAccount:
        ...
