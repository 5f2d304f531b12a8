"""Balance reconciliation: recompute the cached balance from transaction history."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .exceptions import AccountNotFoundError
from .models import LIVE_LEDGER, LedgerAccount, compute_balance
from .repository import LedgerRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BalanceReconciler:
    repository: LedgerRepository

    async def reconcile(self, account_holder: str, account_type: str, ledger: str = LIVE_LEDGER) -> LedgerAccount:
        """Sum the account's transactions, store the total and return the refreshed account.

        Running it again without new transactions stores and returns the same balance.
        Raises ``AccountNotFoundError`` when the account is missing.
        """
        account = await self.repository.get_account(account_holder, account_type, ledger)
        if account is None:
            logger.warning("Reconciliation skipped, %s %s account for %s not found", ledger, account_type, account_holder)
            raise AccountNotFoundError(account_holder, account_type, ledger)
        return await self.reconcile_account(account)

    async def reconcile_account(self, account: LedgerAccount) -> LedgerAccount:
        total = compute_balance(account.transactions)
        refreshed = await self.repository.set_balance(account.id, total)
        logger.debug(
            "Reconciled %s %s for %s: %s",
            refreshed.ledger,
            refreshed.account_type,
            refreshed.account_holder,
            refreshed.balance_total,
        )
        return refreshed
