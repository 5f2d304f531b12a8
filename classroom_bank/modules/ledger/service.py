"""Domain services for ledger mutations.

Every operation appends transactions and reconciles the touched accounts on the
same session, so callers commit once and then publish one update per account.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from classroom_bank.infrastructure.database.repositories.ledger_repository import (
    DEFAULT_TIMEOUT,
    SqlLedgerRepository,
)
from classroom_bank.websocket.presence import PresenceRouter

from .exceptions import AccountNotFoundError, InvalidLedgerOperationError
from .models import (
    ACCOUNT_TYPES,
    CHECKING,
    INTERVALS,
    LIVE_LEDGER,
    LedgerAccount,
    Obligation,
    Transaction,
    to_cents,
)
from .reconciliation import BalanceReconciler
from .repository import LedgerRepository

logger = logging.getLogger(__name__)

ACCOUNT_UPDATE_EVENT = "checkingAccountUpdate"


async def publish_account_updates(
    presence: PresenceRouter,
    accounts: Iterable[LedgerAccount],
    event: str = ACCOUNT_UPDATE_EVENT,
) -> int:
    """Push each account to its holder if connected; returns how many were delivered."""
    delivered = 0
    for account in accounts:
        if await presence.send_to(account.account_holder, event, account.to_payload()):
            delivered += 1
    return delivered


@dataclass(slots=True)
class LedgerService:
    repository: LedgerRepository

    @classmethod
    def with_session(cls, session: AsyncSession, timeout: float = DEFAULT_TIMEOUT) -> "LedgerService":
        return cls(SqlLedgerRepository(session, timeout))

    @property
    def reconciler(self) -> BalanceReconciler:
        return BalanceReconciler(self.repository)

    async def get_account(self, account_holder: str, account_type: str, ledger: str = LIVE_LEDGER) -> LedgerAccount:
        account = await self.repository.get_account(account_holder, account_type, ledger)
        if account is None:
            raise AccountNotFoundError(account_holder, account_type, ledger)
        return account

    async def list_accounts(self, account_holder: str, ledger: str = LIVE_LEDGER) -> Sequence[LedgerAccount]:
        return await self.repository.list_accounts(account_holder, ledger)

    async def open_accounts(self, profile_id: int, account_holder: str) -> list[LedgerAccount]:
        return [
            await self.repository.create_account(
                profile_id=profile_id,
                account_holder=account_holder,
                account_type=account_type,
                ledger=LIVE_LEDGER,
            )
            for account_type in ACCOUNT_TYPES
        ]

    async def reconcile(self, account_holder: str, account_type: str, ledger: str = LIVE_LEDGER) -> LedgerAccount:
        return await self.reconciler.reconcile(account_holder, account_type, ledger)

    async def post_transactions(
        self,
        account: LedgerAccount,
        transactions: Sequence[Transaction],
        movements: Sequence[datetime] = (),
    ) -> LedgerAccount:
        updated = await self.repository.append_transactions(account.id, transactions, movements)
        return await self.reconciler.reconcile_account(updated)

    async def add_obligation(
        self,
        *,
        account_holder: str,
        kind: str,
        amount: Decimal,
        interval: str,
        name: str,
        category: str,
        date: Optional[datetime],
        created_at: datetime,
    ) -> tuple[LedgerAccount, Obligation]:
        if interval not in INTERVALS:
            raise InvalidLedgerOperationError(f"unsupported interval: {interval}")
        account = await self.get_account(account_holder, CHECKING)
        obligation = Obligation(
            id=uuid.uuid4().hex,
            kind=kind,
            amount=amount,
            interval=interval,
            name=name,
            category=category,
            created_at=created_at,
            date=date,
        )
        account = await self.repository.append_obligation(account.id, obligation)
        account = await self.reconciler.reconcile_account(account)
        logger.info("Added %s %s (%s) to %s", interval, kind, name, account_holder)
        return account, obligation

    async def apply_obligation(
        self,
        account_holder: str,
        account_type: str,
        obligation: Obligation,
        fired_at: datetime,
        ledger: str = LIVE_LEDGER,
    ) -> LedgerAccount:
        account = await self.get_account(account_holder, account_type, ledger)
        return await self.post_transactions(account, [obligation.to_transaction(fired_at)], [fired_at])

    async def transfer(
        self,
        *,
        account_holder: str,
        from_account: str,
        to_account: str,
        amount: Decimal,
        now: datetime,
    ) -> list[LedgerAccount]:
        if from_account == to_account:
            raise InvalidLedgerOperationError("cannot transfer into the same account")
        amount = self._positive_cents(amount)
        source = await self.get_account(account_holder, from_account)
        destination = await self.get_account(account_holder, to_account)
        source = await self.post_transactions(
            source,
            [Transaction(amount=-amount, name=f"Transfer to {to_account}", category="Transfer", date=now)],
            [now],
        )
        destination = await self.post_transactions(
            destination,
            [Transaction(amount=amount, name=f"Transfer from {from_account}", category="Transfer", date=now)],
            [now],
        )
        return [source, destination]

    async def deposit(
        self,
        *,
        account_holder: str,
        destination: str,
        amount: Decimal,
        name: str,
        now: datetime,
    ) -> LedgerAccount:
        amount = self._positive_cents(amount)
        account = await self.get_account(account_holder, destination)
        return await self.post_transactions(
            account,
            [Transaction(amount=amount, name=name, category="Deposit", date=now)],
            [now],
        )

    async def send_funds(
        self,
        *,
        sender: str,
        recipient: str,
        amount: Decimal,
        now: datetime,
    ) -> list[LedgerAccount]:
        if sender == recipient:
            raise InvalidLedgerOperationError("cannot send funds to yourself")
        amount = self._positive_cents(amount)
        source = await self.get_account(sender, CHECKING)
        destination = await self.get_account(recipient, CHECKING)
        source = await self.post_transactions(
            source,
            [Transaction(amount=-amount, name=f"Sent to {recipient}", category="Money Sent", date=now)],
            [now],
        )
        destination = await self.post_transactions(
            destination,
            [Transaction(amount=amount, name=f"Received from {sender}", category="Money Received", date=now)],
            [now],
        )
        return [source, destination]

    async def loan(self, *, account_holder: str, amount: Decimal, now: datetime) -> LedgerAccount:
        amount = self._positive_cents(amount)
        account = await self.get_account(account_holder, CHECKING)
        return await self.post_transactions(
            account,
            [Transaction(amount=amount, name="Loan", category="Loan", date=now)],
            [now],
        )

    @staticmethod
    def _positive_cents(amount: Decimal) -> Decimal:
        amount = to_cents(amount)
        if amount <= 0:
            raise InvalidLedgerOperationError("amount must be at least one cent")
        return amount
