"""Time-travel simulation against the shadow ledger.

The shadow accounts are clones of a student's live accounts that start with a
zero balance and no history but carry the live obligations. A simulation
replays ``days`` simulated days in one batch: on day ``n`` an obligation fires
when ``n`` is a multiple of its period, so day 0 fires every obligation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from classroom_bank.infrastructure.database.repositories.ledger_repository import (
    DEFAULT_TIMEOUT,
    SqlLedgerRepository,
)
from classroom_bank.modules.ledger.models import (
    LIVE_LEDGER,
    TIME_TRAVEL_LEDGER,
    LedgerAccount,
    Obligation,
    Transaction,
)
from classroom_bank.modules.ledger.repository import LedgerRepository
from classroom_bank.modules.ledger.service import LedgerService

from .exceptions import InvalidSimulationError, ShadowProfileNotFoundError

logger = logging.getLogger(__name__)

TIME_TRAVEL_UPDATE_EVENT = "timeTravelUpdate"

FIRE_PERIODS: dict[str, int] = {
    "weekly": 7,
    "bi-weekly": 14,
    "monthly": 30,
    "yearly": 365,
}


@dataclass(slots=True, frozen=True)
class PlannedFire:
    day: int
    obligation: Obligation
    transaction: Transaction


def plan_fires(
    obligations: Iterable[Obligation],
    days: int,
    start: datetime,
    day_length: timedelta = timedelta(days=1),
) -> list[PlannedFire]:
    """Every fire over ``[0, days)``, ordered by day then obligation order."""
    obligations = list(obligations)
    fires: list[PlannedFire] = []
    for day in range(days):
        stamp = start + day * day_length
        for obligation in obligations:
            period = FIRE_PERIODS.get(obligation.interval)
            if period is None:
                logger.warning("Skipping obligation %s with unknown interval %s", obligation.id, obligation.interval)
                continue
            if day % period == 0:
                fires.append(PlannedFire(day=day, obligation=obligation, transaction=obligation.to_transaction(stamp)))
    return fires


@dataclass(slots=True)
class TimeTravelService:
    repository: LedgerRepository

    @classmethod
    def with_session(cls, session: AsyncSession, timeout: float = DEFAULT_TIMEOUT) -> "TimeTravelService":
        return cls(SqlLedgerRepository(session, timeout))

    async def get_profile(self, member_name: str) -> Sequence[LedgerAccount]:
        accounts = await self.repository.list_accounts(member_name, TIME_TRAVEL_LEDGER)
        if not accounts:
            raise ShadowProfileNotFoundError(f"time travel profile for {member_name} not found")
        return accounts

    async def ensure_profile(self, member_name: str) -> tuple[Sequence[LedgerAccount], bool]:
        """Return the shadow accounts, cloning them from the live ledger on first use."""
        existing = await self.repository.list_accounts(member_name, TIME_TRAVEL_LEDGER)
        if existing:
            return existing, False
        live_accounts = await self.repository.list_accounts(member_name, LIVE_LEDGER)
        if not live_accounts:
            raise ShadowProfileNotFoundError(f"no live profile for {member_name} to clone")
        shadows = [
            await self.repository.create_account(
                profile_id=live.profile_id,
                account_holder=live.account_holder,
                account_type=live.account_type,
                ledger=TIME_TRAVEL_LEDGER,
                bills=live.bills,
                payments=live.payments,
            )
            for live in live_accounts
        ]
        logger.info("Created time travel profile for %s", member_name)
        return shadows, True

    async def reset_profile(self, member_name: str) -> Sequence[LedgerAccount]:
        await self.repository.delete_accounts(member_name, TIME_TRAVEL_LEDGER)
        shadows, _ = await self.ensure_profile(member_name)
        return shadows

    async def simulate(self, member_name: str, days: int, now: datetime) -> list[LedgerAccount]:
        if days <= 0:
            raise InvalidSimulationError("days must be a positive integer")
        shadows, _ = await self.ensure_profile(member_name)
        ledger = LedgerService(self.repository)
        updated: list[LedgerAccount] = []
        for account in shadows:
            fires = plan_fires(account.obligations, days, now)
            if fires:
                account = await self.repository.append_transactions(
                    account.id,
                    [fire.transaction for fire in fires],
                    [fire.transaction.date for fire in fires],
                )
            updated.append(await ledger.reconciler.reconcile_account(account))
            logger.info(
                "Simulated %d days for %s %s: %d transactions",
                days,
                member_name,
                account.account_type,
                len(fires),
            )
        return updated
