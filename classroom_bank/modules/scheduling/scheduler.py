"""Wall-clock scheduler that materialises obligations into transactions."""

from __future__ import annotations

import asyncio
import itertools
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Awaitable, Callable, Dict, Iterable, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from classroom_bank.core.config import SchedulerSettings
from classroom_bank.infrastructure.database.repositories.ledger_repository import (
    DEFAULT_TIMEOUT,
    SqlLedgerRepository,
)
from classroom_bank.modules.ledger.models import LIVE_LEDGER, LedgerAccount, Obligation
from classroom_bank.modules.ledger.service import LedgerService, publish_account_updates
from classroom_bank.websocket.presence import PresenceRouter

from .rules import RecurrenceRule, resolve_rule

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
Sleep = Callable[[float], Awaitable[None]]


def seconds_until(moment: datetime, now: datetime) -> float:
    """Elapsed real time between two aware datetimes, across offset changes."""
    return (moment.astimezone(timezone.utc) - now.astimezone(timezone.utc)).total_seconds()


@dataclass(slots=True)
class ScheduledJob:
    key: str
    account_holder: str
    account_type: str
    obligation: Obligation
    rule: RecurrenceRule
    task: Optional[asyncio.Task] = None
    fires: int = 0
    next_fire_at: Optional[datetime] = None

    def cancel(self) -> None:
        if self.task is not None and not self.task.done():
            self.task.cancel()


class ObligationScheduler:
    """Owns the table of live obligation jobs.

    With ``deduplicate_jobs`` a job is keyed by its obligation id and a second
    registration replaces the first. Without it every registration adds a new
    job, so an obligation registered twice fires twice per occurrence.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        presence: PresenceRouter,
        settings: SchedulerSettings,
        clock: Clock,
        timeout: float = DEFAULT_TIMEOUT,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.session_factory = session_factory
        self.presence = presence
        self.settings = settings
        self.clock = clock
        self.timeout = timeout
        self._sleep = sleep
        self.jobs: Dict[str, ScheduledJob] = {}
        self._sequence = itertools.count(1)

    def _job_key(self, obligation: Obligation) -> str:
        if self.settings.deduplicate_jobs:
            return obligation.id
        return f"{obligation.id}#{next(self._sequence)}"

    def register(self, account_holder: str, account_type: str, obligation: Obligation) -> ScheduledJob:
        rule = resolve_rule(obligation.interval, obligation.created_at, self.settings.recurrence_mode)
        key = self._job_key(obligation)
        existing = self.jobs.pop(key, None)
        if existing is not None:
            existing.cancel()

        job = ScheduledJob(
            key=key,
            account_holder=account_holder,
            account_type=account_type,
            obligation=obligation,
            rule=rule,
        )
        job.task = asyncio.create_task(self._run(job), name=f"obligation-{key}")
        self.jobs[key] = job
        logger.info(
            "Registered %s %s %s for %s (job %s)",
            obligation.interval,
            obligation.kind,
            obligation.name,
            account_holder,
            key,
        )
        return job

    def register_account(self, account: LedgerAccount) -> list[ScheduledJob]:
        """Register a job for every obligation currently on the account."""
        return [
            self.register(account.account_holder, account.account_type, obligation)
            for obligation in account.obligations
        ]

    def jobs_for(self, obligation_id: str) -> list[ScheduledJob]:
        return [job for job in self.jobs.values() if job.obligation.id == obligation_id]

    def cancel(self, key: str) -> bool:
        job = self.jobs.pop(key, None)
        if job is None:
            return False
        job.cancel()
        return True

    async def start(self) -> int:
        """Register every obligation already stored on a live account."""
        if not self.settings.restore_on_startup:
            return 0
        try:
            async with self.session_factory() as session:
                repository = SqlLedgerRepository(session, self.timeout)
                accounts = await repository.list_accounts_with_obligations(LIVE_LEDGER)
        except Exception:  # pylint: disable=broad-except
            logger.exception("Failed to restore obligation schedules")
            return 0
        restored = sum(len(self.register_account(account)) for account in accounts)
        logger.info("Restored %d obligation jobs", restored)
        return restored

    async def shutdown(self) -> None:
        jobs = list(self.jobs.values())
        self.jobs.clear()
        for job in jobs:
            job.cancel()
        tasks: Iterable[asyncio.Task] = [job.task for job in jobs if job.task is not None]
        await asyncio.gather(*tasks, return_exceptions=True)

    async def _run(self, job: ScheduledJob) -> None:
        try:
            while True:
                now = self.clock()
                # never step back behind an occurrence that already fired
                after = max(now, job.next_fire_at) if job.next_fire_at is not None else now
                job.next_fire_at = job.rule.next_fire(after)
                await self._sleep(max(seconds_until(job.next_fire_at, now), 0))
                await self.fire(job, job.next_fire_at)
        except asyncio.CancelledError:
            logger.debug("Obligation job %s cancelled", job.key)

    async def fire(self, job: ScheduledJob, fired_at: Optional[datetime] = None) -> Optional[LedgerAccount]:
        """Append one transaction cloned from the obligation, reconcile and push.

        Failures are logged and swallowed; the job stays registered.
        """
        fired_at = fired_at or self.clock()
        try:
            async with self.session_factory() as session:
                service = LedgerService.with_session(session, self.timeout)
                account = await service.apply_obligation(
                    job.account_holder,
                    job.account_type,
                    job.obligation,
                    fired_at,
                )
                await session.commit()
        except Exception:  # pylint: disable=broad-except
            logger.exception("Obligation job %s failed to fire", job.key)
            return None

        job.fires += 1
        logger.info(
            "Fired %s %s for %s, balance now %s",
            job.obligation.interval,
            job.obligation.name,
            job.account_holder,
            account.balance_total,
        )
        await publish_account_updates(self.presence, [account])
        return account
