"""Simple dependency container for wiring core services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable
from zoneinfo import ZoneInfo

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from classroom_bank.core.config import Settings
from classroom_bank.infrastructure.database import build_engine, build_session_factory, init_db
from classroom_bank.modules.scheduling.scheduler import ObligationScheduler
from classroom_bank.websocket.presence import PresenceRouter


def system_clock(timezone: str) -> Callable[[], datetime]:
    zone = ZoneInfo(timezone)

    def now() -> datetime:
        return datetime.now(zone)

    return now


@dataclass(slots=True)
class ApplicationContainer:
    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    presence: PresenceRouter
    scheduler: ObligationScheduler
    clock: Callable[[], datetime]

    @classmethod
    def build(cls, settings: Settings, clock: Callable[[], datetime] | None = None) -> "ApplicationContainer":
        engine = build_engine(settings)
        session_factory = build_session_factory(engine)
        presence = PresenceRouter()
        clock = clock or system_clock(settings.scheduler.timezone)
        scheduler = ObligationScheduler(
            session_factory,
            presence,
            settings.scheduler,
            clock,
            timeout=settings.database.timeout_seconds,
        )
        return cls(
            settings=settings,
            engine=engine,
            session_factory=session_factory,
            presence=presence,
            scheduler=scheduler,
            clock=clock,
        )

    @property
    def db_timeout(self) -> float:
        return self.settings.database.timeout_seconds

    async def startup(self) -> None:
        await init_db(self.engine)
        await self.scheduler.start()

    async def shutdown(self) -> None:
        await self.scheduler.shutdown()
        self.presence.clear()
        await self.engine.dispose()


__all__ = ["ApplicationContainer", "system_clock"]
