"""
conftest.py - Shared pytest fixtures

Provides an in-memory database per test, a presence router, a recording fake
connection and helpers for seeding profiles and ledger history.
"""

import json
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, List, Optional

import pytest

from classroom_bank.core.config import DatabaseSettings, SchedulerSettings, Settings
from classroom_bank.infrastructure.database import build_engine, build_session_factory, init_db
from classroom_bank.modules.ledger.models import Transaction
from classroom_bank.modules.roster.service import ProfileService
from classroom_bank.websocket.presence import PresenceRouter

# a Tuesday in March
FIXED_NOW = datetime(2026, 3, 10, 9, 30, tzinfo=timezone.utc)


class FakeConnection:
    """Stands in for a websocket; records decoded frames."""

    def __init__(self, fail: bool = False) -> None:
        self.frames: List[dict] = []
        self.fail = fail

    async def send_text(self, data: str) -> None:
        if self.fail:
            raise RuntimeError("connection closed")
        self.frames.append(json.loads(data))

    def events(self, event_type: Optional[str] = None) -> List[dict]:
        return [frame for frame in self.frames if event_type is None or frame["type"] == event_type]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        environment="test",
        database=DatabaseSettings(url="sqlite+aiosqlite://"),
        scheduler=SchedulerSettings(restore_on_startup=False),
    )


@pytest.fixture
async def engine(settings):
    engine = build_engine(settings)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def presence() -> PresenceRouter:
    return PresenceRouter()


async def create_student(session, member_name: str, teacher_name: Optional[str] = None, class_period: str = "1"):
    profile, accounts = await ProfileService.with_session(session).create_profile(
        member_name,
        class_period=class_period,
        teacher_name=teacher_name,
    )
    await session.commit()
    return profile, accounts


def tx(amount: Any, name: str = "seed", date: Optional[datetime] = None) -> Transaction:
    return Transaction(amount=Decimal(str(amount)), name=name, category="Test", date=date or FIXED_NOW)
