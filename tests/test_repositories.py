"""
test_repositories.py - Store call time limits

Tests cover:
1. Reads and flushes that overrun the timeout on every repository
2. The ledger's own timeout error staying inside the store taxonomy
"""

import asyncio

import pytest

from classroom_bank.core.errors import StoreTimeoutError
from classroom_bank.infrastructure.database.repositories.ledger_repository import SqlLedgerRepository
from classroom_bank.infrastructure.database.repositories.profile_repository import SqlProfileRepository
from classroom_bank.infrastructure.database.repositories.thread_repository import SqlThreadRepository
from classroom_bank.modules.ledger import CHECKING, LIVE_LEDGER
from classroom_bank.modules.ledger.exceptions import LedgerTimeoutError
from classroom_bank.modules.messaging.service import MessagingService

TIMEOUT = 0.01


class StalledSession:
    """A session whose round trips never come back in time."""

    def __init__(self) -> None:
        self.added = []

    async def execute(self, stmt):
        await asyncio.sleep(1)

    async def flush(self):
        await asyncio.sleep(1)

    async def refresh(self, model):
        await asyncio.sleep(1)

    def add(self, model):
        self.added.append(model)


async def test_thread_lookup_times_out():
    repository = SqlThreadRepository(StalledSession(), timeout=TIMEOUT)

    with pytest.raises(StoreTimeoutError):
        await repository.get_thread("alice_bob")


async def test_thread_creation_times_out_on_flush():
    session = StalledSession()
    repository = SqlThreadRepository(session, timeout=TIMEOUT)

    with pytest.raises(StoreTimeoutError):
        await repository.create_thread("alice_bob", type="private", participants=["alice", "bob"])
    assert len(session.added) == 1


async def test_profile_lookup_times_out():
    repository = SqlProfileRepository(StalledSession(), TIMEOUT)

    with pytest.raises(StoreTimeoutError):
        await repository.get_by_name("alice")


async def test_ledger_timeout_is_a_store_timeout():
    repository = SqlLedgerRepository(StalledSession(), TIMEOUT)

    with pytest.raises(LedgerTimeoutError) as excinfo:
        await repository.get_account("alice", CHECKING, LIVE_LEDGER)
    assert isinstance(excinfo.value, StoreTimeoutError)


async def test_messaging_service_passes_its_timeout_down(presence):
    messaging = MessagingService.with_session(StalledSession(), presence, timeout=TIMEOUT)

    with pytest.raises(StoreTimeoutError):
        await messaging.list_threads("alice")
