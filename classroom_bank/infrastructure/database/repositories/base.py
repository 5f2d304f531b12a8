"""Shared plumbing for the SQL repositories: every call is time-bounded."""

from __future__ import annotations

import asyncio
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from classroom_bank.core.errors import StoreTimeoutError

DEFAULT_TIMEOUT = 10.0


class TimedSqlRepository:
    timeout_error: type[StoreTimeoutError] = StoreTimeoutError

    def __init__(self, session: AsyncSession, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._session = session
        self._timeout = timeout

    async def _execute(self, stmt) -> Any:
        try:
            async with asyncio.timeout(self._timeout):
                return await self._session.execute(stmt)
        except TimeoutError as exc:
            raise self.timeout_error(f"store call exceeded {self._timeout}s") from exc

    async def _flush(self, *refresh: Any) -> None:
        try:
            async with asyncio.timeout(self._timeout):
                await self._session.flush()
                for model in refresh:
                    await self._session.refresh(model)
        except TimeoutError as exc:
            raise self.timeout_error(f"store flush exceeded {self._timeout}s") from exc
