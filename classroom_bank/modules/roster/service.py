"""Domain services for student profiles."""

from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from classroom_bank.infrastructure.database.repositories.base import DEFAULT_TIMEOUT
from classroom_bank.infrastructure.database.repositories.profile_repository import SqlProfileRepository
from classroom_bank.modules.ledger.models import LedgerAccount
from classroom_bank.modules.ledger.service import LedgerService

from .exceptions import ProfileAlreadyExistsError, ProfileNotFoundError
from .models import Profile
from .repository import ProfileRepository

logger = logging.getLogger(__name__)


class ProfileService:
    """Creates students with their checking and savings accounts."""

    def __init__(self, repository: ProfileRepository, ledger: LedgerService) -> None:
        self._repository = repository
        self._ledger = ledger

    @classmethod
    def with_session(cls, session: AsyncSession, timeout: float = DEFAULT_TIMEOUT) -> "ProfileService":
        return cls(SqlProfileRepository(session, timeout), LedgerService.with_session(session, timeout))

    async def get_profile(self, member_name: str) -> Profile:
        profile = await self._repository.get_by_name(member_name)
        if profile is None:
            raise ProfileNotFoundError(f"profile {member_name} not found")
        return profile

    async def create_profile(
        self,
        member_name: str,
        *,
        class_period: str | None = None,
        teacher_name: str | None = None,
    ) -> tuple[Profile, list[LedgerAccount]]:
        if await self._repository.get_by_name(member_name) is not None:
            raise ProfileAlreadyExistsError(f"profile {member_name} already exists")
        profile = await self._repository.create_profile(
            member_name=member_name,
            class_period=class_period,
            teacher_name=teacher_name,
        )
        accounts = await self._ledger.open_accounts(profile.id, member_name)
        logger.info("Created profile %s for teacher %s", member_name, teacher_name)
        return profile, accounts

    async def list_roster(self, teacher_name: str) -> Sequence[Profile]:
        return await self._repository.list_by_teacher(teacher_name)
