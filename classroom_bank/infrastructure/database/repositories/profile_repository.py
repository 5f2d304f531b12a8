"""SQLAlchemy implementation of the profile repository."""

from __future__ import annotations

from typing import Sequence

from sqlalchemy import select

from classroom_bank.infrastructure.database.models import Profile as ProfileModel
from classroom_bank.modules.roster.models import Profile
from classroom_bank.modules.roster.repository import ProfileRepository

from .base import TimedSqlRepository


class SqlProfileRepository(TimedSqlRepository, ProfileRepository):
    async def get_by_name(self, member_name: str) -> Profile | None:
        stmt = select(ProfileModel).where(ProfileModel.member_name == member_name)
        result = await self._execute(stmt)
        return self._to_domain(result.scalar_one_or_none())

    async def create_profile(
        self,
        *,
        member_name: str,
        class_period: str | None,
        teacher_name: str | None,
    ) -> Profile:
        model = ProfileModel(
            member_name=member_name,
            class_period=class_period,
            teacher_name=teacher_name,
        )
        self._session.add(model)
        await self._flush(model)
        return self._to_domain(model)

    async def list_by_teacher(self, teacher_name: str) -> Sequence[Profile]:
        stmt = (
            select(ProfileModel)
            .where(ProfileModel.teacher_name == teacher_name)
            .order_by(ProfileModel.member_name)
        )
        result = await self._execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    @staticmethod
    def _to_domain(model: ProfileModel | None) -> Profile | None:
        if model is None:
            return None
        return Profile(
            id=model.id,
            member_name=model.member_name,
            class_period=model.class_period,
            teacher_name=model.teacher_name,
            created_at=model.created_at,
        )
