"""Repository protocol for profiles and class membership."""

from __future__ import annotations

from typing import Protocol, Sequence

from .models import Profile


class ProfileRepository(Protocol):
    async def get_by_name(self, member_name: str) -> Profile | None:
        ...

    async def create_profile(
        self,
        *,
        member_name: str,
        class_period: str | None,
        teacher_name: str | None,
    ) -> Profile:
        ...

    async def list_by_teacher(self, teacher_name: str) -> Sequence[Profile]:
        ...
