"""Domain models for class rosters."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class Profile:
    id: int
    member_name: str
    class_period: Optional[str] = None
    teacher_name: Optional[str] = None
    created_at: Optional[datetime] = None
