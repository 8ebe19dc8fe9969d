from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Sequence, Tuple


@dataclass(frozen=True)
class Purchase:
    item: str
    cost: int
    purchased_at: datetime


@dataclass(frozen=True)
class Student:
    """Domain entity: a student owned by one teacher.

    Group membership may still be in a historical shape: ``legacy_group``
    (single tag, oldest records), ``groups`` and ``primary_group``. Use
    ``students.groups.resolve_membership`` before relying on it.
    """

    student_id: int
    teacher_id: int
    name: str
    groups: Tuple[str, ...] = ()
    primary_group: Optional[str] = None
    legacy_group: Optional[str] = None
    skills_completed: int = 0
    total_skills: int = 10
    tokens: int = 0
    purchases: Tuple[Purchase, ...] = field(default_factory=tuple)
    is_active: bool = True

    def is_enrolled(self, group: str) -> bool:
        return group in self.groups or group == self.primary_group


@dataclass(frozen=True)
class StudentToday:
    """Read-model: a student joined with today's session."""

    student: Student
    today_tokens: int
    today_subjects: Sequence[str]
    present: bool
