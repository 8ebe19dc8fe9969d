from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import GoalInput, GoalWeekSummary, WeeklyGoal


class GoalRepository(Protocol):
    def list_active_for_week(self, *, teacher_id: int, week_of: date) -> Sequence[WeeklyGoal]:
        raise NotImplementedError

    def upsert_active(self, *, teacher_id: int, week_of: date, goals: Sequence[GoalInput]) -> int:
        """Create-or-update the single active goal per (teacher, group, week).

        All entries are written in one transaction; ``icon`` must be resolved.
        Returns how many entries were written.
        """

        raise NotImplementedError

    def insert_many(self, *, teacher_id: int, week_of: date, goals: Sequence[GoalInput]) -> int:
        raise NotImplementedError

    def retire(self, *, teacher_id: int, group: str, week_of: date) -> bool:
        """Soft-retire the active goal (is_active=false); history is kept."""

        raise NotImplementedError

    def list_weeks(self, *, teacher_id: int, limit: int) -> Sequence[GoalWeekSummary]:
        """Distinct weeks with active goals, most recent first."""

        raise NotImplementedError
