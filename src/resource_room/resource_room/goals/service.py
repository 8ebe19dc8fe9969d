from __future__ import annotations

import logging
from datetime import date, datetime
from typing import List, Mapping, Optional, Sequence, Union

from ..common.datetime_utils import now_local, parse_iso_date, week_start
from ..common.validators import require_group
from ..core.constants import DEFAULT_WEEKLY_GOALS, GOAL_WEEKS_HISTORY_LIMIT
from ..core.exceptions import NotFound, ValidationError
from .icons import default_icon
from .model import GoalInput, GoalWeekSummary, WeekGoals
from .repository import GoalRepository

logger = logging.getLogger(__name__)


def _text(value: object) -> str:
    return value.strip() if isinstance(value, str) else ""


class GoalService:
    """Weekly goals: one active goal per (teacher, group, Monday-start week)."""

    def __init__(self, goals: GoalRepository, *, history_limit: int = GOAL_WEEKS_HISTORY_LIMIT):
        self._goals = goals
        self._history_limit = int(history_limit)

    def _week(self, teacher_id: int, week_of: date) -> WeekGoals:
        goals = self._goals.list_active_for_week(teacher_id=int(teacher_id), week_of=week_of)
        return WeekGoals(week_of=week_of, goals={g.group: g for g in goals})

    def get_current_goals(self, teacher_id: int, *, now: Optional[datetime] = None) -> WeekGoals:
        return self._week(teacher_id, week_start(now or now_local()))

    def get_goals_for_week(self, teacher_id: int, day: Union[date, datetime, str]) -> WeekGoals:
        if isinstance(day, str):
            day = parse_iso_date(day)
        return self._week(teacher_id, week_start(day))

    def set_current_goals(
        self,
        teacher_id: int,
        goals_by_group: object,
        *,
        now: Optional[datetime] = None,
    ) -> WeekGoals:
        if not isinstance(goals_by_group, Mapping):
            raise ValidationError("Invalid goals data")
        monday = week_start(now or now_local())

        entries: List[GoalInput] = []
        for raw_group, data in goals_by_group.items():
            if not isinstance(data, Mapping):
                continue
            topic, goal = _text(data.get("topic")), _text(data.get("goal"))
            if not topic or not goal:
                # Incomplete entries are skipped, not fatal for the batch.
                continue
            group = require_group(raw_group).value
            icon = _text(data.get("icon")) or default_icon(group)
            entries.append(GoalInput(group=group, topic=topic, goal=goal, icon=icon))

        written = self._goals.upsert_active(teacher_id=int(teacher_id), week_of=monday, goals=entries)
        logger.info("Teacher %s set %d goals for week of %s", teacher_id, written, monday)
        return self._week(teacher_id, monday)

    def retire_current_goal(self, teacher_id: int, group: object, *, now: Optional[datetime] = None) -> None:
        tag = require_group(group).value
        monday = week_start(now or now_local())
        if not self._goals.retire(teacher_id=int(teacher_id), group=tag, week_of=monday):
            raise NotFound(f"No active {tag} goal for the week of {monday.isoformat()}")
        logger.info("Teacher %s retired the %s goal for week of %s", teacher_id, tag, monday)

    def list_goal_weeks(self, teacher_id: int) -> Sequence[GoalWeekSummary]:
        weeks = self._goals.list_weeks(teacher_id=int(teacher_id), limit=self._history_limit)
        return sorted(weeks, key=lambda w: w.week_of, reverse=True)[: self._history_limit]

    def seed_defaults(self, teacher_id: int, *, now: Optional[datetime] = None) -> int:
        """Insert the starter goal of every group for the current week."""
        monday = week_start(now or now_local())
        entries = [
            GoalInput(group=group.value, topic=topic, goal=goal, icon=default_icon(group))
            for group, topic, goal in DEFAULT_WEEKLY_GOALS
        ]
        created = self._goals.insert_many(teacher_id=int(teacher_id), week_of=monday, goals=entries)
        logger.info("Seeded %d default goals for teacher %s (week of %s)", created, teacher_id, monday)
        return created
