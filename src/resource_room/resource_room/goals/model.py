from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Dict, Optional


@dataclass(frozen=True)
class WeeklyGoal:
    """Domain entity: a teacher's goal for one subject group in one week."""

    goal_id: int
    teacher_id: int
    group: str
    topic: str
    goal: str
    icon: str
    week_of: date
    is_active: bool = True


@dataclass(frozen=True)
class GoalInput:
    group: str
    topic: str
    goal: str
    icon: Optional[str] = None


@dataclass(frozen=True)
class WeekGoals:
    week_of: date
    goals: Dict[str, WeeklyGoal]


@dataclass(frozen=True)
class GoalWeekSummary:
    week_of: date
    goal_count: int
