from __future__ import annotations

from datetime import date
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import GoalInput, GoalWeekSummary, WeeklyGoal
from .repository import GoalRepository

_GOAL_COLUMNS = "goal_id, teacher_id, group_name, topic, goal, icon, week_of, is_active"


def _to_goal(r: dict) -> WeeklyGoal:
    return WeeklyGoal(
        goal_id=int(r["goal_id"]),
        teacher_id=int(r["teacher_id"]),
        group=r["group_name"],
        topic=r["topic"],
        goal=r["goal"],
        icon=r["icon"],
        week_of=r["week_of"],
        is_active=bool(r.get("is_active", True)),
    )


class MySQLGoalRepository(GoalRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active_for_week(self, *, teacher_id: int, week_of: date) -> Sequence[WeeklyGoal]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_GOAL_COLUMNS}
                FROM weekly_goals
                WHERE teacher_id=%s AND week_of=%s AND is_active=1
                ORDER BY group_name ASC
                """,
                (int(teacher_id), week_of),
            )
            return [_to_goal(r) for r in fetchall(cur)]

    def upsert_active(self, *, teacher_id: int, week_of: date, goals: Sequence[GoalInput]) -> int:
        if not goals:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            # New rows are active, so they collide on uq_goals_active_week with
            # the current active goal and turn into an in-place update.
            cur.executemany(
                """
                INSERT INTO weekly_goals(teacher_id, group_name, topic, goal, icon, week_of, is_active)
                VALUES(%s,%s,%s,%s,%s,%s,1)
                ON DUPLICATE KEY UPDATE topic=VALUES(topic), goal=VALUES(goal), icon=VALUES(icon)
                """,
                [(int(teacher_id), g.group, g.topic, g.goal, g.icon, week_of) for g in goals],
            )
            return len(goals)

    def insert_many(self, *, teacher_id: int, week_of: date, goals: Sequence[GoalInput]) -> int:
        if not goals:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO weekly_goals(teacher_id, group_name, topic, goal, icon, week_of, is_active)
                VALUES(%s,%s,%s,%s,%s,%s,1)
                """,
                [(int(teacher_id), g.group, g.topic, g.goal, g.icon, week_of) for g in goals],
            )
            return len(goals)

    def retire(self, *, teacher_id: int, group: str, week_of: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE weekly_goals
                SET is_active=0
                WHERE teacher_id=%s AND group_name=%s AND week_of=%s AND is_active=1
                """,
                (int(teacher_id), group, week_of),
            )
            return cur.rowcount > 0

    def list_weeks(self, *, teacher_id: int, limit: int) -> Sequence[GoalWeekSummary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT week_of, COUNT(*) AS goal_count
                FROM weekly_goals
                WHERE teacher_id=%s AND is_active=1
                GROUP BY week_of
                ORDER BY week_of DESC
                LIMIT %s
                """,
                (int(teacher_id), int(limit)),
            )
            return [GoalWeekSummary(week_of=r["week_of"], goal_count=int(r["goal_count"])) for r in fetchall(cur)]
