from __future__ import annotations

import json
from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, load_json_list, placeholders
from .model import Purchase, Student
from .repository import StudentRepository

_STUDENT_COLUMNS = """
    student_id, teacher_id, name, group_name, groups_json, primary_group,
    skills_completed, total_skills, tokens, is_active
"""


def _to_student(r: dict, purchases: Sequence[Purchase] = ()) -> Student:
    return Student(
        student_id=int(r["student_id"]),
        teacher_id=int(r["teacher_id"]),
        name=r["name"],
        groups=tuple(load_json_list(r.get("groups_json"))),
        primary_group=r.get("primary_group") or None,
        legacy_group=r.get("group_name") or None,
        skills_completed=int(r.get("skills_completed") or 0),
        total_skills=int(r.get("total_skills") or 0),
        tokens=int(r.get("tokens") or 0),
        purchases=tuple(purchases),
        is_active=bool(r.get("is_active", True)),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _exists(self, cur, *, student_id: int, teacher_id: int) -> bool:
        # rowcount is 0 when an UPDATE changes nothing; tell that apart from a miss.
        cur.execute(
            "SELECT 1 AS found FROM students WHERE student_id=%s AND teacher_id=%s AND is_active=1",
            (int(student_id), int(teacher_id)),
        )
        return fetchone(cur) is not None

    def _purchases_for(self, cur, student_ids: Sequence[int]) -> Dict[int, List[Purchase]]:
        out: Dict[int, List[Purchase]] = defaultdict(list)
        if not student_ids:
            return out
        cur.execute(
            f"""
            SELECT student_id, item, cost, purchased_at
            FROM student_purchases
            WHERE student_id IN ({placeholders(len(student_ids))})
            ORDER BY purchase_id ASC
            """,
            tuple(student_ids),
        )
        for r in fetchall(cur):
            out[int(r["student_id"])].append(
                Purchase(item=r["item"], cost=int(r["cost"]), purchased_at=r["purchased_at"])
            )
        return out

    def list_active(self, teacher_id: int) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_STUDENT_COLUMNS}
                FROM students
                WHERE teacher_id=%s AND is_active=1
                ORDER BY name ASC
                """,
                (int(teacher_id),),
            )
            rows = fetchall(cur)
            purchases = self._purchases_for(cur, [int(r["student_id"]) for r in rows])
            return [_to_student(r, purchases.get(int(r["student_id"]), ())) for r in rows]

    def get_active(self, *, student_id: int, teacher_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_STUDENT_COLUMNS}
                FROM students
                WHERE student_id=%s AND teacher_id=%s AND is_active=1
                """,
                (int(student_id), int(teacher_id)),
            )
            r = fetchone(cur)
            if not r:
                return None
            purchases = self._purchases_for(cur, [int(r["student_id"])])
            return _to_student(r, purchases.get(int(r["student_id"]), ()))

    def create(
        self,
        *,
        teacher_id: int,
        name: str,
        groups: Sequence[str],
        primary_group: str,
        skills_completed: int,
        total_skills: int,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO students(teacher_id, name, groups_json, primary_group, skills_completed, total_skills)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(teacher_id), name, json.dumps(list(groups)), primary_group, int(skills_completed), int(total_skills)),
            )
            return int(cur.lastrowid)

    def save_groups(self, *, student_id: int, teacher_id: int, groups: Sequence[str], primary_group: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE students
                SET groups_json=%s, primary_group=%s
                WHERE student_id=%s AND teacher_id=%s AND is_active=1
                """,
                (json.dumps(list(groups)), primary_group, int(student_id), int(teacher_id)),
            )
            if cur.rowcount > 0:
                return True
            return self._exists(cur, student_id=student_id, teacher_id=teacher_id)

    def update_fields(
        self,
        *,
        student_id: int,
        teacher_id: int,
        name: Optional[str] = None,
        skills_completed: Optional[int] = None,
        total_skills: Optional[int] = None,
    ) -> bool:
        sets: list[str] = []
        params: list[object] = []
        if name is not None:
            sets.append("name=%s")
            params.append(name)
        if skills_completed is not None:
            sets.append("skills_completed=%s")
            params.append(int(skills_completed))
        if total_skills is not None:
            sets.append("total_skills=%s")
            params.append(int(total_skills))
        if not sets:
            return self.get_active(student_id=student_id, teacher_id=teacher_id) is not None

        params.extend([int(student_id), int(teacher_id)])
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE students
                SET {", ".join(sets)}
                WHERE student_id=%s AND teacher_id=%s AND is_active=1
                """,
                tuple(params),
            )
            if cur.rowcount > 0:
                return True
            return self._exists(cur, student_id=student_id, teacher_id=teacher_id)

    def deactivate(self, *, student_id: int, teacher_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE students SET is_active=0 WHERE student_id=%s AND teacher_id=%s AND is_active=1",
                (int(student_id), int(teacher_id)),
            )
            return cur.rowcount > 0

    def adjust_tokens(self, *, student_id: int, teacher_id: int, delta: int) -> Optional[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            # Single-statement increment: concurrent adjustments never lose an update.
            cur.execute(
                """
                UPDATE students
                SET tokens = tokens + %s
                WHERE student_id=%s AND teacher_id=%s AND is_active=1 AND tokens + %s >= 0
                """,
                (int(delta), int(student_id), int(teacher_id), int(delta)),
            )
            if cur.rowcount == 0:
                return None
            cur.execute("SELECT tokens FROM students WHERE student_id=%s", (int(student_id),))
            r = fetchone(cur)
            return int(r["tokens"]) if r else None

    def record_purchase(
        self,
        *,
        student_id: int,
        teacher_id: int,
        item: str,
        cost: int,
        purchased_at: datetime,
    ) -> Optional[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE students
                SET tokens = tokens - %s
                WHERE student_id=%s AND teacher_id=%s AND is_active=1 AND tokens >= %s
                """,
                (int(cost), int(student_id), int(teacher_id), int(cost)),
            )
            if cur.rowcount == 0:
                return None
            cur.execute(
                """
                INSERT INTO student_purchases(student_id, item, cost, purchased_at)
                VALUES(%s,%s,%s,%s)
                """,
                (int(student_id), item, int(cost), purchased_at),
            )
            cur.execute("SELECT tokens FROM students WHERE student_id=%s", (int(student_id),))
            r = fetchone(cur)
            return int(r["tokens"]) if r else None
