from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime
from typing import Dict, List, Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import AlreadyCheckedIn, PersistenceError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, placeholders
from .model import DailySession
from .repository import AttendanceRepository


def _to_session(r: dict, subjects: Sequence[str]) -> DailySession:
    return DailySession(
        session_id=int(r["session_id"]),
        student_id=int(r["student_id"]),
        teacher_id=int(r["teacher_id"]),
        session_date=r["session_date"],
        subjects_attended=tuple(subjects),
        tokens_earned=int(r.get("tokens_earned") or 0),
        present=bool(r.get("present", False)),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _subjects_for(self, cur, session_ids: Sequence[int]) -> Dict[int, List[str]]:
        out: Dict[int, List[str]] = defaultdict(list)
        if not session_ids:
            return out
        cur.execute(
            f"""
            SELECT session_id, subject
            FROM session_subjects
            WHERE session_id IN ({placeholders(len(session_ids))})
            ORDER BY attended_at ASC
            """,
            tuple(session_ids),
        )
        for r in fetchall(cur):
            out[int(r["session_id"])].append(r["subject"])
        return out

    def _load(self, cur, *, student_id: int, teacher_id: int, session_date: date) -> Optional[DailySession]:
        cur.execute(
            """
            SELECT session_id, student_id, teacher_id, session_date, tokens_earned, present
            FROM daily_sessions
            WHERE student_id=%s AND teacher_id=%s AND session_date=%s
            """,
            (int(student_id), int(teacher_id), session_date),
        )
        r = fetchone(cur)
        if not r:
            return None
        subjects = self._subjects_for(cur, [int(r["session_id"])])
        return _to_session(r, subjects.get(int(r["session_id"]), []))

    def get_for_student_and_date(self, *, student_id: int, teacher_id: int, session_date: date) -> Optional[DailySession]:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._load(cur, student_id=student_id, teacher_id=teacher_id, session_date=session_date)

    def list_for_teacher_and_date(self, *, teacher_id: int, session_date: date) -> Sequence[DailySession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT session_id, student_id, teacher_id, session_date, tokens_earned, present
                FROM daily_sessions
                WHERE teacher_id=%s AND session_date=%s
                """,
                (int(teacher_id), session_date),
            )
            rows = fetchall(cur)
            subjects = self._subjects_for(cur, [int(r["session_id"]) for r in rows])
            return [_to_session(r, subjects.get(int(r["session_id"]), [])) for r in rows]

    def record_check_in(
        self,
        *,
        student_id: int,
        teacher_id: int,
        session_date: date,
        subject: str,
        attended_at: datetime,
        tokens: int,
    ) -> DailySession:
        with db_cursor(self._conn_factory) as (_, cur):
            # Get-or-create: LAST_INSERT_ID(expr) makes lastrowid the existing id on conflict.
            cur.execute(
                """
                INSERT INTO daily_sessions(student_id, teacher_id, session_date, tokens_earned, present)
                VALUES(%s,%s,%s,0,0)
                ON DUPLICATE KEY UPDATE session_id=LAST_INSERT_ID(session_id)
                """,
                (int(student_id), int(teacher_id), session_date),
            )
            session_id = int(cur.lastrowid)

            try:
                cur.execute(
                    "INSERT INTO session_subjects(session_id, subject, attended_at) VALUES(%s,%s,%s)",
                    (session_id, subject, attended_at),
                )
            except mysql.connector.Error as exc:
                if exc.errno == errorcode.ER_DUP_ENTRY:
                    raise AlreadyCheckedIn(f"Already checked in for {subject} today") from exc
                raise

            cur.execute(
                """
                UPDATE daily_sessions
                SET tokens_earned = tokens_earned + %s, present = 1
                WHERE session_id=%s
                """,
                (int(tokens), session_id),
            )
            session = self._load(cur, student_id=student_id, teacher_id=teacher_id, session_date=session_date)
            if session is None:
                raise PersistenceError("Session vanished during check-in")
            return session

    def add_tokens(self, *, student_id: int, teacher_id: int, session_date: date, amount: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE daily_sessions
                SET tokens_earned = tokens_earned + %s
                WHERE student_id=%s AND teacher_id=%s AND session_date=%s
                """,
                (int(amount), int(student_id), int(teacher_id), session_date),
            )
            return cur.rowcount > 0
