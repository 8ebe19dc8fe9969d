from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Teacher
from .repository import TeacherRepository

_TEACHER_COLUMNS = "teacher_id, username, email, password_hash, first_name, last_name, school, is_active"


def _to_teacher(row: dict) -> Teacher:
    return Teacher(
        teacher_id=int(row["teacher_id"]),
        username=row["username"],
        email=row["email"],
        password_hash=row["password_hash"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        school=row.get("school"),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLTeacherRepository(TeacherRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, teacher_id: int) -> Optional[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_TEACHER_COLUMNS} FROM teachers WHERE teacher_id=%s", (int(teacher_id),))
            row = fetchone(cur)
            return _to_teacher(row) if row else None

    def get_by_login(self, login: str) -> Optional[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_TEACHER_COLUMNS}
                FROM teachers
                WHERE (username=%s OR email=%s) AND is_active=1
                """,
                (login, login.lower()),
            )
            row = fetchone(cur)
            return _to_teacher(row) if row else None

    def exists(self, *, username: str, email: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS found FROM teachers WHERE username=%s OR email=%s LIMIT 1",
                (username, email),
            )
            return fetchone(cur) is not None

    def create(
        self,
        *,
        username: str,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        school: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO teachers(username, email, password_hash, first_name, last_name, school)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (username, email, password_hash, first_name, last_name, school),
            )
            return int(cur.lastrowid)
