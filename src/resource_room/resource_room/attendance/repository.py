from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import DailySession


class AttendanceRepository(Protocol):
    def get_for_student_and_date(self, *, student_id: int, teacher_id: int, session_date: date) -> Optional[DailySession]:
        raise NotImplementedError

    def list_for_teacher_and_date(self, *, teacher_id: int, session_date: date) -> Sequence[DailySession]:
        raise NotImplementedError

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
        """Create the day's session if needed and add ``subject`` to it.

        The (session, subject) pair is unique at the storage layer; a second
        insert raises AlreadyCheckedIn and nothing is written.
        """

        raise NotImplementedError

    def add_tokens(self, *, student_id: int, teacher_id: int, session_date: date, amount: int) -> bool:
        """Add ``amount`` to an existing session. Never creates one."""

        raise NotImplementedError
