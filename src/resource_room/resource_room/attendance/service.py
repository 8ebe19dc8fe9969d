from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from ..common.datetime_utils import day_start, now_local
from ..common.validators import require_group
from ..core.constants import CHECKIN_TOKENS
from ..core.exceptions import NotEnrolled, NotFound, PersistenceError
from ..students.groups import GroupMembershipResolver
from ..students.model import StudentToday
from ..students.repository import StudentRepository
from .model import CheckInResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Daily check-ins: one token per subject per student per day."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        resolver: Optional[GroupMembershipResolver] = None,
    ):
        self._attendance = attendance
        self._students = students
        self._resolver = resolver or GroupMembershipResolver(students)

    def check_in(self, *, teacher_id: int, student_id: int, group: object, now: Optional[datetime] = None) -> CheckInResult:
        now = now or now_local()
        today = day_start(now)
        subject = require_group(group).value

        student = self._students.get_active(student_id=int(student_id), teacher_id=int(teacher_id))
        if not student:
            raise NotFound("Student not found")
        student = self._resolver.resolve(student)

        if not student.is_enrolled(subject):
            raise NotEnrolled(f"{student.name} is not enrolled in the {subject} group")

        # Raises AlreadyCheckedIn on a repeat; the balance is untouched in that case.
        session = self._attendance.record_check_in(
            student_id=student.student_id,
            teacher_id=int(teacher_id),
            session_date=today,
            subject=subject,
            attended_at=now,
            tokens=CHECKIN_TOKENS,
        )

        # Second write, not in the session's transaction.
        total = self._students.adjust_tokens(
            student_id=student.student_id, teacher_id=int(teacher_id), delta=CHECKIN_TOKENS
        )
        if total is None:
            logger.error(
                "Check-in recorded for student %s (%s, %s) but balance update failed",
                student.student_id,
                subject,
                today,
            )
            raise PersistenceError("Check-in recorded but the token balance could not be updated")

        logger.info("Student %s checked in for %s on %s (tokens=%s)", student.student_id, subject, today, total)
        return CheckInResult(tokens_awarded=CHECKIN_TOKENS, total_tokens=total, session=session)

    def list_with_today(self, teacher_id: int, *, now: Optional[datetime] = None) -> List[StudentToday]:
        today = day_start(now or now_local())
        students = self._resolver.resolve_all(self._students.list_active(int(teacher_id)))
        sessions = {
            s.student_id: s
            for s in self._attendance.list_for_teacher_and_date(teacher_id=int(teacher_id), session_date=today)
        }

        out: List[StudentToday] = []
        for student in students:
            session = sessions.get(student.student_id)
            out.append(
                StudentToday(
                    student=student,
                    today_tokens=session.tokens_earned if session else 0,
                    today_subjects=list(session.subjects_attended) if session else [],
                    present=session.present if session else False,
                )
            )
        return out
