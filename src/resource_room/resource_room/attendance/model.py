from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Tuple


@dataclass(frozen=True)
class DailySession:
    """Domain entity: one student's attendance record for one calendar day."""

    session_id: int
    student_id: int
    teacher_id: int
    session_date: date
    subjects_attended: Tuple[str, ...] = ()
    tokens_earned: int = 0
    present: bool = False


@dataclass(frozen=True)
class CheckInResult:
    tokens_awarded: int
    total_tokens: int
    session: DailySession
