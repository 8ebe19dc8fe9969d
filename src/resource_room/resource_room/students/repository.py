from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    """Repository interface for Student.

    Every method is scoped by ``teacher_id``; a student owned by another
    teacher behaves exactly like a missing one.
    """

    def list_active(self, teacher_id: int) -> Sequence[Student]:
        raise NotImplementedError

    def get_active(self, *, student_id: int, teacher_id: int) -> Optional[Student]:
        raise NotImplementedError

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
        """Insert an active student. Raises DuplicateEntity on an active name clash."""

        raise NotImplementedError

    def save_groups(self, *, student_id: int, teacher_id: int, groups: Sequence[str], primary_group: str) -> bool:
        raise NotImplementedError

    def update_fields(
        self,
        *,
        student_id: int,
        teacher_id: int,
        name: Optional[str] = None,
        skills_completed: Optional[int] = None,
        total_skills: Optional[int] = None,
    ) -> bool:
        raise NotImplementedError

    def deactivate(self, *, student_id: int, teacher_id: int) -> bool:
        raise NotImplementedError

    def adjust_tokens(self, *, student_id: int, teacher_id: int, delta: int) -> Optional[int]:
        """Atomically add ``delta`` to the balance.

        Returns the new balance, or None when the student is not active or the
        result would be negative (nothing is written in that case).
        """

        raise NotImplementedError

    def record_purchase(
        self,
        *,
        student_id: int,
        teacher_id: int,
        item: str,
        cost: int,
        purchased_at: datetime,
    ) -> Optional[int]:
        """Debit ``cost`` and append the purchase in one transaction.

        Returns the remaining balance, or None when the balance is too low.
        """

        raise NotImplementedError
