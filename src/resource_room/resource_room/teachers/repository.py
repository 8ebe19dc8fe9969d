from __future__ import annotations

from typing import Optional, Protocol

from .model import Teacher


class TeacherRepository(Protocol):
    """Repository interface for Teacher.

    Note: the service layer depends on this interface, not on a concrete DB.
    """

    def get_by_id(self, teacher_id: int) -> Optional[Teacher]:
        raise NotImplementedError

    def get_by_login(self, login: str) -> Optional[Teacher]:
        """Look up by username, or by e-mail (case-insensitive)."""

        raise NotImplementedError

    def exists(self, *, username: str, email: str) -> bool:
        raise NotImplementedError

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
        raise NotImplementedError
