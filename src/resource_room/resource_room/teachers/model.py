from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Teacher:
    """Domain entity: a teacher account.

    Note: This is a plain data object (no DB access code).
    """

    teacher_id: int
    username: str
    email: str
    password_hash: str
    first_name: str
    last_name: str
    school: Optional[str] = None
    is_active: bool = True

    def to_public(self) -> dict:
        return {
            "id": self.teacher_id,
            "username": self.username,
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "school": self.school,
        }
