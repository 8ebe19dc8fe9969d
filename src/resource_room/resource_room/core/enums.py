from __future__ import annotations

from enum import Enum
from typing import Optional


class SubjectGroup(str, Enum):
    """Instructional category a student can be enrolled in."""

    READING = "reading"
    MATH = "math"
    WRITING = "writing"
    BEHAVIOR = "behavior"

    @classmethod
    def parse(cls, value: object) -> Optional["SubjectGroup"]:
        """Case-insensitive lookup; returns None for unknown tags."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None
