"""Group membership resolution.

Student records were written in four shapes over time:

1. ``groups`` + ``primary_group`` (current),
2. a single legacy ``group`` column,
3. only ``primary_group`` set,
4. no group data at all.

``resolve_membership`` maps any of them onto the canonical
``(groups, primary_group)`` pair; ``GroupMembershipResolver`` also writes the
canonical pair back so the record is only rewritten once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Sequence, Tuple

from ..core.constants import DEFAULT_GROUP
from ..core.exceptions import PersistenceError
from .model import Student
from .repository import StudentRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GroupMembership:
    groups: Tuple[str, ...]
    primary_group: str


def _dedupe(values: Iterable[str]) -> Tuple[str, ...]:
    out: List[str] = []
    for v in values:
        if v and v not in out:
            out.append(v)
    return tuple(out)


def resolve_membership(
    *,
    groups: Sequence[str] = (),
    primary_group: Optional[str] = None,
    legacy_group: Optional[str] = None,
) -> GroupMembership:
    canonical = _dedupe(g.strip().lower() for g in groups if g)
    if canonical:
        primary = (primary_group or "").strip().lower()
        return GroupMembership(canonical, primary if primary in canonical else canonical[0])

    legacy = (legacy_group or "").strip().lower()
    if legacy:
        return GroupMembership((legacy,), legacy)

    primary = (primary_group or "").strip().lower()
    if primary:
        return GroupMembership((primary,), primary)

    return GroupMembership((DEFAULT_GROUP.value,), DEFAULT_GROUP.value)


def is_canonical(student: Student) -> bool:
    return bool(student.groups) and student.primary_group in student.groups and len(set(student.groups)) == len(student.groups)


class GroupMembershipResolver:
    def __init__(self, students: StudentRepository):
        self._students = students

    def resolve(self, student: Student, *, best_effort: bool = True) -> Student:
        """Return ``student`` in canonical shape, persisting the change if any.

        With ``best_effort`` a failed write is logged and the canonical copy
        is still returned; otherwise the ``PersistenceError`` propagates.
        """
        if is_canonical(student):
            return student

        membership = resolve_membership(
            groups=student.groups,
            primary_group=student.primary_group,
            legacy_group=student.legacy_group,
        )
        resolved = replace(student, groups=membership.groups, primary_group=membership.primary_group)

        try:
            self._students.save_groups(
                student_id=student.student_id,
                teacher_id=student.teacher_id,
                groups=membership.groups,
                primary_group=membership.primary_group,
            )
        except PersistenceError:
            if not best_effort:
                raise
            logger.warning("Could not persist canonical groups for student %s", student.student_id, exc_info=True)
        else:
            logger.info(
                "Normalized groups for student %s -> %s (primary=%s)",
                student.student_id,
                list(membership.groups),
                membership.primary_group,
            )
        return resolved

    def resolve_all(self, students: Sequence[Student]) -> List[Student]:
        return [self.resolve(s) for s in students]
