from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence, Union

from ..common.validators import require_group, require_groups, require_int, require_non_empty
from ..core.constants import DEFAULT_TOTAL_SKILLS
from ..core.exceptions import DuplicateEntity, NotFound, ValidationError
from .groups import GroupMembershipResolver, is_canonical
from .model import Student
from .repository import StudentRepository

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "skillsCompleted", "totalSkills")


def normalize_name(name: Optional[str]) -> str:
    return require_non_empty(name, "Name").upper()


class StudentService:
    """Use cases: enrol, edit and soft-delete students; normalize legacy groups."""

    def __init__(self, students: StudentRepository, resolver: Optional[GroupMembershipResolver] = None):
        self._students = students
        self._resolver = resolver or GroupMembershipResolver(students)

    def get_student(self, *, teacher_id: int, student_id: int) -> Student:
        student = self._students.get_active(student_id=int(student_id), teacher_id=int(teacher_id))
        if not student:
            raise NotFound("Student not found")
        return self._resolver.resolve(student)

    def list_students(self, teacher_id: int) -> Sequence[Student]:
        return self._resolver.resolve_all(self._students.list_active(int(teacher_id)))

    def add_student(
        self,
        *,
        teacher_id: int,
        name: Optional[str],
        groups: Union[Sequence[str], str, None],
        primary_group: Optional[str] = None,
        skills_completed: object = 0,
        total_skills: object = DEFAULT_TOTAL_SKILLS,
    ) -> Student:
        name = normalize_name(name)

        # Older clients send a single group string (or only primaryGroup).
        if groups is None or isinstance(groups, str):
            single = primary_group if groups is None else groups
            if single is None:
                raise ValidationError("Name and at least one group are required")
            groups = [single]

        tags = [g.value for g in require_groups(groups)]
        primary = require_group(primary_group, "primaryGroup").value if primary_group else tags[0]
        if primary not in tags:
            raise ValidationError("Primary group must be one of the selected groups")

        skills_completed = require_int(skills_completed, "skillsCompleted", minimum=0)
        total_skills = require_int(total_skills, "totalSkills", minimum=0)

        try:
            student_id = self._students.create(
                teacher_id=int(teacher_id),
                name=name,
                groups=tags,
                primary_group=primary,
                skills_completed=skills_completed,
                total_skills=total_skills,
            )
        except DuplicateEntity:
            raise DuplicateEntity("A student with this name already exists in your class") from None

        logger.info("Teacher %s enrolled student %s (%s) in %s", teacher_id, student_id, name, tags)
        return Student(
            student_id=student_id,
            teacher_id=int(teacher_id),
            name=name,
            groups=tuple(tags),
            primary_group=primary,
            skills_completed=skills_completed,
            total_skills=total_skills,
        )

    def update_student_groups(
        self,
        *,
        teacher_id: int,
        student_id: int,
        groups: object,
        primary_group: Optional[str] = None,
    ) -> Student:
        tags = [g.value for g in require_groups(groups)]
        primary = require_group(primary_group, "primaryGroup").value if primary_group else tags[0]
        if primary not in tags:
            raise ValidationError("Primary group must be one of the selected groups")

        if not self._students.save_groups(
            student_id=int(student_id), teacher_id=int(teacher_id), groups=tags, primary_group=primary
        ):
            raise NotFound("Student not found")

        logger.info("Student %s groups set to %s (primary=%s)", student_id, tags, primary)
        return self.get_student(teacher_id=teacher_id, student_id=student_id)

    def update_student(self, *, teacher_id: int, student_id: int, fields: Mapping[str, object]) -> Student:
        if "tokens" in fields:
            raise ValidationError("Tokens can only change through check-in, bonus or purchase")

        unknown = sorted(set(fields) - set(UPDATABLE_FIELDS))
        if unknown:
            raise ValidationError(f"Unsupported fields: {', '.join(unknown)}")

        name = normalize_name(fields["name"]) if fields.get("name") is not None else None
        skills_completed = (
            require_int(fields["skillsCompleted"], "skillsCompleted", minimum=0)
            if fields.get("skillsCompleted") is not None
            else None
        )
        total_skills = (
            require_int(fields["totalSkills"], "totalSkills", minimum=0)
            if fields.get("totalSkills") is not None
            else None
        )

        try:
            found = self._students.update_fields(
                student_id=int(student_id),
                teacher_id=int(teacher_id),
                name=name,
                skills_completed=skills_completed,
                total_skills=total_skills,
            )
        except DuplicateEntity:
            raise DuplicateEntity("A student with this name already exists in your class") from None
        if not found:
            raise NotFound("Student not found")

        return self.get_student(teacher_id=teacher_id, student_id=student_id)

    def deactivate_student(self, *, teacher_id: int, student_id: int) -> None:
        if not self._students.deactivate(student_id=int(student_id), teacher_id=int(teacher_id)):
            raise NotFound("Student not found")
        logger.info("Teacher %s deactivated student %s", teacher_id, student_id)

    def migrate_legacy_groups(self, teacher_id: int) -> int:
        """Rewrite every non-canonical active student; returns how many changed."""
        migrated = 0
        for student in self._students.list_active(int(teacher_id)):
            if is_canonical(student):
                continue
            self._resolver.resolve(student, best_effort=False)
            migrated += 1
        logger.info("Group migration for teacher %s updated %d students", teacher_id, migrated)
        return migrated
