from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.exceptions import AuthenticationError, DuplicateEntity, PersistenceError, ValidationError
from ..goals.service import GoalService
from .model import Teacher
from .repository import TeacherRepository

logger = logging.getLogger(__name__)


class TeacherService:
    """Use cases: register a teacher account and authenticate (login)."""

    def __init__(self, teachers: TeacherRepository, goals: GoalService, *, registration_code: Optional[str] = None):
        self._teachers = teachers
        self._goals = goals
        self._registration_code = registration_code

    def register(
        self,
        *,
        username: Optional[str],
        email: Optional[str],
        password: Optional[str],
        first_name: Optional[str],
        last_name: Optional[str],
        school: Optional[str] = None,
        registration_code: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Teacher:
        if not self._registration_code or registration_code != self._registration_code:
            raise ValidationError("Invalid registration code")

        try:
            username = require_non_empty(username, "Username")
            email = require_non_empty(email, "Email").lower()
            first_name = require_non_empty(first_name, "First name")
            last_name = require_non_empty(last_name, "Last name")
            require_non_empty(password, "Password")
        except ValidationError:
            raise ValidationError("Please fill in all required fields") from None
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        school = school.strip() if isinstance(school, str) and school.strip() else None

        if self._teachers.exists(username=username, email=email):
            raise DuplicateEntity("A teacher with this email or username already exists")

        try:
            teacher_id = self._teachers.create(
                username=username,
                email=email,
                password_hash=generate_password_hash(password),
                first_name=first_name,
                last_name=last_name,
                school=school,
            )
        except DuplicateEntity:
            raise DuplicateEntity("Username or email already exists") from None

        # The account row is committed; starter goals are optional.
        try:
            self._goals.seed_defaults(teacher_id, now=now)
        except PersistenceError:
            logger.warning("Could not seed default goals for teacher %s", teacher_id, exc_info=True)
        logger.info("Registered teacher %s (%s)", teacher_id, username)

        teacher = self._teachers.get_by_id(teacher_id)
        if teacher is None:
            raise PersistenceError("Registration could not be completed")
        return teacher

    def authenticate(self, login: Optional[str], password: Optional[str]) -> Teacher:
        if not login or not password:
            raise AuthenticationError("Please enter both username/email and password")

        teacher = self._teachers.get_by_login(login.strip())
        if not teacher or not teacher.is_active:
            raise AuthenticationError("Username/email or password is incorrect")

        try:
            ok = check_password_hash(teacher.password_hash, password)
        except ValueError:
            # e.g. placeholder hashes or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Username/email or password is incorrect")
        return teacher

    def get_active(self, teacher_id: int) -> Optional[Teacher]:
        teacher = self._teachers.get_by_id(int(teacher_id))
        if not teacher or not teacher.is_active:
            return None
        return teacher
