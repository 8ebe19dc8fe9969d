from __future__ import annotations

import threading
import time
from dataclasses import replace
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple

import pytest

from resource_room.attendance.model import DailySession
from resource_room.container import assemble
from resource_room.core.exceptions import AlreadyCheckedIn, DuplicateEntity, PersistenceError
from resource_room.goals.model import GoalInput, GoalWeekSummary, WeeklyGoal
from resource_room.main import create_app
from resource_room.students.model import Purchase, Student
from resource_room.teachers.model import Teacher

REGISTRATION_CODE = "test-code"


class InMemoryStudents:
    """Thread-safe fake with the same atomicity as the MySQL statements."""

    def __init__(self):
        self._rows: Dict[int, Student] = {}
        self._next_id = 1
        self._lock = threading.Lock()
        self.fail_group_writes = False
        self.group_writes: List[int] = []

    def insert_raw(self, **fields) -> Student:
        with self._lock:
            student = Student(student_id=self._next_id, **fields)
            self._rows[student.student_id] = student
            self._next_id += 1
            return student

    def raw(self, student_id: int) -> Student:
        return self._rows[student_id]

    def _owned(self, student_id: int, teacher_id: int) -> Optional[Student]:
        s = self._rows.get(int(student_id))
        if not s or s.teacher_id != int(teacher_id) or not s.is_active:
            return None
        return s

    def _name_taken(self, teacher_id: int, name: str, *, exclude: Optional[int] = None) -> bool:
        return any(
            s.teacher_id == teacher_id and s.is_active and s.name == name and s.student_id != exclude
            for s in self._rows.values()
        )

    def list_active(self, teacher_id: int) -> Sequence[Student]:
        return sorted(
            (s for s in self._rows.values() if s.teacher_id == int(teacher_id) and s.is_active),
            key=lambda s: s.name,
        )

    def get_active(self, *, student_id: int, teacher_id: int) -> Optional[Student]:
        return self._owned(student_id, teacher_id)

    def create(self, *, teacher_id, name, groups, primary_group, skills_completed, total_skills) -> int:
        with self._lock:
            if self._name_taken(teacher_id, name):
                raise DuplicateEntity("Duplicate entry for uq_students_active_name")
            student = Student(
                student_id=self._next_id,
                teacher_id=teacher_id,
                name=name,
                groups=tuple(groups),
                primary_group=primary_group,
                skills_completed=skills_completed,
                total_skills=total_skills,
            )
            self._rows[student.student_id] = student
            self._next_id += 1
            return student.student_id

    def save_groups(self, *, student_id, teacher_id, groups, primary_group) -> bool:
        if self.fail_group_writes:
            raise PersistenceError("Database error: lost connection")
        with self._lock:
            s = self._owned(student_id, teacher_id)
            if not s:
                return False
            self._rows[s.student_id] = replace(s, groups=tuple(groups), primary_group=primary_group)
            self.group_writes.append(s.student_id)
            return True

    def update_fields(self, *, student_id, teacher_id, name=None, skills_completed=None, total_skills=None) -> bool:
        with self._lock:
            s = self._owned(student_id, teacher_id)
            if not s:
                return False
            if name is not None and self._name_taken(s.teacher_id, name, exclude=s.student_id):
                raise DuplicateEntity("Duplicate entry for uq_students_active_name")
            self._rows[s.student_id] = replace(
                s,
                name=s.name if name is None else name,
                skills_completed=s.skills_completed if skills_completed is None else skills_completed,
                total_skills=s.total_skills if total_skills is None else total_skills,
            )
            return True

    def deactivate(self, *, student_id, teacher_id) -> bool:
        with self._lock:
            s = self._owned(student_id, teacher_id)
            if not s:
                return False
            self._rows[s.student_id] = replace(s, is_active=False)
            return True

    def adjust_tokens(self, *, student_id, teacher_id, delta) -> Optional[int]:
        with self._lock:
            s = self._owned(student_id, teacher_id)
            if not s or s.tokens + delta < 0:
                return None
            time.sleep(0.001)
            self._rows[s.student_id] = replace(s, tokens=s.tokens + delta)
            return s.tokens + delta

    def record_purchase(self, *, student_id, teacher_id, item, cost, purchased_at) -> Optional[int]:
        with self._lock:
            s = self._owned(student_id, teacher_id)
            if not s or s.tokens < cost:
                return None
            time.sleep(0.001)
            updated = replace(
                s,
                tokens=s.tokens - cost,
                purchases=s.purchases + (Purchase(item=item, cost=cost, purchased_at=purchased_at),),
            )
            self._rows[s.student_id] = updated
            return updated.tokens


class InMemoryAttendance:
    def __init__(self):
        self._by_student_date: Dict[Tuple[int, date], DailySession] = {}
        self._next_id = 1
        self._lock = threading.Lock()
        self.fail_token_updates = False

    def get_for_student_and_date(self, *, student_id, teacher_id, session_date) -> Optional[DailySession]:
        s = self._by_student_date.get((int(student_id), session_date))
        return s if s and s.teacher_id == int(teacher_id) else None

    def list_for_teacher_and_date(self, *, teacher_id, session_date) -> Sequence[DailySession]:
        return [
            s
            for (_, d), s in self._by_student_date.items()
            if d == session_date and s.teacher_id == int(teacher_id)
        ]

    def record_check_in(self, *, student_id, teacher_id, session_date, subject, attended_at, tokens) -> DailySession:
        with self._lock:
            key = (int(student_id), session_date)
            session = self._by_student_date.get(key)
            if session is None:
                session = DailySession(
                    session_id=self._next_id,
                    student_id=int(student_id),
                    teacher_id=int(teacher_id),
                    session_date=session_date,
                )
                self._next_id += 1
            if subject in session.subjects_attended:
                raise AlreadyCheckedIn(f"Already checked in for {subject} today")
            session = replace(
                session,
                subjects_attended=session.subjects_attended + (subject,),
                tokens_earned=session.tokens_earned + tokens,
                present=True,
            )
            self._by_student_date[key] = session
            return session

    def add_tokens(self, *, student_id, teacher_id, session_date, amount) -> bool:
        if self.fail_token_updates:
            raise PersistenceError("Database error: lost connection")
        with self._lock:
            key = (int(student_id), session_date)
            session = self._by_student_date.get(key)
            if not session or session.teacher_id != int(teacher_id):
                return False
            self._by_student_date[key] = replace(session, tokens_earned=session.tokens_earned + amount)
            return True


class InMemoryGoals:
    def __init__(self):
        self.rows: List[WeeklyGoal] = []
        self._next_id = 1
        self.fail_inserts = False

    def _active(self, teacher_id, group, week_of) -> Optional[int]:
        for i, g in enumerate(self.rows):
            if g.is_active and g.teacher_id == int(teacher_id) and g.group == group and g.week_of == week_of:
                return i
        return None

    def _insert(self, teacher_id, week_of, g: GoalInput) -> None:
        self.rows.append(
            WeeklyGoal(
                goal_id=self._next_id,
                teacher_id=int(teacher_id),
                group=g.group,
                topic=g.topic,
                goal=g.goal,
                icon=g.icon,
                week_of=week_of,
            )
        )
        self._next_id += 1

    def list_active_for_week(self, *, teacher_id, week_of) -> Sequence[WeeklyGoal]:
        return sorted(
            (g for g in self.rows if g.is_active and g.teacher_id == int(teacher_id) and g.week_of == week_of),
            key=lambda g: g.group,
        )

    def upsert_active(self, *, teacher_id, week_of, goals) -> int:
        for g in goals:
            i = self._active(teacher_id, g.group, week_of)
            if i is None:
                self._insert(teacher_id, week_of, g)
            else:
                self.rows[i] = replace(self.rows[i], topic=g.topic, goal=g.goal, icon=g.icon)
        return len(goals)

    def insert_many(self, *, teacher_id, week_of, goals) -> int:
        if self.fail_inserts:
            raise PersistenceError("Database error: lost connection")
        if any(self._active(teacher_id, g.group, week_of) is not None for g in goals):
            raise DuplicateEntity("Duplicate entry for uq_goals_active_week")
        for g in goals:
            self._insert(teacher_id, week_of, g)
        return len(goals)

    def retire(self, *, teacher_id, group, week_of) -> bool:
        i = self._active(teacher_id, group, week_of)
        if i is None:
            return False
        self.rows[i] = replace(self.rows[i], is_active=False)
        return True

    def list_weeks(self, *, teacher_id, limit) -> Sequence[GoalWeekSummary]:
        counts: Dict[date, int] = {}
        for g in self.rows:
            if g.is_active and g.teacher_id == int(teacher_id):
                counts[g.week_of] = counts.get(g.week_of, 0) + 1
        weeks = sorted(counts.items(), reverse=True)[:limit]
        return [GoalWeekSummary(week_of=w, goal_count=c) for w, c in weeks]


class InMemoryTeachers:
    def __init__(self):
        self.rows: Dict[int, Teacher] = {}
        self._next_id = 1

    def get_by_id(self, teacher_id) -> Optional[Teacher]:
        return self.rows.get(int(teacher_id))

    def get_by_login(self, login) -> Optional[Teacher]:
        for t in self.rows.values():
            if t.is_active and (t.username == login or t.email == login.lower()):
                return t
        return None

    def exists(self, *, username, email) -> bool:
        return any(t.username == username or t.email == email for t in self.rows.values())

    def create(self, *, username, email, password_hash, first_name, last_name, school) -> int:
        if self.exists(username=username, email=email):
            raise DuplicateEntity("Duplicate entry for uq_teachers_username")
        teacher = Teacher(
            teacher_id=self._next_id,
            username=username,
            email=email,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            school=school,
        )
        self.rows[teacher.teacher_id] = teacher
        self._next_id += 1
        return teacher.teacher_id


@pytest.fixture
def students_repo():
    return InMemoryStudents()


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def goals_repo():
    return InMemoryGoals()


@pytest.fixture
def teachers_repo():
    return InMemoryTeachers()


@pytest.fixture
def container(teachers_repo, students_repo, attendance_repo, goals_repo):
    return assemble(
        teachers_repo=teachers_repo,
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        goals_repo=goals_repo,
        registration_code=REGISTRATION_CODE,
    )


@pytest.fixture
def app(container):
    app = create_app(container=container, settings_module="config.testing")
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def logged_in(client):
    resp = client.post(
        "/api/auth/register",
        json={
            "username": "msrivera",
            "email": "Rivera@School.org",
            "password": "secret123",
            "firstName": "Ana",
            "lastName": "Rivera",
            "registrationCode": REGISTRATION_CODE,
        },
    )
    assert resp.status_code == 201
    return client
