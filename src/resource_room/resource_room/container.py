from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .goals.mysql_goal_repository import MySQLGoalRepository
from .goals.repository import GoalRepository
from .goals.service import GoalService
from .students.groups import GroupMembershipResolver
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService
from .teachers.mysql_teacher_repository import MySQLTeacherRepository
from .teachers.repository import TeacherRepository
from .teachers.service import TeacherService
from .tokens.service import TokenService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    teachers_repo: TeacherRepository
    students_repo: StudentRepository
    attendance_repo: AttendanceRepository
    goals_repo: GoalRepository

    teacher_service: TeacherService
    student_service: StudentService
    attendance_service: AttendanceService
    token_service: TokenService
    goal_service: GoalService


def assemble(
    *,
    teachers_repo: TeacherRepository,
    students_repo: StudentRepository,
    attendance_repo: AttendanceRepository,
    goals_repo: GoalRepository,
    registration_code: Optional[str] = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services on top of any repository implementations."""
    resolver = GroupMembershipResolver(students_repo)
    goal_service = GoalService(goals_repo)

    return Container(
        conn=conn,
        teachers_repo=teachers_repo,
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        goals_repo=goals_repo,
        teacher_service=TeacherService(teachers_repo, goal_service, registration_code=registration_code),
        student_service=StudentService(students_repo, resolver),
        attendance_service=AttendanceService(attendance_repo, students_repo, resolver),
        token_service=TokenService(students_repo, attendance_repo),
        goal_service=goal_service,
    )


def build_container(*, db_config: dict, registration_code: Optional[str] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return assemble(
        conn=conn,
        teachers_repo=MySQLTeacherRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        goals_repo=MySQLGoalRepository(conn),
        registration_code=registration_code,
    )
