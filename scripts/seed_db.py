"""Create a demo teacher with a handful of students (one per group shape)."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src" / "resource_room"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from config import get_settings_module

from resource_room.container import build_container
from resource_room.core.exceptions import DuplicateEntity

DEMO_STUDENTS = (
    ("Ava", ["reading", "math"], "reading"),
    ("Ben", ["math"], None),
    ("Cleo", ["writing", "behavior"], "behavior"),
)


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    code = getattr(settings, "TEACHER_REGISTRATION_CODE", None)
    container = build_container(db_config=dict(settings.DB_CONFIG), registration_code=code)

    try:
        teacher = container.teacher_service.register(
            username="demo",
            email="demo@example.com",
            password="demo123",
            first_name="Demo",
            last_name="Teacher",
            school="Demo Elementary",
            registration_code=code,
        )
    except DuplicateEntity:
        teacher = container.teacher_service.authenticate("demo", "demo123")

    for name, groups, primary in DEMO_STUDENTS:
        try:
            container.student_service.add_student(
                teacher_id=teacher.teacher_id, name=name, groups=groups, primary_group=primary
            )
        except DuplicateEntity:
            pass

    print(f"OK: Seeded demo teacher 'demo' (id={teacher.teacher_id}) with {len(DEMO_STUDENTS)} students")


if __name__ == "__main__":
    main()
