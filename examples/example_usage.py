"""Example: use the service layer directly (no Flask).

Controllers are thin; the rules live in the services.
"""

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src" / "resource_room"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from config import get_settings_module

from resource_room.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    teacher_id = 1

    for row in container.attendance_service.list_with_today(teacher_id):
        print(row.student.name, row.student.tokens, row.today_subjects)
    print(container.goal_service.get_current_goals(teacher_id))


if __name__ == "__main__":
    main()
