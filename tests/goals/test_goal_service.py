from datetime import date, datetime, timedelta

import pytest

from resource_room.core.constants import FALLBACK_ICON, GROUP_ICONS
from resource_room.core.enums import SubjectGroup
from resource_room.core.exceptions import NotFound, ValidationError
from resource_room.goals.icons import default_icon

NOW = datetime(2026, 2, 4, 9, 30)
MONDAY = date(2026, 2, 2)


def test_default_icon_mapping():
    assert default_icon("math") == GROUP_ICONS[SubjectGroup.MATH]
    assert default_icon("READING") == GROUP_ICONS[SubjectGroup.READING]
    assert default_icon("science") == FALLBACK_ICON
    assert default_icon(None) == FALLBACK_ICON


def test_setting_reading_twice_keeps_one_active_goal(container, goals_repo):
    svc = container.goal_service
    svc.set_current_goals(1, {"reading": {"topic": "Vowels", "goal": "Read 5 words"}}, now=NOW)
    week = svc.set_current_goals(1, {"reading": {"topic": "Blends", "goal": "Read 8 words"}}, now=NOW + timedelta(days=2))

    active = [g for g in goals_repo.rows if g.is_active and g.group == "reading" and g.week_of == MONDAY]
    assert len(active) == 1
    assert (active[0].topic, active[0].goal) == ("Blends", "Read 8 words")
    assert week.week_of == MONDAY
    assert week.goals["reading"].topic == "Blends"


def test_incomplete_entries_are_skipped(container):
    week = container.goal_service.set_current_goals(
        1,
        {
            "math": {"topic": "Fractions", "goal": "Solve 6"},
            "writing": {"topic": "", "goal": "Write"},
            "behavior": {"topic": "Kindness"},
            "art": {},
            "music": {"topic": "Rhythm"},
        },
        now=NOW,
    )
    assert set(week.goals) == {"math"}


def test_icons_default_per_group_and_can_be_overridden(container):
    week = container.goal_service.set_current_goals(
        1,
        {
            "math": {"topic": "Fractions", "goal": "Solve 6"},
            "writing": {"topic": "Letters", "goal": "Write 3", "icon": "*"},
        },
        now=NOW,
    )
    assert week.goals["math"].icon == GROUP_ICONS[SubjectGroup.MATH]
    assert week.goals["writing"].icon == "*"


def test_unknown_group_and_bad_payload(container):
    with pytest.raises(ValidationError):
        container.goal_service.set_current_goals(1, {"science": {"topic": "a", "goal": "b"}}, now=NOW)
    with pytest.raises(ValidationError):
        container.goal_service.set_current_goals(1, ["reading"], now=NOW)


def test_current_goals_do_not_auto_fill(container):
    container.goal_service.set_current_goals(1, {"math": {"topic": "Fractions", "goal": "Solve 6"}}, now=NOW)
    assert set(container.goal_service.get_current_goals(1, now=NOW).goals) == {"math"}
    assert container.goal_service.get_current_goals(2, now=NOW).goals == {}


def test_goals_for_any_day_of_the_week(container):
    container.goal_service.set_current_goals(1, {"math": {"topic": "Fractions", "goal": "Solve 6"}}, now=NOW)

    sunday = container.goal_service.get_goals_for_week(1, "2026-02-08")
    assert sunday.week_of == MONDAY
    assert "math" in sunday.goals

    next_week = container.goal_service.get_goals_for_week(1, date(2026, 2, 9))
    assert next_week.goals == {}

    with pytest.raises(ValidationError):
        container.goal_service.get_goals_for_week(1, "02/08/2026")


def test_list_goal_weeks_is_capped_and_descending(container):
    svc = container.goal_service
    for weeks_back in range(13):
        svc.set_current_goals(
            1,
            {"reading": {"topic": f"T{weeks_back}", "goal": "G"}, "math": {"topic": "M", "goal": "G"}},
            now=NOW - timedelta(weeks=weeks_back),
        )

    weeks = svc.list_goal_weeks(1)

    assert len(weeks) == 10
    assert weeks[0].week_of == MONDAY
    assert all(a.week_of > b.week_of for a, b in zip(weeks, weeks[1:]))
    assert all(w.goal_count == 2 for w in weeks)


def test_retire_keeps_history_and_frees_the_slot(container, goals_repo):
    svc = container.goal_service
    svc.set_current_goals(1, {"math": {"topic": "Old", "goal": "G"}}, now=NOW)
    svc.retire_current_goal(1, "math", now=NOW)

    assert svc.get_current_goals(1, now=NOW).goals == {}
    assert [g.topic for g in goals_repo.rows if not g.is_active] == ["Old"]

    svc.set_current_goals(1, {"math": {"topic": "New", "goal": "G"}}, now=NOW)
    assert svc.get_current_goals(1, now=NOW).goals["math"].topic == "New"

    with pytest.raises(NotFound):
        svc.retire_current_goal(1, "writing", now=NOW)


def test_seed_defaults_creates_one_goal_per_group(container):
    assert container.goal_service.seed_defaults(7, now=NOW) == 4

    goals = container.goal_service.get_current_goals(7, now=NOW).goals
    assert set(goals) == {"reading", "math", "writing", "behavior"}
    assert goals["reading"].topic == "2-syllable words"
    assert goals["behavior"].icon == GROUP_ICONS[SubjectGroup.BEHAVIOR]
