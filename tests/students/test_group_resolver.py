from resource_room.students.groups import GroupMembershipResolver, is_canonical, resolve_membership


def test_groups_win_and_keep_valid_primary():
    m = resolve_membership(groups=["math", "reading"], primary_group="reading", legacy_group="writing")
    assert m.groups == ("math", "reading")
    assert m.primary_group == "reading"


def test_primary_outside_groups_falls_back_to_first_group():
    m = resolve_membership(groups=["math", "writing"], primary_group="behavior")
    assert m.primary_group == "math"


def test_legacy_single_group():
    m = resolve_membership(legacy_group="math")
    assert m.groups == ("math",)
    assert m.primary_group == "math"


def test_primary_only_record_keeps_its_group():
    m = resolve_membership(primary_group="Math")
    assert m.groups == ("math",)
    assert m.primary_group == "math"


def test_no_group_data_defaults_to_reading():
    m = resolve_membership()
    assert m.groups == ("reading",)
    assert m.primary_group == "reading"


def test_legacy_student_is_rewritten_once(students_repo):
    legacy = students_repo.insert_raw(teacher_id=1, name="OLIVER", legacy_group="math")
    resolver = GroupMembershipResolver(students_repo)

    first = resolver.resolve(legacy)
    assert set(first.groups) == {"math"}
    assert first.primary_group == "math"
    assert students_repo.group_writes == [legacy.student_id]

    stored = students_repo.raw(legacy.student_id)
    assert is_canonical(stored)

    again = resolver.resolve(stored)
    assert again == stored
    assert students_repo.group_writes == [legacy.student_id]


def test_failed_write_does_not_block_the_read(students_repo):
    legacy = students_repo.insert_raw(teacher_id=1, name="MAYA")
    students_repo.fail_group_writes = True

    resolved = GroupMembershipResolver(students_repo).resolve(legacy)

    assert resolved.groups == ("reading",)
    assert students_repo.raw(legacy.student_id).groups == ()


def test_primary_only_student_is_not_moved_to_reading(students_repo):
    student = students_repo.insert_raw(teacher_id=1, name="PRIYA", primary_group="math")

    GroupMembershipResolver(students_repo).resolve(student)

    stored = students_repo.raw(student.student_id)
    assert stored.groups == ("math",)
    assert stored.primary_group == "math"
