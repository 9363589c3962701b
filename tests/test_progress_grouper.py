import pytest

from data_models import SchedulingConstraints
from scheduling_system.progress_grouper import group_students_by_progress

from builders import build_student


def test_same_position_students_share_one_group(constraints):
    students = [build_student(f"s{i}", unit=2, lesson=3) for i in range(3)]

    groups = group_students_by_progress(students, constraints)

    assert [len(g) for g in groups] == [3]


def test_overflow_becomes_a_smaller_group():
    students = [build_student(f"s{i}", unit=1, lesson=1) for i in range(7)]

    groups = group_students_by_progress(students, SchedulingConstraints(max_students_per_class=6))

    assert [len(g) for g in groups] == [6, 1]
    assert [s.student_id for s in groups[0]] == [f"s{i}" for i in range(6)]
    assert groups[1][0].student_id == "s6"


def test_groups_partition_input_and_are_homogeneous():
    positions = [(2, 1), (1, 2), (1, 1), (2, 1), (1, 2), (1, 1), (3, 4), (1, 1), (1, 1)]
    students = [build_student(f"s{i}", unit=u, lesson=l) for i, (u, l) in enumerate(positions)]
    constraints = SchedulingConstraints(max_students_per_class=3)

    groups = group_students_by_progress(students, constraints)

    grouped_ids = [s.student_id for g in groups for s in g]
    assert sorted(grouped_ids) == sorted(s.student_id for s in students)
    assert len(grouped_ids) == len(set(grouped_ids))

    for group in groups:
        assert 1 <= len(group) <= 3
        assert len({(s.current_unit, s.current_lesson) for s in group}) == 1

    keys = [(g[0].current_unit, g[0].current_lesson) for g in groups]
    assert keys == sorted(keys)


def test_input_order_kept_within_a_position(constraints):
    students = [
        build_student("b", unit=1, lesson=1),
        build_student("z", unit=0, lesson=5),
        build_student("a", unit=1, lesson=1),
    ]

    groups = group_students_by_progress(students, constraints)

    assert [[s.student_id for s in g] for g in groups] == [["z"], ["b", "a"]]


def test_empty_input(constraints):
    assert group_students_by_progress([], constraints) == []


def test_invalid_class_size_rejected():
    with pytest.raises(ValueError):
        group_students_by_progress([build_student("s1")], SchedulingConstraints(max_students_per_class=0))


def test_student_without_course_rejected(constraints):
    with pytest.raises(ValueError):
        group_students_by_progress([build_student("s1", course_id="")], constraints)
