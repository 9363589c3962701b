import pytest

from scheduling_system.class_builder import (
    calculate_confidence_score,
    content_alignment_score,
    create_scheduled_class,
    group_cohesion_score,
)

from builders import build_content, build_slot, build_student


def test_alignment_for_ready_student():
    student = build_student("s1", unlearned={"c1"})

    assert content_alignment_score([student], [build_content("c1", difficulty=5)]) == pytest.approx(1.8)
    assert content_alignment_score([], [build_content("c1")]) == 0.0


def test_cohesion():
    assert group_cohesion_score([build_student("s1", progress=40)]) == 1.0
    assert group_cohesion_score([build_student("s1", progress=40), build_student("s2", progress=40)]) == 1.0
    assert group_cohesion_score([build_student("s1", progress=0), build_student("s2", progress=100)]) == 0.0


def test_confidence_is_clamped(weights):
    group = [build_student(f"s{i}", unlearned={"c1"}, progress=50) for i in range(9)]

    score = calculate_confidence_score(group, [build_content("c1")], build_slot("a"), weights)

    assert 0.0 <= score <= 1.0
    assert score == 1.0


def test_individual_class(weights):
    student = build_student("s1", unlearned={"c1"})
    slot = build_slot("a", start="10:00")

    cls = create_scheduled_class("class-001", [student], [build_content("c1", title="Verbs")], slot, weights)

    assert cls.class_type == "individual"
    assert cls.student_ids == ["s1"]
    assert cls.teacher_id is None
    assert cls.status == "scheduled"
    assert 0.0 <= cls.confidence_score <= 1.0
    assert "Individual session for personalized learning" in cls.rationale
    assert "Covering next required content: Verbs" in cls.rationale
    assert "peak learning hours" in cls.rationale


def test_group_class_without_rationale(weights):
    group = [build_student("s1", progress=20), build_student("s2", progress=30)]

    cls = create_scheduled_class("class-002", group, [build_content("c1")], build_slot("a", start="14:00"),
                                 weights, include_rationale=False)

    assert cls.class_type == "group"
    assert cls.rationale == ""
    assert cls.course_id == "course-1"
