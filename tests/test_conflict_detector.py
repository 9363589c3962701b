from datetime import datetime

from scheduling_system.conflict_detector import detect_conflicts

from builders import MONDAY, TUESDAY, build_class, build_slot

DETECTED_AT = datetime(2024, 3, 4, 9, 0)


def by_type(conflicts, conflict_type):
    return [c for c in conflicts if c.type == conflict_type]


def test_student_in_two_overlapping_classes():
    classes = [
        build_class("c1", ["S1"], build_slot("a", day=MONDAY, start="10:00", end="11:00", location="room-1")),
        build_class("c2", ["S1"], build_slot("b", day=MONDAY, start="10:30", end="11:30", location="room-2")),
    ]

    conflicts = detect_conflicts(classes, detected_at=DETECTED_AT)

    assert len(conflicts) == 1
    conflict = conflicts[0]
    assert conflict.type == "time_overlap"
    assert conflict.severity == "high"
    assert conflict.entity_ids == ["c1", "c2"]
    assert "S1" in conflict.description
    assert conflict.detected_at == DETECTED_AT

    resolution = conflict.resolutions[0]
    assert resolution.type == "reschedule"
    assert resolution.feasibility_score == 0.8
    assert resolution.required_approvals == ["teacher", "students"]
    assert [step.order for step in resolution.steps] == [1, 2]
    assert resolution.steps[1].dependencies == ["step-1"]


def test_disjoint_students_do_not_conflict_on_time():
    classes = [
        build_class("c1", ["S1"], build_slot("a", start="10:00", location="room-1")),
        build_class("c2", ["S2"], build_slot("b", start="10:00", location="room-2")),
    ]

    assert detect_conflicts(classes, detected_at=DETECTED_AT) == []


def test_over_capacity_class_is_critical():
    classes = [build_class("c1", ["s1", "s2", "s3", "s4"], build_slot("a", max_students=3))]

    conflicts = detect_conflicts(classes, detected_at=DETECTED_AT)

    assert len(conflicts) == 1
    conflict = conflicts[0]
    assert conflict.type == "capacity_exceeded"
    assert conflict.severity == "critical"
    assert conflict.entity_ids == ["c1"]
    assert [r.type for r in conflict.resolutions] == ["split_class"]
    assert conflict.resolutions[0].feasibility_score == 0.9
    assert conflict.resolutions[0].impact.affected_students == 4


def test_full_class_is_not_a_conflict():
    classes = [build_class("c1", ["s1", "s2", "s3"], build_slot("a", max_students=3))]

    assert detect_conflicts(classes, detected_at=DETECTED_AT) == []


def test_teacher_in_two_overlapping_classes():
    classes = [
        build_class("c1", ["s1"], build_slot("a", start="10:00", location="room-1"), teacher_id="t1"),
        build_class("c2", ["s2"], build_slot("b", start="10:30", location="room-2"), teacher_id="t1"),
    ]

    conflicts = detect_conflicts(classes, detected_at=DETECTED_AT)

    assert [c.type for c in conflicts] == ["teacher_unavailable"]
    assert conflicts[0].severity == "high"
    assert conflicts[0].id == "teacher-conflict-t1-0-1"
    assert conflicts[0].resolutions[0].type == "reassign_teacher"


def test_location_double_booked():
    classes = [
        build_class("c1", ["s1"], build_slot("a", start="10:00", location="room-1")),
        build_class("c2", ["s2"], build_slot("b", start="10:30", location="room-1")),
    ]

    conflicts = detect_conflicts(classes, detected_at=DETECTED_AT)

    assert [c.type for c in conflicts] == ["resource_conflict"]
    assert conflicts[0].severity == "medium"
    assert conflicts[0].resolutions[0].type == "reschedule"


def test_slots_without_location_share_a_default_room():
    classes = [
        build_class("c1", ["s1"], build_slot("a", start="10:00")),
        build_class("c2", ["s2"], build_slot("b", start="10:30")),
    ]

    conflicts = detect_conflicts(classes, detected_at=DETECTED_AT)

    assert [c.id for c in conflicts] == ["resource-conflict-default-0-1"]


def test_checks_run_in_fixed_order():
    classes = [
        build_class("c1", ["S1", "S2"], build_slot("a", day=TUESDAY, start="10:00", max_students=1), teacher_id="t1"),
        build_class("c2", ["S1"], build_slot("b", day=TUESDAY, start="10:30"), teacher_id="t1"),
    ]

    conflicts = detect_conflicts(classes, detected_at=DETECTED_AT)

    assert [c.type for c in conflicts] == [
        "time_overlap", "capacity_exceeded", "teacher_unavailable", "resource_conflict",
    ]
    assert all(c.resolutions for c in conflicts)


def test_back_to_back_classes_are_clean():
    classes = [
        build_class("c1", ["S1"], build_slot("a", start="10:00", end="11:00"), teacher_id="t1"),
        build_class("c2", ["S1"], build_slot("b", start="11:00", end="12:00"), teacher_id="t1"),
    ]

    assert detect_conflicts(classes) == []
