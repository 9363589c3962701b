import pytest

from scheduler import run_scheduler, schedule_by_content
from scheduling_system.slot_inventory import SlotInventory

from builders import MONDAY, TUESDAY, build_content, build_slot, build_student, build_teacher, window


def three_students():
    return [
        build_student(f"s{i}", unit=1, lesson=2, unlearned={"c1", "c2"}, progress=30)
        for i in range(3)
    ]


def test_single_cohort_end_to_end(base_config):
    slots = [build_slot("mon-10", day=MONDAY, start="10:00")]

    result = run_scheduler(base_config, three_students(), [build_content("c1")], slots, [build_teacher("t1")])

    assert len(result.scheduled_classes) == 1
    cls = result.scheduled_classes[0]
    assert cls.id == "class-001"
    assert cls.student_ids == ["s0", "s1", "s2"]
    assert cls.class_type == "group"
    assert cls.time_slot.id == "mon-10"
    assert cls.time_slot.capacity.available_spots == 6
    assert cls.teacher_id == "t1"
    assert result.unscheduled_groups == []
    assert result.unassigned_class_ids == []
    assert result.conflicts == []

    metrics = result.metrics
    assert metrics.classes_scheduled == 1
    assert metrics.students_processed == 3
    assert metrics.resource_utilization == pytest.approx(3 / 9)
    assert metrics.workload_balance_score == 100.0


def test_caller_slots_untouched(base_config):
    slots = [build_slot("mon-10")]

    run_scheduler(base_config, three_students(), [build_content("c1")], slots, [])

    assert slots[0].is_available is True
    assert slots[0].capacity.available_spots == 9


def test_one_slot_is_never_shared_by_two_groups(base_config):
    students = three_students() + [build_student("late", unit=4, lesson=1, unlearned={"c1"})]

    result = run_scheduler(base_config, students, [build_content("c1")], [build_slot("only")], [])

    assert [c.time_slot.id for c in result.scheduled_classes] == ["only"]
    assert len(result.unscheduled_groups) == 1
    assert result.unscheduled_groups[0].student_ids == ["late"]
    assert result.unscheduled_groups[0].reason == "no_eligible_slot"
    assert result.unscheduled_groups[0].content_ids == ["c1"]


def test_distinct_slots_for_every_class(base_config):
    students = [
        build_student(f"s{i}", unit=i % 3, lesson=1, unlearned={"c1"})
        for i in range(9)
    ]
    slots = [build_slot(f"slot-{h}", start=f"{h:02d}:00") for h in range(8, 16)]

    result = run_scheduler(base_config, students, [build_content("c1")], slots, [])

    slot_ids = [c.time_slot.id for c in result.scheduled_classes]
    assert len(slot_ids) == 3
    assert len(set(slot_ids)) == len(slot_ids)
    assert [c.id for c in result.scheduled_classes] == ["class-001", "class-002", "class-003"]


def test_cohort_without_common_content(base_config):
    students = [
        build_student("a", unlearned={"c1"}),
        build_student("b", unlearned={"c2"}),
    ]

    result = run_scheduler(base_config, students, [build_content("c1"), build_content("c2")], [build_slot("x")], [])

    assert result.scheduled_classes == []
    assert result.unscheduled_groups[0].reason == "no_common_content"
    assert result.unscheduled_groups[0].student_ids == ["a", "b"]


def test_alternatives_are_runner_up_slots(base_config, constraints, weights):
    group = [build_student("s1", unlearned={"c1"}, preferred=[window(TUESDAY, "14:00", "15:00")])]
    slots = [
        build_slot("best", day=TUESDAY, start="14:00"),
        build_slot("second", day=MONDAY, start="10:00"),
        build_slot("third", day=MONDAY, start="20:00"),
        build_slot("fourth", day=MONDAY, start="21:00", max_students=20),
    ]
    inventory = SlotInventory(slots)

    classes, unscheduled = schedule_by_content(group, [build_content("c1")], inventory, constraints, weights,
                                               max_alternatives=2)

    assert unscheduled == []
    cls = classes[0]
    assert cls.time_slot.id == "best"
    assert [alt.time_slot.id for alt in cls.alternatives] == ["second", "third"]
    assert [alt.id for alt in cls.alternatives] == ["class-001-alt1", "class-001-alt2"]
    assert all(alt.time_slot.is_available for alt in cls.alternatives)
    assert [s.id for s in inventory.available_slots()] == ["second", "third", "fourth"]


def test_max_content_items(base_config):
    base_config["MAX_CONTENT_ITEMS_PER_CLASS"] = 1

    result = run_scheduler(base_config, three_students(), [build_content("c1"), build_content("c2")],
                           [build_slot("x")], [])

    assert len(result.scheduled_classes[0].content) == 1


def test_balanced_strategy(base_config, tmp_path):
    base_config["TEACHER_ASSIGNMENT_STRATEGY"] = "balanced"
    students = [build_student(f"s{i}", unit=i, lesson=1, unlearned={"c1"}) for i in range(4)]
    slots = [build_slot(f"slot-{h}", start=f"{h:02d}:00") for h in (9, 10, 11, 14)]

    result = run_scheduler(base_config, students, [build_content("c1")], slots,
                           [build_teacher("t1"), build_teacher("t2")], output_folder=str(tmp_path))

    assert result.unassigned_class_ids == []
    loads = [sum(1 for c in result.scheduled_classes if c.teacher_id == t) for t in ("t1", "t2")]
    assert loads == [2, 2]
    assert result.metrics.workload_balance_score == 100.0
    assert (tmp_path / "workload_balancer_log.txt").exists()


def test_unknown_strategy_rejected(base_config):
    base_config["TEACHER_ASSIGNMENT_STRATEGY"] = "random"

    with pytest.raises(ValueError):
        run_scheduler(base_config, [], [], [], [])


def test_empty_run(base_config):
    result = run_scheduler(base_config, [], [], [], [])

    assert result.scheduled_classes == []
    assert result.metrics.resource_utilization == 0.0
    assert result.metrics.workload_balance_score == 100.0
