# scheduler.py
import copy
import os
import time

from data_models import (
    SchedulingConstraints,
    SchedulingMetrics,
    SchedulingRunResult,
    SchedulingScoringWeights,
    UnscheduledGroup,
)
from scheduling_system.class_builder import create_scheduled_class
from scheduling_system.conflict_detector import detect_conflicts
from scheduling_system.content_selector import select_next_content
from scheduling_system.progress_grouper import group_students_by_progress
from scheduling_system.slot_inventory import SlotInventory
from scheduling_system.slot_scorer import rank_slots
from scheduling_system.teacher_assigner import TeacherScoring, assign_teachers
from scheduling_system.workload_balancer import assign_teachers_balanced, calculate_balance_score
from utils import flush_print

# ============================================================================
# CONSOLE OUTPUT CONFIGURATION (Granular Control)
# ============================================================================
SHOW_GROUP_LOGS = True         # One line per cohort: placed, skipped and why
SHOW_TEACHER_LOGS = True       # Teacher assignment phase summary
SHOW_CONFLICT_LOGS = True      # Conflict counts per type
SHOW_RUN_SUMMARY = True        # Final metrics banner
# ============================================================================

TEACHER_STRATEGIES = ("greedy", "balanced")


def schedule_by_content(students, content_catalog, inventory, constraints, weights,
                        max_content_items=None, max_alternatives=0, include_rationale=True,
                        id_prefix="class"):
    """
    Place each progress cohort into its best slot, consuming the inventory as it goes.

    Args:
        students: List of StudentProgress
        content_catalog: List of LearningContent
        inventory: SlotInventory owned by this run (mutated)
        constraints: SchedulingConstraints
        weights: SchedulingScoringWeights
        max_content_items: Optional cap on content items per class
        max_alternatives: Runner-up slots to record on each class
        include_rationale: Generate rationale strings
        id_prefix: Prefix for generated class ids

    Returns:
        (scheduled_classes, unscheduled_groups)
    """
    scheduled_classes = []
    unscheduled_groups = []

    groups = group_students_by_progress(students, constraints)

    for group_idx, group in enumerate(groups):
        student_ids = [s.student_id for s in group]
        position = f"unit {group[0].current_unit}, lesson {group[0].current_lesson}"

        content = select_next_content(group, content_catalog, max_items=max_content_items)
        if not content:
            unscheduled_groups.append(UnscheduledGroup(
                student_ids=student_ids,
                course_id=group[0].course_id,
                reason="no_common_content",
            ))
            if SHOW_GROUP_LOGS:
                flush_print(f"   Group {group_idx + 1} ({position}, {len(group)} students): SKIPPED - no common unlearned content")
            continue

        ranked = rank_slots(content, group, inventory.available_slots(), weights)
        if not ranked:
            unscheduled_groups.append(UnscheduledGroup(
                student_ids=student_ids,
                course_id=group[0].course_id,
                reason="no_eligible_slot",
                content_ids=[c.id for c in content],
            ))
            if SHOW_GROUP_LOGS:
                flush_print(f"   Group {group_idx + 1} ({position}, {len(group)} students): SKIPPED - no eligible time slot")
            continue

        best_slot, best_score = ranked[0]
        booked_slot = inventory.consume(best_slot.id, len(group))

        class_id = f"{id_prefix}-{len(scheduled_classes) + 1:03d}"
        scheduled_class = create_scheduled_class(
            class_id, group, content, booked_slot, weights, include_rationale=include_rationale
        )

        for alt_idx, (alt_slot, _) in enumerate(ranked[1:max_alternatives + 1], start=1):
            scheduled_class.alternatives.append(create_scheduled_class(
                f"{class_id}-alt{alt_idx}", group, content, copy.deepcopy(alt_slot), weights,
                include_rationale=False,
            ))

        scheduled_classes.append(scheduled_class)

        if SHOW_GROUP_LOGS:
            flush_print(
                f"   Group {group_idx + 1} ({position}, {len(group)} students): "
                f"{class_id} -> slot {booked_slot.id} (score {best_score:.3f}, confidence {scheduled_class.confidence_score:.2f})"
            )

    return scheduled_classes, unscheduled_groups


def calculate_metrics(start_time, result, teachers):
    """Summary numbers for a finished run."""
    classes = result.scheduled_classes

    total_capacity = sum(c.time_slot.capacity.max_students for c in classes)
    total_enrolled = sum(len(c.student_ids) for c in classes)

    workloads = [
        sum(1 for c in classes if c.teacher_id == teacher.teacher_id)
        for teacher in teachers
    ]

    return SchedulingMetrics(
        processing_time_ms=(time.time() - start_time) * 1000,
        students_processed=total_enrolled,
        classes_scheduled=len(classes),
        unscheduled_groups=len(result.unscheduled_groups),
        unassigned_classes=len(result.unassigned_class_ids),
        conflicts_detected=len(result.conflicts),
        conflicts_with_resolutions=sum(1 for c in result.conflicts if c.resolutions),
        resource_utilization=total_enrolled / total_capacity if total_capacity > 0 else 0.0,
        workload_balance_score=calculate_balance_score(workloads),
    )


def run_scheduler(config, students, content_catalog, time_slots, teachers, scoring=None,
                  existing_schedule=None, detected_at=None, output_folder=None):
    """
    One complete scheduling run: cohorts -> content -> slots -> teachers -> conflicts.

    The caller's slot list is never modified; slot consumption happens on a
    run-owned SlotInventory.

    Args:
        config: Configuration dictionary (see config.json)
        students: List of StudentProgress
        content_catalog: List of LearningContent
        time_slots: List of TimeSlot
        teachers: Roster entries with a teacher_id
        scoring: TeacherScoring collaborator (defaults to TeacherScoring())
        existing_schedule: Classes booked before this run (teacher double-booking checks)
        detected_at: Timestamp for detected conflicts (defaults to now)
        output_folder: Where the balanced pass writes its solution log, if anywhere

    Returns:
        SchedulingRunResult
    """
    start_time = time.time()

    constraints = SchedulingConstraints.from_config(config)
    weights = SchedulingScoringWeights.from_config(config)
    scoring = scoring or TeacherScoring()

    strategy = config.get("TEACHER_ASSIGNMENT_STRATEGY", "greedy")
    if strategy not in TEACHER_STRATEGIES:
        raise ValueError(f"Unknown TEACHER_ASSIGNMENT_STRATEGY '{strategy}', expected one of {TEACHER_STRATEGIES}")

    inventory = SlotInventory(time_slots)

    course_ids = sorted({s.course_id for s in students if s.course_id})
    if len(course_ids) > 1:
        flush_print(f"WARNING: students from {len(course_ids)} courses in one run; cohorts only look at unit/lesson")

    # ============================================================================
    # PHASE 1: COHORTS, CONTENT AND SLOTS
    # ============================================================================
    if SHOW_GROUP_LOGS:
        flush_print("\n" + "=" * 70)
        flush_print(f"SCHEDULING {len(students)} STUDENTS INTO {len(inventory)} SLOTS")
        flush_print("=" * 70)

    scheduled_classes, unscheduled_groups = schedule_by_content(
        students, content_catalog, inventory, constraints, weights,
        max_content_items=config.get("MAX_CONTENT_ITEMS_PER_CLASS"),
        max_alternatives=int(config.get("MAX_ALTERNATIVES", 0)),
        include_rationale=config.get("INCLUDE_RATIONALE", True),
    )

    # ============================================================================
    # PHASE 2: TEACHERS
    # ============================================================================
    if SHOW_TEACHER_LOGS:
        flush_print("\n" + "=" * 70)
        flush_print(f"ASSIGNING TEACHERS ({strategy}, {len(teachers)} candidates)")
        flush_print("=" * 70)

    if strategy == "balanced":
        log_file_path = None
        if output_folder:
            log_file_path = os.path.join(output_folder, "workload_balancer_log.txt")
        unassigned_class_ids = assign_teachers_balanced(
            scheduled_classes, teachers, constraints,
            scoring=scoring,
            existing_schedule=existing_schedule,
            time_limit=config.get("BALANCER_TIME_LIMIT_SECONDS", 10),
            random_seed=config.get("BALANCER_RANDOM_SEED"),
            deterministic_mode=config.get("DETERMINISTIC_MODE", True),
            log_file_path=log_file_path,
            verbose=SHOW_TEACHER_LOGS,
        )
    else:
        unassigned_class_ids = assign_teachers(
            scheduled_classes, teachers, constraints,
            scoring=scoring,
            existing_schedule=existing_schedule,
        )

    if SHOW_TEACHER_LOGS:
        flush_print(f"   Assigned: {len(scheduled_classes) - len(unassigned_class_ids)}/{len(scheduled_classes)}")
        for class_id in unassigned_class_ids:
            flush_print(f"   UNASSIGNED: {class_id} - no eligible teacher")

    # ============================================================================
    # PHASE 3: CONFLICTS
    # ============================================================================
    conflicts = detect_conflicts(scheduled_classes, detected_at=detected_at)

    if SHOW_CONFLICT_LOGS:
        flush_print("\n" + "=" * 70)
        flush_print(f"CONFLICT DETECTION: {len(conflicts)} conflict(s)")
        flush_print("=" * 70)
        counts = {}
        for conflict in conflicts:
            counts[conflict.type] = counts.get(conflict.type, 0) + 1
        for conflict_type, count in sorted(counts.items()):
            flush_print(f"   {conflict_type}: {count}")

    result = SchedulingRunResult(
        scheduled_classes=scheduled_classes,
        unscheduled_groups=unscheduled_groups,
        unassigned_class_ids=unassigned_class_ids,
        conflicts=conflicts,
    )
    result.metrics = calculate_metrics(start_time, result, teachers)

    if SHOW_RUN_SUMMARY:
        print_run_summary(result)

    return result


def print_run_summary(result):
    metrics = result.metrics
    flush_print("\n" + "=" * 70)
    flush_print("RUN SUMMARY")
    flush_print("=" * 70)
    flush_print(f"   Classes scheduled:      {metrics.classes_scheduled}")
    flush_print(f"   Students placed:        {metrics.students_processed}")
    flush_print(f"   Unscheduled groups:     {metrics.unscheduled_groups}")
    flush_print(f"   Classes w/o teacher:    {metrics.unassigned_classes}")
    flush_print(f"   Conflicts detected:     {metrics.conflicts_detected}")
    flush_print(f"   Resource utilization:   {metrics.resource_utilization:.1%}")
    flush_print(f"   Workload balance score: {metrics.workload_balance_score:.1f}")
    flush_print(f"   Processing time:        {metrics.processing_time_ms:.1f} ms")
    flush_print("=" * 70)
