"""
Conflict Detector - Post-hoc scan of a finished schedule

The scheduler places classes optimistically; this module reports what went
wrong afterwards. Four independent pairwise checks:

    time_overlap         a student is in two overlapping classes      (high)
    capacity_exceeded    more students than the slot seats           (critical)
    teacher_unavailable  a teacher is in two overlapping classes      (high)
    resource_conflict    a location is booked twice at the same time  (medium)

Every conflict carries resolution candidates. They are suggestions for a
human or an external system; nothing here applies them.
"""

import collections
from datetime import datetime

from data_models import ConflictResolution, ResolutionImpact, ResolutionStep, SchedulingConflict
from scheduling_system.time_windows import windows_overlap

DEFAULT_LOCATION = "default"


def detect_conflicts(scheduled_classes, detected_at=None):
    """
    Run every conflict check over the complete schedule.

    Args:
        scheduled_classes: List of ScheduledClass
        detected_at: Timestamp stamped on every conflict (defaults to now)

    Returns:
        List of SchedulingConflict, grouped by check in the order above
    """
    detected_at = detected_at or datetime.now()

    conflicts = []
    conflicts.extend(detect_time_conflicts(scheduled_classes, detected_at))
    conflicts.extend(detect_capacity_conflicts(scheduled_classes, detected_at))
    conflicts.extend(detect_teacher_conflicts(scheduled_classes, detected_at))
    conflicts.extend(detect_resource_conflicts(scheduled_classes, detected_at))
    return conflicts


def detect_time_conflicts(scheduled_classes, detected_at):
    conflicts = []
    for i in range(len(scheduled_classes)):
        for j in range(i + 1, len(scheduled_classes)):
            class1 = scheduled_classes[i]
            class2 = scheduled_classes[j]

            common_students = [sid for sid in class1.student_ids if sid in class2.student_ids]
            if common_students and windows_overlap(class1.time_slot, class2.time_slot):
                conflict_id = f"time-conflict-{i}-{j}"
                conflicts.append(SchedulingConflict(
                    id=conflict_id,
                    type="time_overlap",
                    severity="high",
                    entity_ids=[class1.id, class2.id],
                    description=f"Students {', '.join(common_students)} have overlapping classes",
                    resolutions=generate_time_conflict_resolutions(conflict_id, class1, class2),
                    detected_at=detected_at,
                ))
    return conflicts


def detect_capacity_conflicts(scheduled_classes, detected_at):
    conflicts = []
    for scheduled_class in scheduled_classes:
        enrolled = len(scheduled_class.student_ids)
        max_students = scheduled_class.time_slot.capacity.max_students
        if enrolled > max_students:
            conflict_id = f"capacity-conflict-{scheduled_class.id}"
            conflicts.append(SchedulingConflict(
                id=conflict_id,
                type="capacity_exceeded",
                severity="critical",
                entity_ids=[scheduled_class.id],
                description=f"Class {scheduled_class.id} has {enrolled} students but capacity is {max_students}",
                resolutions=generate_capacity_conflict_resolutions(conflict_id, scheduled_class),
                detected_at=detected_at,
            ))
    return conflicts


def detect_teacher_conflicts(scheduled_classes, detected_at):
    teacher_schedules = collections.defaultdict(list)
    for scheduled_class in scheduled_classes:
        if scheduled_class.teacher_id:
            teacher_schedules[scheduled_class.teacher_id].append(scheduled_class)

    conflicts = []
    for teacher_id, classes in teacher_schedules.items():
        for i in range(len(classes)):
            for j in range(i + 1, len(classes)):
                class1 = classes[i]
                class2 = classes[j]
                if windows_overlap(class1.time_slot, class2.time_slot):
                    conflict_id = f"teacher-conflict-{teacher_id}-{i}-{j}"
                    conflicts.append(SchedulingConflict(
                        id=conflict_id,
                        type="teacher_unavailable",
                        severity="high",
                        entity_ids=[class1.id, class2.id],
                        description=f"Teacher {teacher_id} has overlapping classes",
                        resolutions=generate_teacher_conflict_resolutions(conflict_id, class1, class2),
                        detected_at=detected_at,
                    ))
    return conflicts


def detect_resource_conflicts(scheduled_classes, detected_at):
    location_schedules = collections.defaultdict(list)
    for scheduled_class in scheduled_classes:
        location = scheduled_class.time_slot.location or DEFAULT_LOCATION
        location_schedules[location].append(scheduled_class)

    conflicts = []
    for location, classes in location_schedules.items():
        for i in range(len(classes)):
            for j in range(i + 1, len(classes)):
                class1 = classes[i]
                class2 = classes[j]
                if windows_overlap(class1.time_slot, class2.time_slot):
                    conflict_id = f"resource-conflict-{location}-{i}-{j}"
                    conflicts.append(SchedulingConflict(
                        id=conflict_id,
                        type="resource_conflict",
                        severity="medium",
                        entity_ids=[class1.id, class2.id],
                        description=f"Location {location} is double-booked",
                        resolutions=generate_resource_conflict_resolutions(conflict_id, class1, class2),
                        detected_at=detected_at,
                    ))
    return conflicts


# ============================================================================
# RESOLUTION CANDIDATES
# ============================================================================

def generate_time_conflict_resolutions(conflict_id, class1, class2):
    return [
        ConflictResolution(
            id=f"resolution-{conflict_id}-reschedule",
            type="reschedule",
            description=f"Reschedule {class1.id} to a different time slot",
            impact=ResolutionImpact(
                affected_students=len(class1.student_ids),
                affected_teachers=1,
                schedule_disruption=3,
                resource_utilization=0,
                student_satisfaction=-0.1,
            ),
            feasibility_score=0.8,
            estimated_implementation_time=15,
            required_approvals=["teacher", "students"],
            steps=[
                ResolutionStep(
                    order=1,
                    description="Find alternative time slot",
                    type="schedule_change",
                    parameters={"class_id": class1.id},
                    estimated_duration=5,
                ),
                ResolutionStep(
                    order=2,
                    description="Notify affected parties",
                    type="notification",
                    parameters={"recipients": list(class1.student_ids)},
                    estimated_duration=10,
                    dependencies=["step-1"],
                ),
            ],
        ),
    ]


def generate_capacity_conflict_resolutions(conflict_id, scheduled_class):
    return [
        ConflictResolution(
            id=f"resolution-{conflict_id}-split-class",
            type="split_class",
            description=f"Split class {scheduled_class.id} into multiple smaller classes",
            impact=ResolutionImpact(
                affected_students=len(scheduled_class.student_ids),
                affected_teachers=2,
                schedule_disruption=5,
                resource_utilization=0.2,
                student_satisfaction=0.1,
            ),
            feasibility_score=0.9,
            estimated_implementation_time=30,
            required_approvals=["admin"],
        ),
    ]


def generate_teacher_conflict_resolutions(conflict_id, class1, class2):
    return [
        ConflictResolution(
            id=f"resolution-{conflict_id}-reassign-teacher",
            type="reassign_teacher",
            description="Assign different teacher to one of the conflicting classes",
            impact=ResolutionImpact(
                affected_students=min(len(class1.student_ids), len(class2.student_ids)),
                affected_teachers=2,
                schedule_disruption=2,
                resource_utilization=0,
                student_satisfaction=-0.05,
            ),
            feasibility_score=0.7,
            estimated_implementation_time=20,
            required_approvals=["teacher"],
        ),
    ]


def generate_resource_conflict_resolutions(conflict_id, class1, class2):
    return [
        ConflictResolution(
            id=f"resolution-{conflict_id}-change-location",
            type="reschedule",
            description="Move one class to a different location",
            impact=ResolutionImpact(
                affected_students=min(len(class1.student_ids), len(class2.student_ids)),
                affected_teachers=1,
                schedule_disruption=1,
                resource_utilization=0,
                student_satisfaction=-0.02,
            ),
            feasibility_score=0.9,
            estimated_implementation_time=10,
        ),
    ]
