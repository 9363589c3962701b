"""
Class Builder - Turning a (cohort, content, slot) decision into a ScheduledClass

The confidence score is a [0, 1] quality estimate of the decision, not a
probability:

    0.4 x content alignment + 0.3 x slot score + 0.2 x group cohesion + 0.1 x utilization
"""

import numpy as np

from data_models import ScheduledClass
from scheduling_system.content_selector import prerequisites_met, student_average_skill
from scheduling_system.rationale import generate_scheduling_rationale
from scheduling_system.slot_scorer import calculate_slot_score, utilization_score

MAX_PROGRESS_VARIANCE = 2500  # 50^2


def content_alignment_score(group, content):
    """How well the content fits each student, averaged over items then students."""
    if not group or not content:
        return 0.0

    total = 0.0
    for student in group:
        avg_skill = student_average_skill(student)
        student_score = 0.0
        for item in content:
            if item.id in student.unlearned_content:
                student_score += 1
            if prerequisites_met(item, student):
                student_score += 0.5
            student_score += (1 - abs(item.difficulty_level - avg_skill) / 10) * 0.3
        total += student_score / len(content)

    return total / len(group)


def group_cohesion_score(group):
    """1.0 for a single student; lower progress spread means higher cohesion."""
    if len(group) <= 1:
        return 1.0

    variance = float(np.var([s.progress_percentage for s in group]))
    return 1 - min(variance / MAX_PROGRESS_VARIANCE, 1)


def calculate_confidence_score(group, content, time_slot, weights):
    score = 0.0
    score += content_alignment_score(group, content) * 0.4
    score += calculate_slot_score(time_slot, content, group, weights) * 0.3
    score += group_cohesion_score(group) * 0.2
    score += utilization_score(time_slot, len(group)) * 0.1
    return min(1.0, max(0.0, score))


def create_scheduled_class(class_id, group, content, time_slot, weights, include_rationale=True):
    """
    Build the ScheduledClass for a placed cohort.

    Args:
        class_id: Identifier for the new class
        group: List of StudentProgress
        content: List of LearningContent (ranked)
        time_slot: TimeSlot the cohort was placed in
        weights: SchedulingScoringWeights used for the slot score
        include_rationale: Whether to generate the rationale string

    Returns:
        ScheduledClass with teacher_id unset
    """
    rationale = generate_scheduling_rationale(group, content, time_slot) if include_rationale else ""

    return ScheduledClass(
        id=class_id,
        course_id=group[0].course_id,
        student_ids=[s.student_id for s in group],
        time_slot=time_slot,
        content=list(content),
        class_type="individual" if len(group) == 1 else "group",
        teacher_id=None,
        status="scheduled",
        confidence_score=calculate_confidence_score(group, content, time_slot, weights),
        rationale=rationale,
        alternatives=[],
    )
