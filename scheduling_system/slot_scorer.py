"""
Slot Scorer - Which time slot suits a cohort and its content

A slot is eligible when it is still open and has a seat for every member.
Eligible slots are scored as a weighted sum of four factors:

    duration match      x weights.content_progression
    student availability x weights.student_availability
    capacity utilization x weights.class_size_optimization
    time of day         x weights.schedule_continuity
"""

from scheduling_system.time_windows import start_hour, window_bounds, windows_overlap

DEFAULT_PERFORMANCE_SCORE = 0.6

# (start_hour_inclusive, end_hour_exclusive, score), first match wins
TIME_OF_DAY_SCORES = [
    (9, 11, 1.0),
    (11, 13, 0.9),
    (14, 16, 0.8),
    (16, 18, 0.7),
    (8, 9, 0.6),
    (18, 20, 0.5),
]
OFF_HOURS_SCORE = 0.3


def is_slot_eligible(slot, group_size):
    return slot.is_available and slot.capacity.available_spots >= group_size


def total_content_duration(content):
    return sum(item.estimated_duration for item in content)


def duration_match_score(slot, content):
    """1 for a perfect fit, falling towards 0 as slot and content lengths diverge."""
    total = total_content_duration(content)
    longest = max(slot.duration, total)
    if longest == 0:
        return 1.0
    return 1 - abs(slot.duration - total) / longest


def performance_score_for_time(student, slot):
    """1.0 when the slot hits one of the student's best-performing windows."""
    best_times = student.performance_metrics.best_performing_times
    if any(windows_overlap(best, slot) for best in best_times):
        return 1.0
    return DEFAULT_PERFORMANCE_SCORE


def student_availability_score(slot, group):
    """Average per-student fit: 1.0 on a preferred window, else 0.5 + 0.5 x performance."""
    if not group:
        return 0.0

    total = 0.0
    for student in group:
        if any(windows_overlap(pref, slot) for pref in student.preferred_times):
            total += 1.0
        else:
            total += 0.5 + performance_score_for_time(student, slot) * 0.5
    return total / len(group)


def utilization_score(slot, group_size):
    return group_size / slot.capacity.max_students


def time_of_day_score(slot):
    hour = start_hour(slot)
    for start, end, score in TIME_OF_DAY_SCORES:
        if start <= hour < end:
            return score
    return OFF_HOURS_SCORE


def calculate_slot_score(slot, content, group, weights):
    """
    Weighted suitability of a slot for a cohort and its content.

    Args:
        slot: TimeSlot candidate
        content: List of LearningContent to be covered
        group: List of StudentProgress
        weights: SchedulingScoringWeights

    Returns:
        float score (unbounded above; depends on the weights)
    """
    window_bounds(slot)

    score = 0.0
    score += duration_match_score(slot, content) * weights.content_progression
    score += student_availability_score(slot, group) * weights.student_availability
    score += utilization_score(slot, len(group)) * weights.class_size_optimization
    score += time_of_day_score(slot) * weights.schedule_continuity
    return score


def rank_slots(content, group, slots, weights):
    """
    Score every eligible slot, best first.

    Only slots scoring strictly above zero are returned. Equal scores are
    ordered by slot id so the pick never depends on input order.

    Returns:
        List of (TimeSlot, score) tuples
    """
    scored = []
    for slot in slots:
        if not is_slot_eligible(slot, len(group)):
            continue
        score = calculate_slot_score(slot, content, group, weights)
        if score > 0:
            scored.append((slot, score))

    scored.sort(key=lambda pair: (-pair[1], pair[0].id))
    return scored


def find_optimal_slot(content, group, slots, weights):
    """Best (TimeSlot, score) for the cohort, or None when nothing qualifies."""
    ranked = rank_slots(content, group, slots, weights)
    return ranked[0] if ranked else None
