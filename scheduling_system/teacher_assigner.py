"""
Teacher Assigner - One teacher per scheduled class

Classes are taken in the order the scheduler produced them. A teacher with
an overlapping booking (this run or a pre-existing schedule) is never
considered. Among the rest, the score is

    0.4 x workload + 0.3 x expertise + 0.2 x class-type preference + 0.1 x feedback

where workload = 1 - assigned / max_concurrent_classes_per_teacher and the
other three come from a TeacherScoring collaborator.
"""

from scheduling_system.time_windows import window_contains, windows_overlap

WORKLOAD_WEIGHT = 0.4
EXPERTISE_WEIGHT = 0.3
CLASS_TYPE_WEIGHT = 0.2
FEEDBACK_WEIGHT = 0.1


class TeacherScoring:
    """
    Scoring callbacks for teacher selection.

    Subclass and override to plug in the teacher-profile system. The base
    implementation returns neutral constants and honours teacher
    availability windows when a teacher has any.
    """

    def expertise_score(self, teacher, scheduled_class):
        return 0.8

    def class_type_preference(self, teacher, scheduled_class):
        return 0.7

    def feedback_score(self, teacher):
        return 0.85

    def is_available(self, teacher, time_slot):
        availability = getattr(teacher, "availability", None)
        if not availability:
            return True
        return any(window_contains(window, time_slot) for window in availability)


class ProfileTeacherScoring(TeacherScoring):
    """Scores derived from the Teacher record itself; empty profile fields fall back to the base constants."""

    def expertise_score(self, teacher, scheduled_class):
        if not teacher.qualified_course_ids:
            return super().expertise_score(teacher, scheduled_class)
        return 1.0 if scheduled_class.course_id in teacher.qualified_course_ids else 0.0

    def class_type_preference(self, teacher, scheduled_class):
        if not teacher.preferred_class_types:
            return super().class_type_preference(teacher, scheduled_class)
        return 1.0 if scheduled_class.class_type in teacher.preferred_class_types else 0.4

    def feedback_score(self, teacher):
        if teacher.feedback_rating is None:
            return super().feedback_score(teacher)
        return min(1.0, max(0.0, teacher.feedback_rating / 5))


def count_assignments(teacher_id, booked_classes):
    return sum(1 for cls in booked_classes if cls.teacher_id == teacher_id)


def is_teacher_free(teacher_id, time_slot, booked_classes):
    """No booked class of this teacher overlaps the slot."""
    return not any(
        cls.teacher_id == teacher_id and windows_overlap(cls.time_slot, time_slot)
        for cls in booked_classes
    )


def is_teacher_eligible(teacher, scheduled_class, booked_classes, scoring):
    return (
        scoring.is_available(teacher, scheduled_class.time_slot)
        and is_teacher_free(teacher.teacher_id, scheduled_class.time_slot, booked_classes)
    )


def preference_score(teacher, scheduled_class, scoring):
    """The externally supplied part of the teacher score (everything but workload)."""
    score = 0.0
    score += scoring.expertise_score(teacher, scheduled_class) * EXPERTISE_WEIGHT
    score += scoring.class_type_preference(teacher, scheduled_class) * CLASS_TYPE_WEIGHT
    score += scoring.feedback_score(teacher) * FEEDBACK_WEIGHT
    return score


def calculate_teacher_score(teacher, scheduled_class, booked_classes, constraints, scoring):
    """
    Suitability of a teacher for a class given what is already booked.

    Returns:
        0 when the teacher cannot take the class, otherwise the weighted score
    """
    if not is_teacher_eligible(teacher, scheduled_class, booked_classes, scoring):
        return 0.0

    current_workload = count_assignments(teacher.teacher_id, booked_classes)
    workload_score = 1 - current_workload / constraints.max_concurrent_classes_per_teacher

    return workload_score * WORKLOAD_WEIGHT + preference_score(teacher, scheduled_class, scoring)


def find_optimal_teacher(scheduled_class, teachers, booked_classes, constraints, scoring):
    """Highest-scoring teacher above zero; ties keep the earlier roster entry."""
    best_teacher = None
    best_score = 0.0

    for teacher in teachers:
        score = calculate_teacher_score(teacher, scheduled_class, booked_classes, constraints, scoring)
        if score > best_score:
            best_score = score
            best_teacher = teacher

    return best_teacher


def assign_teachers(scheduled_classes, teachers, constraints, scoring=None, existing_schedule=None):
    """
    Fill teacher_id on each scheduled class in place.

    Classes that already carry a teacher_id are left alone and count as
    bookings for every other class, wherever they sit in the list.

    Args:
        scheduled_classes: List of ScheduledClass in scheduler order
        teachers: Roster; each entry needs a teacher_id (plus whatever scoring reads)
        constraints: SchedulingConstraints
        scoring: TeacherScoring collaborator (defaults to TeacherScoring())
        existing_schedule: Classes booked before this run

    Returns:
        List of class ids left without a teacher
    """
    if constraints.max_concurrent_classes_per_teacher < 1:
        raise ValueError("max_concurrent_classes_per_teacher must be at least 1")

    scoring = scoring or TeacherScoring()
    booked = list(existing_schedule or []) + [c for c in scheduled_classes if c.teacher_id is not None]
    pending = [c for c in scheduled_classes if c.teacher_id is None]
    unassigned = []

    for scheduled_class in pending:
        teacher = find_optimal_teacher(scheduled_class, teachers, booked, constraints, scoring)
        if teacher is None:
            unassigned.append(scheduled_class.id)
            continue
        scheduled_class.teacher_id = teacher.teacher_id
        booked.append(scheduled_class)

    return unassigned
