"""
Progress Grouper - Cohort formation

Students sitting on the same (unit, lesson) are taught together, up to the
class size limit. Anyone left over becomes a smaller group, down to an
individual class.
"""


def validate_student(student):
    """Fail fast on records the enrollment system should never hand us."""
    if not student.student_id:
        raise ValueError("StudentProgress is missing student_id")
    if not student.course_id:
        raise ValueError(f"StudentProgress for {student.student_id} is missing course_id")


def group_students_by_progress(students, constraints):
    """
    Partition students into ordered cohorts sharing (current_unit, current_lesson).

    Args:
        students: List of StudentProgress records
        constraints: SchedulingConstraints (uses max_students_per_class)

    Returns:
        List of groups (lists of StudentProgress), ordered by unit then lesson.
        Every student appears in exactly one group.
    """
    max_group_size = constraints.max_students_per_class
    if max_group_size < 1:
        raise ValueError(f"max_students_per_class must be at least 1, got {max_group_size}")

    for student in students:
        validate_student(student)

    # sorted() is stable, so equal positions keep their input order
    sorted_students = sorted(students, key=lambda s: (s.current_unit, s.current_lesson))

    groups = []
    current_group = []
    last_position = None

    for student in sorted_students:
        position = (student.current_unit, student.current_lesson)

        if current_group and (position != last_position or len(current_group) >= max_group_size):
            groups.append(current_group)
            current_group = []

        current_group.append(student)
        last_position = position

    if current_group:
        groups.append(current_group)

    return groups
