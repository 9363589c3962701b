"""Plain constructors for the dataclasses the tests feed the scheduler."""

from data_models import (
    LearningContent,
    ScheduledClass,
    SlotCapacity,
    StudentPerformanceMetrics,
    StudentProgress,
    Teacher,
    TimeSlot,
    TimeWindow,
)
from scheduling_system.time_windows import minutes_to_time, time_to_minutes

MONDAY = 1
TUESDAY = 2


def build_student(student_id, unit=1, lesson=1, unlearned=(), completed=(), progress=0.0,
                  skills=None, preferred=(), best=(), course_id="course-1"):
    return StudentProgress(
        student_id=student_id,
        course_id=course_id,
        current_unit=unit,
        current_lesson=lesson,
        progress_percentage=progress,
        completed_content=set(completed),
        unlearned_content=set(unlearned),
        skill_assessments=dict(skills or {}),
        preferred_times=list(preferred),
        performance_metrics=StudentPerformanceMetrics(best_performing_times=list(best)),
    )


def build_content(content_id, unit=1, lesson=1, difficulty=5, duration=60, prerequisites=(),
                  is_required=False, title=None):
    return LearningContent(
        id=content_id,
        title=title or f"Lesson {content_id}",
        unit_number=unit,
        lesson_number=lesson,
        difficulty_level=difficulty,
        estimated_duration=duration,
        prerequisites=set(prerequisites),
        is_required=is_required,
    )


def build_slot(slot_id, day=MONDAY, start="10:00", end=None, max_students=9, available_spots=None,
               location=None, is_available=True):
    if end is None:
        end = minutes_to_time(time_to_minutes(start) + 60)
    return TimeSlot(
        id=slot_id,
        day_of_week=day,
        start_time=start,
        end_time=end,
        duration=time_to_minutes(end) - time_to_minutes(start),
        capacity=SlotCapacity(
            max_students=max_students,
            available_spots=max_students if available_spots is None else available_spots,
        ),
        location=location,
        is_available=is_available,
    )


def build_class(class_id, student_ids, slot, teacher_id=None, course_id="course-1"):
    return ScheduledClass(
        id=class_id,
        course_id=course_id,
        student_ids=list(student_ids),
        time_slot=slot,
        content=[],
        class_type="individual" if len(student_ids) == 1 else "group",
        teacher_id=teacher_id,
    )


def build_teacher(teacher_id, availability=(), qualified=(), preferred_types=(), rating=None):
    return Teacher(
        teacher_id=teacher_id,
        name=f"Teacher {teacher_id}",
        availability=list(availability),
        qualified_course_ids=set(qualified),
        preferred_class_types=set(preferred_types),
        feedback_rating=rating,
    )


def window(day, start, end):
    return TimeWindow(day_of_week=day, start_time=start, end_time=end)
