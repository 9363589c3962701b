# main.py
import collections
import os
import traceback

import pandas as pd

from data_models import (
    LearningContent,
    SlotCapacity,
    StudentPerformanceMetrics,
    StudentProgress,
    Teacher,
    TimeSlot,
    TimeWindow,
)
from export_reports import human_readable_conflict_report, print_raw_conflicts, schedule_to_dataframe
from scheduler import run_scheduler
from scheduling_system.teacher_assigner import ProfileTeacherScoring
from scheduling_system.time_windows import time_to_minutes, window_bounds
from utils import create_output_folder, flush_print, load_config


def parse_id_list(value):
    """Semicolon-delimited id list -> set of stripped ids (empty for blank cells)."""
    if pd.isna(value) or not str(value).strip():
        return set()
    return set(item.strip() for item in str(value).split(';') if item.strip())


def parse_bool(value, default=False):
    if pd.isna(value) or not str(value).strip():
        return default
    return str(value).strip().lower() in ("1", "true", "yes", "y")


def read_csv(path, columns=None):
    """
    Reads a CSV with every column as text.

    Required files (columns=None) must exist. Optional files pass their
    expected columns and come back empty when missing or empty.
    """
    if columns is None:
        df = pd.read_csv(path, dtype=str)
        print(f"Successfully loaded {path}")
        return df

    try:
        df = pd.read_csv(path, dtype=str)
        print(f"Successfully loaded {path}")
        return df
    except FileNotFoundError:
        print(f"WARNING: {path} not found. Continuing without it.")
    except pd.errors.EmptyDataError:
        print(f"WARNING: {path} is empty. Continuing without it.")
    return pd.DataFrame(columns=columns)


def parse_window(row, day_map, source):
    """
    Row with day/start_time/end_time -> TimeWindow.

    Raises:
        ValueError: on an unknown day name or a malformed window
    """
    day_idx = day_map.get(str(row['day']).strip().upper())
    if day_idx is None:
        raise ValueError(f"{source}: unknown day '{row['day']}'")

    window = TimeWindow(
        day_of_week=day_idx,
        start_time=str(row['start_time']).strip(),
        end_time=str(row['end_time']).strip(),
    )
    try:
        window_bounds(window)
    except ValueError as e:
        raise ValueError(f"{source}: {e}")
    return window


def load_data(config, data_folder=None):
    """
    Loads the scheduling snapshot from CSV files.

    Returns:
        (students, content_catalog, time_slots, teachers)
    """
    DATA_FOLDER = data_folder or config.get("DATA_FOLDER", "data")
    day_map = {day.upper(): i for i, day in enumerate(config["SCHEDULING_DAYS"])}

    df_students = read_csv(f'{DATA_FOLDER}/students.csv')
    df_content = read_csv(f'{DATA_FOLDER}/content.csv')
    df_slots = read_csv(f'{DATA_FOLDER}/time_slots.csv')
    df_teachers = read_csv(f'{DATA_FOLDER}/teachers.csv')

    df_skills = read_csv(f'{DATA_FOLDER}/student_skills.csv', columns=['student_id', 'skill', 'score'])
    df_times = read_csv(f'{DATA_FOLDER}/student_times.csv', columns=['student_id', 'kind', 'day', 'start_time', 'end_time'])
    df_availability = read_csv(f'{DATA_FOLDER}/teacher_availability.csv', columns=['teacher_id', 'day', 'start_time', 'end_time'])

    # ============================================================================
    # PER-STUDENT DETAIL TABLES
    # ============================================================================
    skills_by_student = collections.defaultdict(dict)
    for _, row in df_skills.iterrows():
        skills_by_student[str(row['student_id']).strip()][str(row['skill']).strip()] = float(row['score'])

    preferred_by_student = collections.defaultdict(list)
    best_by_student = collections.defaultdict(list)
    for _, row in df_times.iterrows():
        window = parse_window(row, day_map, 'student_times.csv')
        student_id = str(row['student_id']).strip()
        kind = str(row['kind']).strip().lower()
        if kind == 'preferred':
            preferred_by_student[student_id].append(window)
        elif kind == 'best_performing':
            best_by_student[student_id].append(window)
        else:
            raise ValueError(f"student_times.csv: unknown kind '{row['kind']}', expected preferred or best_performing")

    students = []
    for _, row in df_students.iterrows():
        student_id = str(row['student_id']).strip()
        progress = float(row['progress_percentage']) if pd.notna(row.get('progress_percentage')) else 0.0
        students.append(StudentProgress(
            student_id=student_id,
            course_id=str(row['course_id']).strip(),
            current_unit=int(row['current_unit']),
            current_lesson=int(row['current_lesson']),
            progress_percentage=progress,
            completed_content=parse_id_list(row.get('completed_content')),
            unlearned_content=parse_id_list(row.get('unlearned_content')),
            skill_assessments=dict(skills_by_student.get(student_id, {})),
            preferred_times=list(preferred_by_student.get(student_id, [])),
            performance_metrics=StudentPerformanceMetrics(
                best_performing_times=list(best_by_student.get(student_id, []))
            ),
        ))

    # ============================================================================
    # CONTENT CATALOG
    # ============================================================================
    content_catalog = []
    for _, row in df_content.iterrows():
        course_id = str(row['course_id']).strip() if pd.notna(row.get('course_id')) else None
        content_catalog.append(LearningContent(
            id=str(row['id']).strip(),
            title=row['title'],
            unit_number=int(row['unit_number']),
            lesson_number=int(row['lesson_number']),
            difficulty_level=float(row['difficulty_level']),
            estimated_duration=int(row['estimated_duration']),
            prerequisites=parse_id_list(row.get('prerequisites')),
            is_required=parse_bool(row.get('is_required')),
            course_id=course_id,
        ))

    # ============================================================================
    # TIME SLOTS
    # ============================================================================
    time_slots = []
    for _, row in df_slots.iterrows():
        day_idx = day_map.get(str(row['day']).strip().upper())
        if day_idx is None:
            raise ValueError(f"time_slots.csv: slot {row['id']} has unknown day '{row['day']}'")

        start_time = str(row['start_time']).strip()
        end_time = str(row['end_time']).strip()
        max_students = int(row['max_students'])
        if pd.notna(row.get('available_spots')):
            available_spots = int(row['available_spots'])
        else:
            available_spots = max_students
        if pd.notna(row.get('duration')):
            duration = int(row['duration'])
        else:
            duration = time_to_minutes(end_time) - time_to_minutes(start_time)
        location = str(row['location']).strip() if pd.notna(row.get('location')) else None

        time_slots.append(TimeSlot(
            id=str(row['id']).strip(),
            day_of_week=day_idx,
            start_time=start_time,
            end_time=end_time,
            duration=duration,
            capacity=SlotCapacity(max_students=max_students, available_spots=available_spots),
            location=location,
            is_available=parse_bool(row.get('is_available'), default=True),
        ))

    # ============================================================================
    # TEACHERS
    # ============================================================================
    availability_by_teacher = collections.defaultdict(list)
    for _, row in df_availability.iterrows():
        window = parse_window(row, day_map, 'teacher_availability.csv')
        availability_by_teacher[str(row['teacher_id']).strip()].append(window)

    teachers = []
    for _, row in df_teachers.iterrows():
        teacher_id = str(row['teacher_id']).strip()
        rating = float(row['feedback_rating']) if pd.notna(row.get('feedback_rating')) else None
        teachers.append(Teacher(
            teacher_id=teacher_id,
            name=row['name'],
            availability=list(availability_by_teacher.get(teacher_id, [])),
            qualified_course_ids=parse_id_list(row.get('qualified_courses')),
            preferred_class_types=parse_id_list(row.get('preferred_class_types')),
            feedback_rating=rating,
        ))

    print(f"Loaded {len(students)} students")
    print(f"Loaded {len(content_catalog)} content items")
    print(f"Loaded {len(time_slots)} time slots")
    print(f"Loaded {len(teachers)} teachers")

    return students, content_catalog, time_slots, teachers


if __name__ == '__main__':
    print("Starting scheduler...")
    config = load_config()
    students, content_catalog, time_slots, teachers = load_data(config)

    strategy = config.get("TEACHER_ASSIGNMENT_STRATEGY", "greedy")
    output_folder = create_output_folder(
        config.get("OUTPUT_FOLDER", "outputs"),
        num_students=len(students),
        num_content=len(content_catalog),
        num_slots=len(time_slots),
        num_teachers=len(teachers),
        strategy=strategy,
    )
    print(f"Output folder: {output_folder}")

    result = run_scheduler(
        config, students, content_catalog, time_slots, teachers,
        scoring=ProfileTeacherScoring(),
        output_folder=output_folder,
    )

    # ============================================================================
    # SAVE OUTPUTS
    # ============================================================================
    try:
        schedule_path = os.path.join(output_folder, "schedule.csv")
        schedule_to_dataframe(result, config).to_csv(schedule_path, index=False)
        flush_print(f"\nSchedule saved to: {schedule_path}")
    except Exception as e:
        flush_print(f"\nError saving schedule: {e}")
        traceback.print_exc()

    try:
        conflict_report_path = os.path.join(output_folder, "conflict_report.txt")
        human_readable_conflict_report(result, config, output_file=conflict_report_path)
    except Exception as e:
        flush_print(f"\nError writing conflict report: {e}")
        traceback.print_exc()

    try:
        raw_conflicts_path = os.path.join(output_folder, "raw_conflicts.xlsx")
        print_raw_conflicts(
            result,
            config,
            print_to_terminal=False,
            save_to_file=True,
            filename=raw_conflicts_path
        )
    except Exception as e:
        flush_print(f"\nError exporting raw conflicts: {e}")
        traceback.print_exc()

    print(f"\nAll outputs saved to: {output_folder}")
