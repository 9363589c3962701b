# export_reports.py
"""
Report generation for a finished scheduling run.
Includes a human-readable conflict report and a raw Excel export.
"""

import collections
import pandas as pd

CONFLICT_TYPE_ORDER = ["time_overlap", "capacity_exceeded", "teacher_unavailable", "resource_conflict"]


def day_name(day_of_week, config):
    days = config.get("SCHEDULING_DAYS") if config else None
    if days and 0 <= day_of_week < len(days):
        return days[day_of_week]
    return str(day_of_week)


def schedule_to_dataframe(result, config=None):
    """One row per scheduled class, in scheduler order."""
    records = []
    for cls in result.scheduled_classes:
        slot = cls.time_slot
        records.append({
            "class_id": cls.id,
            "course_id": cls.course_id,
            "class_type": cls.class_type,
            "students": ";".join(cls.student_ids),
            "student_count": len(cls.student_ids),
            "content": ";".join(c.id for c in cls.content),
            "slot_id": slot.id,
            "day": day_name(slot.day_of_week, config),
            "start_time": slot.start_time,
            "end_time": slot.end_time,
            "location": slot.location,
            "teacher_id": cls.teacher_id,
            "confidence": round(cls.confidence_score, 3),
            "alternatives": ";".join(alt.time_slot.id for alt in cls.alternatives),
            "rationale": cls.rationale,
        })

    columns = [
        "class_id", "course_id", "class_type", "students", "student_count", "content",
        "slot_id", "day", "start_time", "end_time", "location", "teacher_id",
        "confidence", "alternatives", "rationale",
    ]
    return pd.DataFrame(records, columns=columns)


def print_raw_conflicts(result, config=None, print_to_terminal=True, save_to_file=True, filename="raw_conflicts.xlsx"):
    """
    Dumps the schedule, every detected conflict and every unscheduled group.

    - Terminal output lists each conflict on one line
    - File output is a multi-sheet Excel file for data analysis:
      Schedule, one sheet per conflict type, Unscheduled

    Args:
        result: SchedulingRunResult returned by run_scheduler
        config: scheduler configuration dictionary (used for day names)
        print_to_terminal: toggle terminal output
        save_to_file: toggle excel output
        filename: excel filename
    """
    if not print_to_terminal and not save_to_file:
        print("Conflict export skipped as both terminal and file outputs are disabled.")
        return

    terminal_lines = []
    excel_data = collections.defaultdict(list)

    for conflict in result.conflicts:
        terminal_lines.append(f"{conflict.type} [{conflict.severity}]: {', '.join(conflict.entity_ids)} - {conflict.description}")
        excel_data[conflict.type].append({
            "conflict_id": conflict.id,
            "severity": conflict.severity,
            "entities": ";".join(conflict.entity_ids),
            "description": conflict.description,
            "resolutions": ";".join(r.type for r in conflict.resolutions),
            "best_feasibility": max((r.feasibility_score for r in conflict.resolutions), default=None),
            "detected_at": conflict.detected_at.isoformat(),
        })

    unscheduled_records = [
        {
            "course_id": group.course_id,
            "students": ";".join(group.student_ids),
            "reason": group.reason,
            "content": ";".join(group.content_ids),
        }
        for group in result.unscheduled_groups
    ]

    # ============================================================================
    # OUTPUT GENERATION
    # ============================================================================

    if save_to_file:
        try:
            with pd.ExcelWriter(filename, engine='openpyxl') as writer:
                schedule_to_dataframe(result, config).to_excel(writer, sheet_name="Schedule", index=False)
                for c_type, records in sorted(excel_data.items()):
                    df = pd.DataFrame(records)
                    safe_sheet_name = c_type.replace('_', ' ').title()[:31]
                    df.to_excel(writer, sheet_name=safe_sheet_name, index=False)
                pd.DataFrame(
                    unscheduled_records, columns=["course_id", "students", "reason", "content"]
                ).to_excel(writer, sheet_name="Unscheduled", index=False)
            print(f"\nRaw conflicts saved to: {filename}")
        except Exception as e:
            print(f"\nError saving raw conflicts: {e}")

    if print_to_terminal:
        print("\n" + "=" * 70)
        print("--- RAW CONFLICTS ---")
        print("=" * 70)
        if not terminal_lines:
            print("No conflicts detected.")
        else:
            for line in terminal_lines:
                print(line)
        print(f"\nTotal conflicts: {len(terminal_lines)}")
        print("=" * 70)


def human_readable_conflict_report(result, config, output_file="conflict_report.txt"):
    """
    Generates a human-readable conflict report and writes it to a text file.

    Args:
        result: SchedulingRunResult returned by run_scheduler
        config: Configuration dictionary
        output_file: Output filename (default: "conflict_report.txt")

    Returns:
        tuple: (section_totals dict, grand_total int)
    """
    classes_by_id = {cls.id: cls for cls in result.scheduled_classes}

    def describe_class(class_id):
        cls = classes_by_id.get(class_id)
        if cls is None:
            return class_id
        slot = cls.time_slot
        return f"{class_id} ({day_name(slot.day_of_week, config)} {slot.start_time}-{slot.end_time})"

    by_type = collections.defaultdict(list)
    for conflict in result.conflicts:
        by_type[conflict.type].append(conflict)

    section_totals = {}
    grand_total = 0

    with open(output_file, "w", encoding="utf-8") as f:
        metrics = result.metrics
        f.write("SCHEDULING RUN SUMMARY\n")
        f.write("=" * 40 + "\n")
        f.write(f"Classes scheduled: {metrics.classes_scheduled}\n")
        f.write(f"Students placed: {metrics.students_processed}\n")
        f.write(f"Unscheduled groups: {metrics.unscheduled_groups}\n")
        f.write(f"Classes without teacher: {metrics.unassigned_classes}\n")
        f.write(f"Resource utilization: {metrics.resource_utilization:.1%}\n")
        f.write(f"Workload balance score: {metrics.workload_balance_score:.1f}\n")
        f.write("=" * 40 + "\n\n\n")

        for c_type in CONFLICT_TYPE_ORDER:
            conflicts = by_type.get(c_type)
            if not conflicts:
                continue

            title = c_type.replace('_', ' ').upper()
            f.write(f"{title} CONFLICTS\n")
            f.write("=" * 40 + "\n")
            for conflict in conflicts:
                entities = " vs ".join(describe_class(cid) for cid in conflict.entity_ids)
                f.write(f"[{conflict.severity.upper()}] {entities} | {conflict.description}\n")
                for resolution in conflict.resolutions:
                    f.write(
                        f"    -> {resolution.type}: {resolution.description} "
                        f"(feasibility {resolution.feasibility_score:.0%}, ~{resolution.estimated_implementation_time} min)\n"
                    )
            f.write(f"\nTotal {title} conflicts: {len(conflicts)}\n")
            f.write("=" * 40 + "\n\n\n")
            section_totals[c_type] = len(conflicts)
            grand_total += len(conflicts)

        if result.unscheduled_groups:
            f.write("UNSCHEDULED GROUPS\n")
            f.write("=" * 40 + "\n")
            for group in result.unscheduled_groups:
                f.write(f"{', '.join(group.student_ids)} | Reason: {group.reason}\n")
            f.write("=" * 40 + "\n\n\n")

        if result.unassigned_class_ids:
            f.write("CLASSES WITHOUT TEACHER\n")
            f.write("=" * 40 + "\n")
            for class_id in result.unassigned_class_ids:
                f.write(describe_class(class_id) + "\n")
            f.write("=" * 40 + "\n\n\n")

        # ============================================================
        # GRAND TOTAL
        # ============================================================
        f.write("=" * 40 + "\n")
        f.write(f"TOTAL CONFLICTS: {grand_total}\n")
        f.write("=" * 40 + "\n")

    print(f"Conflict report generated: {output_file}")
    print(f"Total conflicts: {grand_total}")

    return section_totals, grand_total
