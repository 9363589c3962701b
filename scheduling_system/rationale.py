"""
Rationale - Human-readable explanation of a scheduling decision

Kept apart from the numeric scoring so phrasing can change without touching
the decision logic.
"""

from scheduling_system.time_windows import start_hour


def generate_scheduling_rationale(group, content, time_slot):
    """
    Explain why a cohort got this content in this slot.

    Args:
        group: List of StudentProgress
        content: List of LearningContent
        time_slot: TimeSlot the class was placed in

    Returns:
        str: sentences joined with '. '
    """
    reasons = []

    if len(group) == 1:
        reasons.append("Individual session for personalized learning")
    else:
        avg_progress = sum(s.progress_percentage for s in group) / len(group)
        reasons.append(f"Group of {len(group)} students with similar progress (avg {avg_progress:.1f}%)")

    if content:
        titles = ", ".join(c.title for c in content)
        reasons.append(f"Covering next required content: {titles}")

    hour = start_hour(time_slot)
    if 9 <= hour < 12:
        reasons.append("Scheduled during peak learning hours")
    elif 14 <= hour < 17:
        reasons.append("Scheduled during optimal afternoon learning period")

    return ". ".join(reasons)
