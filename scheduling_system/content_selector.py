"""
Content Selector - What a cohort should learn next

A content item qualifies for a cohort only when every member still has it in
their unlearned set. Qualifying items are ranked by prerequisite readiness,
difficulty fit, required-ness and session length.
"""

DEFAULT_SKILL_LEVEL = 5.0

PREREQUISITES_MET_POINTS = 50
DIFFICULTY_ALIGNMENT_POINTS = 30
REQUIRED_CONTENT_POINTS = 20
DURATION_POINTS = 10


def student_average_skill(student):
    """Mean of a student's skill assessments, 5 when nothing has been assessed."""
    skills = list(student.skill_assessments.values())
    if not skills:
        return DEFAULT_SKILL_LEVEL
    return sum(skills) / len(skills)


def group_average_skill(group):
    """Mean over the group of each student's mean skill level."""
    if not group:
        return DEFAULT_SKILL_LEVEL
    return sum(student_average_skill(s) for s in group) / len(group)


def prerequisites_met(content, student):
    return all(prereq in student.completed_content for prereq in content.prerequisites)


def duration_score(duration):
    """Prefer 45-90 minute sessions, tolerate 30-120."""
    if 45 <= duration <= 90:
        return 1.0
    if 30 <= duration <= 120:
        return 0.7
    return 0.3


def find_common_unlearned_content(group, content_catalog):
    """Catalog items present in every member's unlearned set, catalog order kept."""
    if not group:
        return []
    return [
        content for content in content_catalog
        if all(content.id in student.unlearned_content for student in group)
    ]


def calculate_content_score(content, group):
    """
    Suitability of one content item for a cohort.

    Args:
        content: LearningContent candidate
        group: List of StudentProgress

    Returns:
        float score, higher is better (max 110)
    """
    score = 0.0

    if all(prerequisites_met(content, student) for student in group):
        score += PREREQUISITES_MET_POINTS

    avg_skill = group_average_skill(group)
    difficulty_alignment = 1 - abs(content.difficulty_level - avg_skill) / 10
    score += difficulty_alignment * DIFFICULTY_ALIGNMENT_POINTS

    if content.is_required:
        score += REQUIRED_CONTENT_POINTS

    score += duration_score(content.estimated_duration) * DURATION_POINTS

    return score


def select_next_content(group, content_catalog, max_items=None):
    """
    Rank the common unlearned content of a cohort.

    Args:
        group: List of StudentProgress
        content_catalog: List of LearningContent
        max_items: Optional cap on how many ranked items are returned

    Returns:
        List of LearningContent, best first. Empty when the cohort shares no gap.
    """
    candidates = find_common_unlearned_content(group, content_catalog)

    # Stable sort: equal scores keep catalog order
    ranked = sorted(candidates, key=lambda c: calculate_content_score(c, group), reverse=True)

    if max_items is not None:
        ranked = ranked[:max_items]
    return ranked
