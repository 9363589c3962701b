import pytest

from data_models import SchedulingConstraints, SchedulingScoringWeights


@pytest.fixture
def constraints():
    return SchedulingConstraints()


@pytest.fixture
def weights():
    return SchedulingScoringWeights()


@pytest.fixture
def base_config():
    return {
        "SCHEDULING_DAYS": ["SUNDAY", "MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY"],
        "MAX_STUDENTS_PER_CLASS": 9,
        "MAX_CONCURRENT_CLASSES_PER_TEACHER": 3,
        "MAX_ALTERNATIVES": 2,
        "INCLUDE_RATIONALE": True,
        "TEACHER_ASSIGNMENT_STRATEGY": "greedy",
        "BALANCER_TIME_LIMIT_SECONDS": 5,
        "BALANCER_RANDOM_SEED": 1,
        "DETERMINISTIC_MODE": True,
    }
