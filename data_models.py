# data_models.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Set

@dataclass
class TimeWindow:
    """A weekly wall-clock window (day_of_week: 0-6, Sunday=0)"""
    day_of_week: int
    start_time: str  # HH:MM
    end_time: str    # HH:MM

@dataclass
class StudentPerformanceMetrics:
    best_performing_times: List[TimeWindow] = field(default_factory=list)

@dataclass
class StudentProgress:
    student_id: str
    course_id: str
    current_unit: int
    current_lesson: int
    progress_percentage: float = 0.0  # 0-100
    completed_content: Set[str] = field(default_factory=set)
    unlearned_content: Set[str] = field(default_factory=set)
    skill_assessments: Dict[str, float] = field(default_factory=dict)  # skill name -> 0-10
    preferred_times: List[TimeWindow] = field(default_factory=list)
    performance_metrics: StudentPerformanceMetrics = field(default_factory=StudentPerformanceMetrics)

@dataclass
class LearningContent:
    id: str
    title: str
    unit_number: int
    lesson_number: int
    difficulty_level: float  # 0-10
    estimated_duration: int  # minutes
    prerequisites: Set[str] = field(default_factory=set)
    is_required: bool = False
    course_id: str = None

@dataclass
class SlotCapacity:
    max_students: int
    available_spots: int

@dataclass
class TimeSlot:
    id: str
    day_of_week: int
    start_time: str
    end_time: str
    duration: int  # minutes
    capacity: SlotCapacity
    location: str = None
    is_available: bool = True

@dataclass
class Teacher:
    teacher_id: str
    name: str
    availability: List[TimeWindow] = field(default_factory=list)  # empty = any time
    qualified_course_ids: Set[str] = field(default_factory=set)
    preferred_class_types: Set[str] = field(default_factory=set)  # "individual" / "group"
    feedback_rating: float = None  # 0-5

@dataclass
class ScheduledClass:
    id: str
    course_id: str
    student_ids: List[str]
    time_slot: TimeSlot
    content: List[LearningContent]
    class_type: str  # "individual" | "group"
    teacher_id: Optional[str] = None
    status: str = "scheduled"  # "scheduled" | "confirmed" | "cancelled"
    confidence_score: float = 0.0
    rationale: str = ""
    alternatives: List["ScheduledClass"] = field(default_factory=list)

@dataclass
class ResolutionImpact:
    affected_students: int
    affected_teachers: int
    schedule_disruption: int
    resource_utilization: float
    student_satisfaction: float

@dataclass
class ResolutionStep:
    order: int
    description: str
    type: str  # notification | database_update | schedule_change | resource_allocation | approval_required
    parameters: Dict[str, object] = field(default_factory=dict)
    estimated_duration: int = 0  # minutes
    dependencies: List[str] = field(default_factory=list)

@dataclass
class ConflictResolution:
    id: str
    type: str  # "reschedule" | "split_class" | "reassign_teacher"
    description: str
    impact: ResolutionImpact
    feasibility_score: float
    estimated_implementation_time: int  # minutes
    required_approvals: List[str] = field(default_factory=list)
    steps: List[ResolutionStep] = field(default_factory=list)

@dataclass
class SchedulingConflict:
    id: str
    type: str  # time_overlap | capacity_exceeded | teacher_unavailable | resource_conflict
    severity: str  # low | medium | high | critical
    entity_ids: List[str]
    description: str
    resolutions: List[ConflictResolution]
    detected_at: datetime

@dataclass
class SchedulingConstraints:
    max_students_per_class: int = 9
    max_concurrent_classes_per_teacher: int = 3

    @classmethod
    def from_config(cls, config):
        return cls(
            max_students_per_class=int(config.get("MAX_STUDENTS_PER_CLASS", 9)),
            max_concurrent_classes_per_teacher=int(config.get("MAX_CONCURRENT_CLASSES_PER_TEACHER", 3)),
        )

@dataclass
class SchedulingScoringWeights:
    content_progression: float = 0.3
    student_availability: float = 0.25
    class_size_optimization: float = 0.1
    schedule_continuity: float = 0.03

    @classmethod
    def from_config(cls, config):
        weights = config.get("SCORING_WEIGHTS", {})
        defaults = cls()
        return cls(
            content_progression=float(weights.get("content_progression", defaults.content_progression)),
            student_availability=float(weights.get("student_availability", defaults.student_availability)),
            class_size_optimization=float(weights.get("class_size_optimization", defaults.class_size_optimization)),
            schedule_continuity=float(weights.get("schedule_continuity", defaults.schedule_continuity)),
        )

@dataclass
class UnscheduledGroup:
    """A cohort the run could not place, kept so the caller can retry or escalate"""
    student_ids: List[str]
    course_id: str
    reason: str  # "no_common_content" | "no_eligible_slot"
    content_ids: List[str] = field(default_factory=list)

@dataclass
class SchedulingMetrics:
    processing_time_ms: float = 0.0
    students_processed: int = 0
    classes_scheduled: int = 0
    unscheduled_groups: int = 0
    unassigned_classes: int = 0
    conflicts_detected: int = 0
    conflicts_with_resolutions: int = 0
    resource_utilization: float = 0.0
    workload_balance_score: float = 100.0

@dataclass
class SchedulingRunResult:
    scheduled_classes: List[ScheduledClass] = field(default_factory=list)
    unscheduled_groups: List[UnscheduledGroup] = field(default_factory=list)
    unassigned_class_ids: List[str] = field(default_factory=list)
    conflicts: List[SchedulingConflict] = field(default_factory=list)
    metrics: SchedulingMetrics = field(default_factory=SchedulingMetrics)
