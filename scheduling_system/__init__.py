"""
Scheduling System Module

Stateless building blocks of a content-based scheduling run. Every function
works on an explicit in-memory snapshot; the only mutable value is the
run-owned SlotInventory that is threaded through the grouping loop.

Architecture:
    - time_windows.py: HH:MM parsing and the shared overlap predicate
    - progress_grouper.py: Cohorts of students on the same unit/lesson
    - content_selector.py: Common unlearned content, ranked for a cohort
    - slot_inventory.py: Working copy of the slot pool, consumed per class
    - slot_scorer.py: Slot eligibility, weighted slot score, best-slot pick
    - class_builder.py: Confidence score and ScheduledClass construction
    - rationale.py: Human-readable explanation of a scheduling decision
    - teacher_assigner.py: Greedy teacher assignment with pluggable scoring
    - workload_balancer.py: Optional CP-SAT teacher assignment pass
    - conflict_detector.py: Post-hoc conflicts with resolution candidates
"""

__version__ = "1.0.0"
