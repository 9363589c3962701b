"""
Workload Balancer - CP-SAT teacher assignment

The greedy assigner commits to each class in turn. This pass instead looks at
all classes of the run at once and asks CP-SAT for an assignment that

    1. places as many classes as possible,
    2. keeps the heaviest teacher load as low as possible,
    3. prefers higher expertise / class-type / feedback scores,

under the same hard rules as the greedy assigner: no teacher is booked into
overlapping classes and availability windows are respected.
"""

import numpy as np
from ortools.sat.python import cp_model

from scheduling_system.teacher_assigner import (
    TeacherScoring,
    assign_teachers,
    is_teacher_eligible,
    preference_score,
)
from scheduling_system.time_windows import windows_overlap
from solver_callback import SolutionPrinterCallback
from utils import flush_print

ASSIGNMENT_REWARD = 10000
MAX_LOAD_PENALTY = 100
PREFERENCE_SCALE = 100


def calculate_balance_score(workloads):
    """100 for perfectly even workloads, dropping with the coefficient of variation."""
    if len(workloads) == 0:
        return 100.0

    loads = np.asarray(workloads, dtype=float)
    mean = loads.mean()
    normalized_std = loads.std() / mean if mean > 0 else 0.0
    return float(max(0.0, 100 - normalized_std * 100))


def balance_teacher_workload(scheduled_classes, teachers, scoring=None, existing_schedule=None,
                             time_limit=10, random_seed=None, deterministic_mode=True,
                             log_file_path=None, verbose=True):
    """
    Solve the teacher assignment for every unassigned class at once.

    Args:
        scheduled_classes: List of ScheduledClass; those with a teacher_id count as bookings
        teachers: Roster entries with a teacher_id
        scoring: TeacherScoring collaborator
        existing_schedule: Classes booked before this run
        time_limit: Solver time limit in seconds
        random_seed: Solver seed
        deterministic_mode: Single search worker when True
        log_file_path: Optional solution log file
        verbose: Print solver progress

    Returns:
        Dict class_id -> teacher_id, or None when the solver found no solution
    """
    scoring = scoring or TeacherScoring()
    booked = list(existing_schedule or []) + [c for c in scheduled_classes if c.teacher_id is not None]
    pending = [c for c in scheduled_classes if c.teacher_id is None]

    if not pending or not teachers:
        return {}

    model = cp_model.CpModel()

    # ============================================================================
    # DECISION VARIABLES: x[(c_idx, t_idx)] = teacher t teaches class c
    # ============================================================================
    assign = {}
    preference = {}
    for c_idx, scheduled_class in enumerate(pending):
        for t_idx, teacher in enumerate(teachers):
            if not is_teacher_eligible(teacher, scheduled_class, booked, scoring):
                continue
            assign[(c_idx, t_idx)] = model.NewBoolVar(f"assign_c{c_idx}_t{t_idx}")
            preference[(c_idx, t_idx)] = int(round(preference_score(teacher, scheduled_class, scoring) * PREFERENCE_SCALE))

    if not assign:
        return {}

    # Each class gets at most one teacher
    for c_idx in range(len(pending)):
        candidates = [var for (c, _), var in assign.items() if c == c_idx]
        if candidates:
            model.Add(sum(candidates) <= 1)

    # No teacher in two overlapping classes
    for c1 in range(len(pending)):
        for c2 in range(c1 + 1, len(pending)):
            if not windows_overlap(pending[c1].time_slot, pending[c2].time_slot):
                continue
            for t_idx in range(len(teachers)):
                if (c1, t_idx) in assign and (c2, t_idx) in assign:
                    model.Add(assign[(c1, t_idx)] + assign[(c2, t_idx)] <= 1)

    # ============================================================================
    # WORKLOAD: max_load >= existing bookings + new assignments, per teacher
    # ============================================================================
    max_possible_load = len(booked) + len(pending)
    max_load = model.NewIntVar(0, max_possible_load, "max_load")
    for t_idx, teacher in enumerate(teachers):
        base_load = sum(1 for cls in booked if cls.teacher_id == teacher.teacher_id)
        teacher_vars = [var for (_, t), var in assign.items() if t == t_idx]
        model.Add(max_load >= base_load + sum(teacher_vars))

    objective = (
        ASSIGNMENT_REWARD * sum(assign.values())
        - MAX_LOAD_PENALTY * max_load
        + sum(preference[key] * var for key, var in assign.items())
    )
    model.Maximize(objective)

    solver = cp_model.CpSolver()
    if random_seed is not None:
        solver.parameters.random_seed = random_seed
    solver.parameters.num_search_workers = 1 if deterministic_mode else 8
    if time_limit:
        solver.parameters.max_time_in_seconds = time_limit

    if verbose:
        flush_print(f"[Workload Balancer] {len(pending)} classes, {len(teachers)} teachers, {len(assign)} candidate pairs")

    solution_printer = SolutionPrinterCallback(objective, log_file_path=log_file_path, verbose=verbose)
    status = solver.Solve(model, solution_printer)

    if verbose:
        flush_print(f"[Workload Balancer] Status: {solver.StatusName(status)} after {solution_printer.solution_count()} solution(s)")

    if status not in [cp_model.OPTIMAL, cp_model.FEASIBLE]:
        return None

    assignments = {}
    for (c_idx, t_idx), var in assign.items():
        if solver.Value(var):
            assignments[pending[c_idx].id] = teachers[t_idx].teacher_id
    return assignments


def assign_teachers_balanced(scheduled_classes, teachers, constraints, scoring=None, existing_schedule=None,
                             time_limit=10, random_seed=None, deterministic_mode=True,
                             log_file_path=None, verbose=True):
    """
    Balanced counterpart of assign_teachers: fills teacher_id in place.

    Falls back to the greedy assigner when CP-SAT returns no solution.

    Returns:
        List of class ids left without a teacher
    """
    if constraints.max_concurrent_classes_per_teacher < 1:
        raise ValueError("max_concurrent_classes_per_teacher must be at least 1")

    assignments = balance_teacher_workload(
        scheduled_classes, teachers,
        scoring=scoring,
        existing_schedule=existing_schedule,
        time_limit=time_limit,
        random_seed=random_seed,
        deterministic_mode=deterministic_mode,
        log_file_path=log_file_path,
        verbose=verbose,
    )

    if assignments is None:
        if verbose:
            flush_print("[Workload Balancer] No solution found, falling back to greedy assignment")
        return assign_teachers(scheduled_classes, teachers, constraints, scoring, existing_schedule)

    unassigned = []
    for scheduled_class in scheduled_classes:
        if scheduled_class.teacher_id is not None:
            continue
        teacher_id = assignments.get(scheduled_class.id)
        if teacher_id is None:
            unassigned.append(scheduled_class.id)
        else:
            scheduled_class.teacher_id = teacher_id
    return unassigned
