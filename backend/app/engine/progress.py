# app/engine/progress.py
"""
Pure progress bookkeeping for a workout: no I/O, no clock.

Everything here works only from per-exercise set counts, so sets logged out
of visual order (going back to an earlier exercise for an extra set) never
confuse the pointer.
"""
from __future__ import annotations
from collections import Counter
from typing import Iterable, Sequence

from app.engine.types import ExerciseGroup, RoutineStep, SessionSummary, SetRecord


def ordered_steps(steps: Iterable[RoutineStep]) -> tuple[RoutineStep, ...]:
    return tuple(sorted(steps, key=lambda s: s.order_index))


def tally_sets(sets: Iterable[SetRecord]) -> Counter:
    """Logged set count per exercise id."""
    return Counter(s.exercise_id for s in sets)


def next_set_number(exercise_id: int, sets: Iterable[SetRecord]) -> int:
    return tally_sets(sets)[exercise_id] + 1


def resume_point(steps: Sequence[RoutineStep], sets: Iterable[SetRecord]) -> tuple[int, int]:
    """
    Return ``(exercise_index, set_number)`` to continue from.

    The index is the first step (in ``order_index`` order) still short of its
    target sets, and the set number is that exercise's own count + 1. When every
    step is done the index is ``len(steps)`` and the set number is 1.
    """
    counts = tally_sets(sets)
    for index, step in enumerate(ordered_steps(steps)):
        logged = counts[step.exercise_id]
        if logged < step.target_sets:
            return index, logged + 1
    return len(steps), 1


def unfinished_steps(steps: Sequence[RoutineStep], sets: Iterable[SetRecord]) -> list[RoutineStep]:
    counts = tally_sets(sets)
    return [step for step in steps if counts[step.exercise_id] < step.target_sets]


def all_targets_met(steps: Sequence[RoutineStep], sets: Iterable[SetRecord]) -> bool:
    # An empty routine (custom workout) never completes on its own
    return bool(steps) and not unfinished_steps(steps, sets)


def summarize_sets(steps: Sequence[RoutineStep], sets: Iterable[SetRecord]) -> SessionSummary:
    """Totals for the session details view: volume, reps and average weight."""
    names = {step.exercise_id: step.exercise_name for step in steps}
    groups: dict[int, ExerciseGroup] = {}
    total_reps = 0
    total_volume = 0.0
    weights: list[float] = []
    set_count = 0

    for s in sets:
        set_count += 1
        group = groups.get(s.exercise_id)
        if group is None:
            group = groups[s.exercise_id] = ExerciseGroup(
                exercise_id=s.exercise_id, exercise_name=names.get(s.exercise_id)
            )
        group.sets.append(s)
        reps = s.reps or 0
        volume = (s.weight or 0) * reps
        group.total_reps += reps
        group.volume += volume
        total_reps += reps
        total_volume += volume
        if s.weight:
            weights.append(s.weight)

    for group in groups.values():
        group.sets.sort(key=lambda s: s.set_number)

    return SessionSummary(
        groups=list(groups.values()),
        set_count=set_count,
        total_reps=total_reps,
        total_volume=total_volume,
        average_weight=sum(weights) / len(weights) if weights else None,
    )
