"""Reduce a session's logged exercises into scalar totals."""

from typing import Optional, Sequence

from ..models.exercise import LoggedExercise
from ..models.report import SessionMetrics
from .common import round_half_up

# Effort assumed when nobody logged an RPE
NEUTRAL_RPE = 5.0


def calculate_total_volume(entries: Sequence[LoggedExercise]) -> int:
    """Total lifted volume in kg (reps x load over every set).

    A set without reps counts as one rep; a set without load adds nothing.
    """
    volume = 0.0
    for entry in entries:
        for record in entry.set_records:
            reps = record.reps or 1
            load = record.load_kg or 0
            volume += reps * load
    return int(round_half_up(volume))


def calculate_total_distance(entries: Sequence[LoggedExercise]) -> Optional[float]:
    """Total distance in km, or None when no set recorded any distance."""
    distance = 0.0
    for entry in entries:
        for record in entry.set_records:
            if record.distance_km:
                distance += record.distance_km
    if distance == 0:
        return None
    return round_half_up(distance, 3)


def calculate_avg_rpe(entries: Sequence[LoggedExercise]) -> float:
    """Mean RPE over exercises that logged one, rounded to 0.1."""
    rpes = [entry.rpe for entry in entries if entry.rpe is not None]
    if not rpes:
        return NEUTRAL_RPE
    return round_half_up(sum(rpes) / len(rpes), 1)


def count_completed_sets(entries: Sequence[LoggedExercise]) -> int:
    return sum(len(entry.set_records) for entry in entries)


def count_planned_sets(entries: Sequence[LoggedExercise]) -> int:
    return sum(entry.planned_sets or 0 for entry in entries)


def count_total_reps(entries: Sequence[LoggedExercise]) -> int:
    return sum(record.reps or 0 for entry in entries for record in entry.set_records)


def aggregate_metrics(entries: Sequence[LoggedExercise]) -> SessionMetrics:
    """Compute every session total for the entries."""
    return SessionMetrics(
        total_volume_kg=calculate_total_volume(entries),
        total_distance_km=calculate_total_distance(entries),
        avg_rpe=calculate_avg_rpe(entries),
        sets_completed=count_completed_sets(entries),
        sets_planned=count_planned_sets(entries),
        total_reps=count_total_reps(entries),
        exercise_count=len(entries),
    )


def estimate_duration(entries: Sequence[LoggedExercise], warmup_min: int = 0) -> int:
    """Estimate session length in minutes for workouts logged after the fact.

    Each set takes about 1.5 minutes including rest, and each exercise adds
    about 2 minutes of setup. Any non-empty session counts as at least
    10 minutes before the warm-up is added.

    Args:
        entries: Logged exercises
        warmup_min: Warm-up minutes to add on top

    Returns:
        Estimated duration in whole minutes
    """
    if not entries:
        return warmup_min or 0

    total_sets = count_completed_sets(entries)
    estimated = total_sets * 1.5 + len(entries) * 2
    return max(10, int(round_half_up(estimated))) + (warmup_min or 0)
