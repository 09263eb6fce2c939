"""Minimum effective dose check.

A session below these thresholds produces no training effect and is
reported as insufficient by the remote scorer.
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from ..models.exercise import ExerciseCategory, LoggedExercise

MIN_EXERCISES = 2
MIN_STRENGTH_SETS = 4
MIN_STRENGTH_REPS = 12
MIN_SPRINT_DISTANCE_KM = 0.150
MIN_SPRINT_REPS = 5
MIN_CONDITIONING_MIN = 6.0
HIGH_RPE = 7
MIN_SETS_AT_HIGH_RPE = 3

STRENGTH_POWER_CATEGORIES = (ExerciseCategory.STRENGTH, ExerciseCategory.PLYOMETRICS)


@dataclass(frozen=True)
class DoseAssessment:
    """Result of the minimum-dose check."""
    valid: bool
    reasons: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {"valid": self.valid, "reasons": list(self.reasons)}


def _of(entries: Sequence[LoggedExercise], *categories: ExerciseCategory) -> List[LoggedExercise]:
    return [entry for entry in entries if entry.category in categories]


def _strength_reasons(entries: Sequence[LoggedExercise]) -> List[str]:
    work = _of(entries, *STRENGTH_POWER_CATEGORIES)
    if not work:
        return []
    reasons = []
    sets = sum(len(entry.set_records) for entry in work)
    reps = sum(record.reps or 0 for entry in work for record in entry.set_records)
    if sets < MIN_STRENGTH_SETS:
        reasons.append(f"strength/power work has {sets} sets (minimum {MIN_STRENGTH_SETS})")
    if reps < MIN_STRENGTH_REPS:
        reasons.append(f"strength/power work has {reps} reps (minimum {MIN_STRENGTH_REPS})")
    return reasons


def _sprint_reasons(entries: Sequence[LoggedExercise]) -> List[str]:
    sprints = _of(entries, ExerciseCategory.SPEED)
    if not sprints:
        return []
    records = [record for entry in sprints for record in entry.set_records]
    distance_km = sum(record.distance_km or 0 for record in records)
    # A set without a rep count is one sprint
    reps = sum(record.reps or 1 for record in records)
    if distance_km < MIN_SPRINT_DISTANCE_KM and reps < MIN_SPRINT_REPS:
        return [
            f"sprint volume is {distance_km * 1000:.0f}m over {reps} reps "
            f"(minimum {MIN_SPRINT_DISTANCE_KM * 1000:.0f}m or {MIN_SPRINT_REPS} reps)"
        ]
    return []


def _conditioning_reasons(entries: Sequence[LoggedExercise], duration_min: float) -> List[str]:
    conditioning = _of(entries, ExerciseCategory.CONDITIONING)
    if not conditioning:
        return []
    logged_sec = sum(
        record.duration_sec or 0 for entry in conditioning for record in entry.set_records
    )
    # Without logged set durations the whole session counts as conditioning time
    minutes = logged_sec / 60 if logged_sec else duration_min
    if minutes < MIN_CONDITIONING_MIN:
        return [f"conditioning lasted {minutes:.1f} min (minimum {MIN_CONDITIONING_MIN:.0f})"]
    return []


def assess_minimum_dose(entries: Sequence[LoggedExercise], duration_min: float) -> DoseAssessment:
    """
    Check a session against the minimum effective dose.

    Rules:
    - at least 2 exercises
    - strength/power work: at least 4 sets and 12 reps
    - sprint work: at least 150 m or 5 reps
    - conditioning: at least 6 minutes
    - RPE above 7 on fewer than 3 sets is not a real session

    Args:
        entries: Logged exercises
        duration_min: Session length in minutes

    Returns:
        DoseAssessment listing every rule the session failed
    """
    reasons: List[str] = []

    if len(entries) < MIN_EXERCISES:
        reasons.append(f"{len(entries)} exercises logged (minimum {MIN_EXERCISES})")

    reasons.extend(_strength_reasons(entries))
    reasons.extend(_sprint_reasons(entries))
    reasons.extend(_conditioning_reasons(entries, duration_min))

    rpes = [entry.rpe for entry in entries if entry.rpe is not None]
    total_sets = sum(len(entry.set_records) for entry in entries)
    if rpes and sum(rpes) / len(rpes) > HIGH_RPE and total_sets < MIN_SETS_AT_HIGH_RPE:
        reasons.append(
            f"RPE above {HIGH_RPE} reported on only {total_sets} sets "
            f"(minimum {MIN_SETS_AT_HIGH_RPE})"
        )

    return DoseAssessment(valid=not reasons, reasons=tuple(reasons))
