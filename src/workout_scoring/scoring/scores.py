"""Sub-score calculators.

Four independent, pure functions that map session totals (and for athletic
quality, the session shape) to a 0-100 integer. Every score starts from
zero: no points are granted before there is evidence for them.
"""

from typing import NamedTuple, Optional, Sequence, Tuple

from ..models.exercise import ExerciseCategory, LoggedExercise
from ..models.report import SessionMetrics, SessionShape, SingleCategory
from ..models.team import AthletePosition, PositionRole
from .common import clamp, to_score

# Exercise name fragments that mark single-joint accessory work
ISOLATION_KEYWORDS = ("curl", "extension", "raise", "fly", "flye")
ISOLATION_PENALTY = 15

VARIETY_BONUS = 20
VARIETY_MIN_CATEGORIES = 3

EXPLOSIVE_CATEGORIES = (
    ExerciseCategory.PLYOMETRICS,
    ExerciseCategory.SPEED,
    ExerciseCategory.COD,
)
# Hybrid positions only count jumps and sprints as explosive work
HYBRID_EXPLOSIVE_CATEGORIES = (
    ExerciseCategory.PLYOMETRICS,
    ExerciseCategory.SPEED,
)


def count_in(entries: Sequence[LoggedExercise], *categories: ExerciseCategory) -> int:
    """Number of entries whose category is one of categories."""
    return sum(1 for entry in entries if entry.category in categories)


def capped(count: int, points_each: int, cap: int) -> int:
    return min(cap, count * points_each)


# ============================================================================
# Intensity
# ============================================================================

def calculate_intensity_score(metrics: SessionMetrics) -> int:
    """
    Calculate intensity score (0-100).

    70% from perceived effort, 30% from completed sets.
    RPE 4 or below contributes nothing and RPE 10 maxes the effort term;
    10 completed sets max the work term. A session without exercises
    scores 0: the neutral RPE default is not evidence of effort.
    """
    if metrics.exercise_count == 0:
        return 0
    rpe_component = clamp(((metrics.avg_rpe - 4) / 6) * 100)
    work_component = clamp((metrics.sets_completed / 10) * 100)
    return to_score(rpe_component * 0.7 + work_component * 0.3)


# ============================================================================
# Work capacity
# ============================================================================

def duration_component(duration_min: float) -> int:
    """Step function of session length."""
    if duration_min < 10:
        return 5
    elif duration_min < 20:
        return 20
    elif duration_min < 30:
        return 40
    elif duration_min < 45:
        return 60
    elif duration_min < 60:
        return 80
    return 100


def calculate_work_capacity_score(metrics: SessionMetrics, duration_min: float) -> int:
    """
    Calculate work capacity score (0-100).

    Duration dominates (60%), then lifted volume (30%, 10 000 kg maxes it)
    and completed sets (10%, 15 sets max it).
    """
    volume_component = clamp((metrics.total_volume_kg / 10000) * 100)
    set_component = clamp((metrics.sets_completed / 15) * 100)
    return to_score(
        duration_component(duration_min) * 0.6
        + volume_component * 0.3
        + set_component * 0.1
    )


# ============================================================================
# Athletic quality
# ============================================================================

class CategoryBase(NamedTuple):
    """Fixed scoring for a single-category session."""
    base: int
    bonuses: Tuple[Tuple[float, int], ...]  # (threshold, points), cumulative
    by_distance: bool = False               # thresholds in km instead of exercise count


SINGLE_CATEGORY_BASES = {
    ExerciseCategory.CONDITIONING: CategoryBase(65, ((3, 10), (5, 10)), by_distance=True),
    ExerciseCategory.MOBILITY: CategoryBase(50, ((4, 10), (6, 10))),
    ExerciseCategory.RECOVERY: CategoryBase(40, ((3, 10),)),
    ExerciseCategory.TECHNIQUE: CategoryBase(55, ((4, 10),)),
    ExerciseCategory.SPEED: CategoryBase(70, ((3, 15),)),
    ExerciseCategory.COD: CategoryBase(65, ((4, 15),)),
    ExerciseCategory.PLYOMETRICS: CategoryBase(75, ((3, 15),)),
}


def count_isolation_exercises(entries: Sequence[LoggedExercise]) -> int:
    # TODO: name sniffing flags core work like "leg raise"; needs an explicit
    # isolation flag on the exercise catalog entry.
    return sum(1 for entry in entries if entry.name_contains(*ISOLATION_KEYWORDS))


def _single_category_score(
    rule: CategoryBase,
    exercise_count: int,
    total_distance_km: Optional[float],
) -> int:
    measure = (total_distance_km or 0) if rule.by_distance else exercise_count
    score = rule.base
    for threshold, points in rule.bonuses:
        if measure >= threshold:
            score += points
    return to_score(score)


def _mixed_session_score(entries: Sequence[LoggedExercise]) -> int:
    score = 0
    score += capped(count_in(entries, ExerciseCategory.STRENGTH), 15, 50)
    score += capped(count_in(entries, ExerciseCategory.PLYOMETRICS), 20, 40)
    score += capped(count_in(entries, ExerciseCategory.SPEED, ExerciseCategory.COD), 15, 30)
    score += capped(count_in(entries, ExerciseCategory.MOBILITY), 8, 15)
    score += capped(count_in(entries, ExerciseCategory.TECHNIQUE), 8, 15)

    score -= ISOLATION_PENALTY * count_isolation_exercises(entries)

    if len({entry.category for entry in entries}) >= VARIETY_MIN_CATEGORIES:
        score += VARIETY_BONUS

    return to_score(score)


def calculate_athletic_quality_score(
    entries: Sequence[LoggedExercise],
    shape: SessionShape,
    metrics: SessionMetrics,
) -> int:
    """
    Calculate athletic quality score (0-100).

    Specialized single-category sessions (conditioning, speed, agility,
    plyometrics, ...) are athletic by nature and get a fixed base plus
    volume bonuses. Mixed and strength-only sessions earn points per
    athletic category, lose points for isolation work and gain a bonus for
    variety.
    """
    if isinstance(shape, SingleCategory):
        rule = SINGLE_CATEGORY_BASES.get(shape.category)
        if rule is not None:
            return _single_category_score(rule, len(entries), metrics.total_distance_km)
    return _mixed_session_score(entries)


# ============================================================================
# Position relevance
# ============================================================================

def calculate_position_relevance(
    entries: Sequence[LoggedExercise],
    position: AthletePosition,
) -> int:
    """
    Calculate position relevance score (0-100).

    Squat, deadlift and bench are valuable for every role. On top of that:
    - Skill positions: explosive work first, strength second
    - Line positions: strength first, conditioning second
    - Hybrid positions: strength and explosive work equally
    """
    score = 0

    if any(entry.name_contains("squat") for entry in entries):
        score += 15
    if any(entry.name_contains("deadlift") for entry in entries):
        score += 15
    if any(entry.name_contains("bench") for entry in entries):
        score += 10

    strength_count = count_in(entries, ExerciseCategory.STRENGTH)
    role = AthletePosition(position).role

    if role == PositionRole.SKILL:
        score += capped(count_in(entries, *EXPLOSIVE_CATEGORIES), 15, 50)
        score += capped(strength_count, 10, 30)
    elif role == PositionRole.LINE:
        score += capped(strength_count, 20, 60)
        score += capped(count_in(entries, ExerciseCategory.CONDITIONING), 15, 30)
    elif role == PositionRole.HYBRID:
        score += capped(strength_count, 15, 40)
        score += capped(count_in(entries, *HYBRID_EXPLOSIVE_CATEGORIES), 15, 40)

    return to_score(score)
