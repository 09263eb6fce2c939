"""Strengths, warnings and coach insight tokens.

All outputs are stable tokens for the presentation layer to localize,
never user-facing sentences.
"""

from typing import List, Optional, Sequence

from ..models.exercise import ExerciseCategory, LoggedExercise
from ..models.report import (
    Feedback,
    InsightTag,
    SessionMetrics,
    SessionShape,
    SingleCategory,
    StrengthTag,
    WarningTag,
)
from ..models.team import AthletePosition, PositionRole
from .classification import is_specialized

LOWER_BODY_KEYWORDS = ("squat", "deadlift", "lunge")
HIGH_FREQUENCY_SESSIONS = 3     # sessions logged in the trailing window
VOLUME_JUMP_PCT = 25
MAX_INSIGHTS = 3

# Fixed commentary for specialized single-category sessions
CATEGORY_INSIGHTS = {
    ExerciseCategory.MOBILITY: (InsightTag.MOBILITY_WORK, InsightTag.BALANCE_WITH_POWER),
    ExerciseCategory.RECOVERY: (InsightTag.RECOVERY_WORK, InsightTag.ESSENTIAL_FOR_PROGRESS),
    ExerciseCategory.TECHNIQUE: (InsightTag.TECHNIQUE_WORK, InsightTag.SKILL_DEVELOPMENT),
    ExerciseCategory.COD: (InsightTag.AGILITY_WORK, InsightTag.GAME_CHANGER_SKILL),
    ExerciseCategory.PLYOMETRICS: (InsightTag.EXPLOSIVE_WORK, InsightTag.ATHLETIC_POWER),
}


def generate_strengths(athletic: int, intensity: int, capacity: int) -> List[str]:
    """Positive highlights earned by the scores."""
    strengths = []
    if athletic >= 80:
        strengths.append(StrengthTag.ATHLETIC_FOCUS.value)
    if intensity >= 80:
        strengths.append(StrengthTag.HIGH_INTENSITY.value)
    if capacity >= 75:
        strengths.append(StrengthTag.GOOD_CAPACITY.value)
    if athletic >= 70 and intensity >= 70:
        strengths.append(StrengthTag.BALANCED.value)
    return strengths


def generate_warnings(
    entries: Sequence[LoggedExercise],
    shape: SessionShape,
    athletic: int,
    recent_session_count: int = 0,
) -> List[str]:
    """
    Risks and faults for the session.

    Quality warnings are skipped for specialized single-category sessions:
    a mobility day is not an incomplete leg day. The training frequency
    warning applies to every session.

    Args:
        entries: Logged exercises
        shape: Session classification
        athletic: Athletic quality score
        recent_session_count: Sessions the athlete logged in the trailing days
    """
    warnings = []

    if not is_specialized(shape):
        if athletic < 50:
            warnings.append(WarningTag.LOW_ATHLETIC_QUALITY.value)

        has_lower_body = any(entry.name_contains(*LOWER_BODY_KEYWORDS) for entry in entries)
        if not has_lower_body and len(entries) > 3:
            warnings.append(WarningTag.NO_LOWER_BODY.value)

    if recent_session_count >= HIGH_FREQUENCY_SESSIONS:
        warnings.append(WarningTag.HIGH_FREQUENCY.value)

    return warnings


def _athletic_insight(athletic: int) -> Optional[InsightTag]:
    if athletic >= 85:
        return InsightTag.EXCELLENT_ATHLETIC
    elif athletic >= 70:
        return InsightTag.GOOD_ATHLETIC
    elif athletic < 50:
        return InsightTag.IMPROVE_ATHLETIC
    return None


def _conditioning_insights(total_distance_km: Optional[float]) -> List[InsightTag]:
    distance = total_distance_km or 0
    if distance >= 5:
        volume = InsightTag.GOOD_CONDITIONING_WORK
    elif distance >= 3:
        volume = InsightTag.DECENT_CONDITIONING_WORK
    else:
        volume = InsightTag.KEEP_BUILDING_BASE
    return [volume, InsightTag.BALANCE_WITH_STRENGTH]


def _single_category_insights(
    category: ExerciseCategory,
    metrics: SessionMetrics,
    athletic: int,
    role: PositionRole,
) -> List[InsightTag]:
    if category == ExerciseCategory.CONDITIONING:
        return _conditioning_insights(metrics.total_distance_km)
    if category == ExerciseCategory.SPEED:
        insights = [InsightTag.SPEED_WORK]
        if role == PositionRole.SKILL:
            insights.append(InsightTag.PERFECT_FOR_POSITION)
        return insights
    if category in CATEGORY_INSIGHTS:
        return list(CATEGORY_INSIGHTS[category])

    # Strength-only sessions
    insight = _athletic_insight(athletic)
    return [insight] if insight else []


def _mixed_session_insights(
    athletic: int,
    position_score: int,
    role: PositionRole,
    volume_change_pct: Optional[float],
) -> List[InsightTag]:
    insights = []

    insight = _athletic_insight(athletic)
    if insight:
        insights.append(insight)

    if position_score >= 80:
        insights.append(InsightTag.POSITION_GOOD)
    elif position_score < 60:
        if role == PositionRole.SKILL:
            insights.append(InsightTag.NEED_EXPLOSIVE)
        elif role == PositionRole.LINE:
            insights.append(InsightTag.NEED_STRENGTH)

    if volume_change_pct is not None and volume_change_pct > VOLUME_JUMP_PCT:
        insights.append(InsightTag.VOLUME_JUMP)

    return insights


def generate_insights(
    shape: SessionShape,
    metrics: SessionMetrics,
    athletic: int,
    position_score: int,
    position: AthletePosition,
    volume_change_pct: Optional[float] = None,
) -> List[str]:
    """Ordered coach insight tokens, at most three."""
    role = AthletePosition(position).role

    if isinstance(shape, SingleCategory):
        insights = _single_category_insights(shape.category, metrics, athletic, role)
    else:
        insights = _mixed_session_insights(athletic, position_score, role, volume_change_pct)

    if not insights:
        insights = [InsightTag.KEEP_GOING]

    return [tag.value for tag in insights[:MAX_INSIGHTS]]


def generate_feedback(
    entries: Sequence[LoggedExercise],
    shape: SessionShape,
    metrics: SessionMetrics,
    *,
    intensity: int,
    work_capacity: int,
    athletic: int,
    position_score: int,
    position: AthletePosition,
    recent_session_count: int = 0,
    volume_change_pct: Optional[float] = None,
) -> Feedback:
    """Build every qualitative output for one session."""
    return Feedback(
        strengths=tuple(generate_strengths(athletic, intensity, work_capacity)),
        warnings=tuple(generate_warnings(entries, shape, athletic, recent_session_count)),
        insights=tuple(generate_insights(
            shape, metrics, athletic, position_score, position, volume_change_pct,
        )),
    )
