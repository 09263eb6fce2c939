"""
Rule-based workout report engine.

Composes the scoring stages into a `WorkoutReport`:

    aggregate -> classify -> scores + focus -> recovery -> feedback -> report

Everything is a pure function of the logged entries, the session length,
the athlete's position and an already-fetched history snapshot, so
identical inputs always give identical reports.
"""

import logging
from datetime import datetime
from typing import Any, Mapping, Optional, Sequence, Union

from .history import EMPTY_HISTORY, HistoryProvider, HistorySnapshot, compare_trends, fetch_history
from .models.exercise import LoggedExercise
from .models.report import ReportSource, WorkoutReport
from .models.team import AthletePosition
from .scoring.aggregation import aggregate_metrics
from .scoring.classification import classify_session
from .scoring.feedback import generate_feedback
from .scoring.focus import calculate_athletic_focus
from .scoring.recovery import estimate_recovery
from .scoring.scores import (
    calculate_athletic_quality_score,
    calculate_intensity_score,
    calculate_position_relevance,
    calculate_work_capacity_score,
)

logger = logging.getLogger(__name__)

EntryLike = Union[LoggedExercise, Mapping[str, Any]]


def coerce_entries(entries: Optional[Sequence[EntryLike]]) -> list:
    """Accept LoggedExercise objects or their dict form."""
    return [
        entry if isinstance(entry, LoggedExercise) else LoggedExercise.from_dict(entry)
        for entry in entries or []
    ]


def build_report(
    entries: Sequence[EntryLike],
    duration_min: int,
    position: Union[AthletePosition, str],
    history: HistorySnapshot = EMPTY_HISTORY,
) -> WorkoutReport:
    """
    Assemble a report from the session and a fetched history snapshot.

    Args:
        entries: Logged exercises (objects or dicts)
        duration_min: Session length in minutes
        position: Athlete position
        history: Prior-period and recent sessions

    Returns:
        The finished, immutable report
    """
    entries = coerce_entries(entries)
    position = AthletePosition(position)
    duration_min = int(duration_min or 0)

    metrics = aggregate_metrics(entries)
    shape = classify_session(entries)

    intensity = calculate_intensity_score(metrics)
    work_capacity = calculate_work_capacity_score(metrics, duration_min)
    athletic = calculate_athletic_quality_score(entries, shape, metrics)
    position_score = calculate_position_relevance(entries, position)
    focus = calculate_athletic_focus(entries)

    volume_change, intensity_change = compare_trends(
        metrics.total_volume_kg, metrics.avg_rpe, history.prior_sessions,
    )

    recovery = estimate_recovery(intensity, metrics.total_volume_kg, duration_min)

    feedback = generate_feedback(
        entries,
        shape,
        metrics,
        intensity=intensity,
        work_capacity=work_capacity,
        athletic=athletic,
        position_score=position_score,
        position=position,
        recent_session_count=history.recent_session_count,
        volume_change_pct=volume_change,
    )

    logger.debug(
        f"Scored session: shape={shape}, intensity={intensity}, "
        f"work_capacity={work_capacity}, athletic={athletic}, position={position_score}, "
        f"recovery={recovery.demand.value} ({recovery.blended_score:.1f})"
    )

    return WorkoutReport(
        session_valid=True,
        intensity_score=intensity,
        work_capacity_score=work_capacity,
        athletic_quality_score=athletic,
        position_relevance_score=position_score,
        total_volume_kg=metrics.total_volume_kg,
        total_distance_km=metrics.total_distance_km,
        duration_min=duration_min,
        avg_rpe=metrics.avg_rpe,
        sets_completed=metrics.sets_completed,
        sets_planned=metrics.sets_planned,
        power_work=focus.power,
        strength_work=focus.strength,
        speed_work=focus.speed,
        strengths=feedback.strengths,
        warnings=feedback.warnings,
        volume_change_pct=volume_change,
        intensity_change_pct=intensity_change,
        recovery_demand=recovery.demand,
        recommended_rest_hours=recovery.rest_hours,
        coach_insight=feedback.coach_insight,
        coach_insight_tokens=feedback.insights,
        source=ReportSource.LOCAL,
    )


def analyze(
    entries: Sequence[EntryLike],
    duration_min: int,
    athlete_id: str,
    position: Union[AthletePosition, str],
    history: Optional[HistoryProvider] = None,
    now: Optional[datetime] = None,
) -> WorkoutReport:
    """
    Analyze a completed session and generate its report.

    Args:
        entries: Logged exercises
        duration_min: Session length in minutes
        athlete_id: Key for the history lookup
        position: Athlete position
        history: Optional synchronous history provider
        now: Reference time for the history windows (defaults to now)

    Returns:
        WorkoutReport for the session
    """
    snapshot = fetch_history(history, athlete_id, now or datetime.now())
    return build_report(entries, duration_min, position, snapshot)


class ReportEngine:
    """Rule-based engine bound to one history provider."""

    def __init__(self, history: Optional[HistoryProvider] = None) -> None:
        self.history = history

    def analyze(
        self,
        entries: Sequence[EntryLike],
        duration_min: int,
        athlete_id: str,
        position: Union[AthletePosition, str],
        now: Optional[datetime] = None,
    ) -> WorkoutReport:
        return analyze(entries, duration_min, athlete_id, position, self.history, now)
