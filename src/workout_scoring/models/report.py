"""Workout report data models.

Intermediate values produced by each scoring stage, and the immutable
`WorkoutReport` they are assembled into.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from .exercise import ExerciseCategory


class RecoveryDemand(str, Enum):
    """Expected rest needed before comparable-intensity training."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    VERY_HIGH = "very-high"
    INSUFFICIENT = "insufficient"  # Session below minimum effective dose


class ReportSource(str, Enum):
    """Which engine produced a report."""
    LOCAL = "local"
    REMOTE = "remote"


class StrengthTag(str, Enum):
    ATHLETIC_FOCUS = "athletic-focus"
    HIGH_INTENSITY = "high-intensity"
    GOOD_CAPACITY = "good-capacity"
    BALANCED = "balanced"


class WarningTag(str, Enum):
    LOW_ATHLETIC_QUALITY = "low-athletic-quality"
    NO_LOWER_BODY = "no-lower-body"
    HIGH_FREQUENCY = "high-frequency"


class InsightTag(str, Enum):
    """Coach insight tokens, localized by the presentation layer."""
    # Conditioning
    GOOD_CONDITIONING_WORK = "good-conditioning-work"
    DECENT_CONDITIONING_WORK = "decent-conditioning-work"
    KEEP_BUILDING_BASE = "keep-building-base"
    BALANCE_WITH_STRENGTH = "balance-with-strength"
    # Mobility / recovery / technique
    MOBILITY_WORK = "mobility-work"
    BALANCE_WITH_POWER = "balance-with-power"
    RECOVERY_WORK = "recovery-work"
    ESSENTIAL_FOR_PROGRESS = "essential-for-progress"
    TECHNIQUE_WORK = "technique-work"
    SKILL_DEVELOPMENT = "skill-development"
    # Speed / agility / power
    SPEED_WORK = "speed-work"
    PERFECT_FOR_POSITION = "perfect-for-position"
    AGILITY_WORK = "agility-work"
    GAME_CHANGER_SKILL = "game-changer-skill"
    EXPLOSIVE_WORK = "explosive-work"
    ATHLETIC_POWER = "athletic-power"
    # Athletic quality
    EXCELLENT_ATHLETIC = "excellent-athletic"
    GOOD_ATHLETIC = "good-athletic"
    IMPROVE_ATHLETIC = "improve-athletic"
    # Position fit
    POSITION_GOOD = "position-good"
    NEED_EXPLOSIVE = "need-explosive"
    NEED_STRENGTH = "need-strength"
    # Progress
    VOLUME_JUMP = "volume-jump"
    KEEP_GOING = "keep-going"


@dataclass(frozen=True)
class SessionMetrics:
    """Scalar totals reduced from a session's logged exercises."""
    total_volume_kg: int = 0
    total_distance_km: Optional[float] = None  # None unless some set logged distance
    avg_rpe: float = 5.0
    sets_completed: int = 0
    sets_planned: int = 0
    total_reps: int = 0
    exercise_count: int = 0


# ============================================================================
# Session shape (tagged variant)
# ============================================================================

@dataclass(frozen=True)
class SingleCategory:
    """Every exercise in the session shares one category."""
    category: ExerciseCategory

    @property
    def primary_category(self) -> Optional[ExerciseCategory]:
        return self.category


@dataclass(frozen=True)
class Mixed:
    """Zero or several distinct categories."""
    category_count: int = 0

    @property
    def primary_category(self) -> Optional[ExerciseCategory]:
        return None


SessionShape = Union[SingleCategory, Mixed]


@dataclass(frozen=True)
class FocusBreakdown:
    """Percentage of exercises per athletic quality (need not total 100)."""
    power: int = 0
    strength: int = 0
    speed: int = 0


@dataclass(frozen=True)
class RecoveryEstimate:
    """Recovery tier and rest recommendation."""
    demand: RecoveryDemand
    rest_hours: int
    blended_score: float


@dataclass(frozen=True)
class Feedback:
    """Qualitative output of the feedback generator."""
    strengths: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()
    insights: Tuple[str, ...] = ()

    @property
    def coach_insight(self) -> str:
        return " ".join(self.insights)


@dataclass(frozen=True)
class WorkoutReport:
    """
    Structured performance report for one analyzed session.

    Created once per analysis and never mutated afterwards; presentation
    reads it and history keeps a summary of it for future trend lookups.
    """
    session_valid: bool

    # Sub-scores (0-100)
    intensity_score: int
    work_capacity_score: int
    athletic_quality_score: int
    position_relevance_score: int

    # Breakdown
    total_volume_kg: int
    total_distance_km: Optional[float]
    duration_min: int
    avg_rpe: float
    sets_completed: int
    sets_planned: int

    # Athletic focus (percentages)
    power_work: int
    strength_work: int
    speed_work: int

    # Highlights
    strengths: Tuple[str, ...]
    warnings: Tuple[str, ...]

    # Progress vs. the prior period, None without comparable history
    volume_change_pct: Optional[float]
    intensity_change_pct: Optional[float]

    # Recovery
    recovery_demand: RecoveryDemand
    recommended_rest_hours: int

    coach_insight: str
    coach_insight_tokens: Tuple[str, ...] = ()

    source: ReportSource = ReportSource.LOCAL
    session_primary_intent: Optional[str] = None
    session_secondary_intent: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "strengths", tuple(self.strengths))
        object.__setattr__(self, "warnings", tuple(self.warnings))
        object.__setattr__(self, "coach_insight_tokens", tuple(self.coach_insight_tokens))

    @property
    def scores(self) -> Dict[str, int]:
        return {
            "intensity": self.intensity_score,
            "work_capacity": self.work_capacity_score,
            "athletic_quality": self.athletic_quality_score,
            "position_relevance": self.position_relevance_score,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "session_valid": self.session_valid,
            "intensity_score": self.intensity_score,
            "work_capacity_score": self.work_capacity_score,
            "athletic_quality_score": self.athletic_quality_score,
            "position_relevance_score": self.position_relevance_score,
            "total_volume_kg": self.total_volume_kg,
            "total_distance_km": self.total_distance_km,
            "duration_min": self.duration_min,
            "avg_rpe": self.avg_rpe,
            "sets_completed": self.sets_completed,
            "sets_planned": self.sets_planned,
            "power_work": self.power_work,
            "strength_work": self.strength_work,
            "speed_work": self.speed_work,
            "strengths": list(self.strengths),
            "warnings": list(self.warnings),
            "volume_change_pct": self.volume_change_pct,
            "intensity_change_pct": self.intensity_change_pct,
            "recovery_demand": self.recovery_demand.value,
            "recommended_rest_hours": self.recommended_rest_hours,
            "coach_insight": self.coach_insight,
            "coach_insight_tokens": list(self.coach_insight_tokens),
            "source": self.source.value,
            "session_primary_intent": self.session_primary_intent,
            "session_secondary_intent": self.session_secondary_intent,
        }
