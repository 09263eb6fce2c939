"""Data models for the workout scoring engine."""

from .exercise import ExerciseCategory, LoggedExercise, SetRecord
from .remote import RemoteExercise, RemoteReportRequest, RemoteReportResponse
from .report import (
    Feedback,
    FocusBreakdown,
    InsightTag,
    Mixed,
    RecoveryDemand,
    RecoveryEstimate,
    ReportSource,
    SessionMetrics,
    SessionShape,
    SingleCategory,
    StrengthTag,
    WarningTag,
    WorkoutReport,
)
from .request import ReportRequest
from .team import AthletePosition, PositionRole, SeasonPhase, TeamLevel

__all__ = [
    "AthletePosition",
    "ExerciseCategory",
    "Feedback",
    "FocusBreakdown",
    "InsightTag",
    "LoggedExercise",
    "Mixed",
    "PositionRole",
    "RecoveryDemand",
    "RecoveryEstimate",
    "RemoteExercise",
    "RemoteReportRequest",
    "RemoteReportResponse",
    "ReportSource",
    "ReportRequest",
    "SeasonPhase",
    "SessionMetrics",
    "SessionShape",
    "SetRecord",
    "SingleCategory",
    "StrengthTag",
    "TeamLevel",
    "WarningTag",
    "WorkoutReport",
]
