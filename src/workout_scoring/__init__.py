"""Workout scoring engine for American football strength and conditioning.

Turns a logged training session into a `WorkoutReport`: four 0-100
sub-scores, an athletic focus breakdown, recovery guidance, and feedback
tokens. Reports come from the rule-based engine or, optionally, from a
remote text-generation scorer with the local engine as fallback.
"""

from .engine import ReportEngine, analyze, build_report
from .exceptions import ErrorCode, ValidationError, WorkoutScoringError
from .generators import (
    FallbackReportGenerator,
    LocalReportGenerator,
    RemoteReportGenerator,
    ReportGenerator,
    ReportOutcome,
)
from .history import HistoryProvider, InMemoryHistoryProvider, SessionSummary
from .models import (
    AthletePosition,
    ExerciseCategory,
    LoggedExercise,
    RecoveryDemand,
    ReportRequest,
    SetRecord,
    WorkoutReport,
)
from .remote_scorer import RemoteFailure, RemoteScorer, RemoteScoreResult
from .scoring.aggregation import estimate_duration

__version__ = "0.1.0"

__all__ = [
    "AthletePosition",
    "ErrorCode",
    "ExerciseCategory",
    "FallbackReportGenerator",
    "HistoryProvider",
    "InMemoryHistoryProvider",
    "LocalReportGenerator",
    "LoggedExercise",
    "RecoveryDemand",
    "RemoteFailure",
    "RemoteReportGenerator",
    "RemoteScoreResult",
    "RemoteScorer",
    "ReportEngine",
    "ReportGenerator",
    "ReportOutcome",
    "ReportRequest",
    "SessionSummary",
    "SetRecord",
    "ValidationError",
    "WorkoutReport",
    "WorkoutScoringError",
    "analyze",
    "build_report",
    "estimate_duration",
]
