"""Rule-based scoring stages.

Aggregation -> classification -> sub-scores and focus -> recovery ->
feedback. Every function here is pure.
"""

from .aggregation import aggregate_metrics, estimate_duration
from .classification import classify_session, is_specialized
from .feedback import generate_feedback, generate_insights, generate_strengths, generate_warnings
from .focus import calculate_athletic_focus
from .recovery import estimate_recovery
from .scores import (
    calculate_athletic_quality_score,
    calculate_intensity_score,
    calculate_position_relevance,
    calculate_work_capacity_score,
)
from .validation import DoseAssessment, assess_minimum_dose

__all__ = [
    "DoseAssessment",
    "aggregate_metrics",
    "assess_minimum_dose",
    "calculate_athletic_focus",
    "calculate_athletic_quality_score",
    "calculate_intensity_score",
    "calculate_position_relevance",
    "calculate_work_capacity_score",
    "classify_session",
    "estimate_duration",
    "estimate_recovery",
    "generate_feedback",
    "generate_insights",
    "generate_strengths",
    "generate_warnings",
    "is_specialized",
]
