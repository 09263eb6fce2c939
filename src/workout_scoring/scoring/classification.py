"""Classify a session as single-category or mixed.

A session deliberately focused on conditioning or mobility should not be
scored or warned as if it were an incomplete strength session, so several
formulas downstream branch on this shape.
"""

from typing import Sequence

from ..models.exercise import ExerciseCategory, LoggedExercise
from ..models.report import Mixed, SessionShape, SingleCategory

# Single-category sessions that get their own scoring and no generic warnings
SPECIALIZED_CATEGORIES = frozenset({
    ExerciseCategory.CONDITIONING,
    ExerciseCategory.MOBILITY,
    ExerciseCategory.RECOVERY,
    ExerciseCategory.TECHNIQUE,
    ExerciseCategory.SPEED,
    ExerciseCategory.COD,
    ExerciseCategory.PLYOMETRICS,
})


def classify_session(entries: Sequence[LoggedExercise]) -> SessionShape:
    """Return SingleCategory when exactly one distinct category is present."""
    categories = {entry.category for entry in entries}
    if len(categories) == 1:
        return SingleCategory(next(iter(categories)))
    return Mixed(category_count=len(categories))


def is_specialized(shape: SessionShape) -> bool:
    """True for single-category sessions of a specialized category."""
    return isinstance(shape, SingleCategory) and shape.category in SPECIALIZED_CATEGORIES
