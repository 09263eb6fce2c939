"""Athletic focus breakdown."""

from typing import Sequence

from ..models.exercise import ExerciseCategory, LoggedExercise
from ..models.report import FocusBreakdown
from .common import round_half_up
from .scores import count_in


def _percentage(count: int, total: int) -> int:
    return int(round_half_up(count / total * 100))


def calculate_athletic_focus(entries: Sequence[LoggedExercise]) -> FocusBreakdown:
    """Share of exercises that train power, strength and speed.

    Other categories count toward the total only, so the three
    percentages can sum to less than 100.
    """
    total = len(entries)
    if total == 0:
        return FocusBreakdown()

    return FocusBreakdown(
        power=_percentage(count_in(entries, ExerciseCategory.PLYOMETRICS), total),
        strength=_percentage(count_in(entries, ExerciseCategory.STRENGTH), total),
        speed=_percentage(count_in(entries, ExerciseCategory.SPEED, ExerciseCategory.COD), total),
    )
