"""Input to a report generator."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from .exercise import LoggedExercise
from .team import AthletePosition


@dataclass
class ReportRequest:
    """One finished session plus the athlete context needed to score it."""
    entries: List[LoggedExercise]
    duration_min: int
    athlete_id: str
    position: AthletePosition
    athlete_name: str = "Athlete"
    body_weight_kg: Optional[float] = None
    height_cm: Optional[float] = None
    title: str = "Workout"
    notes: Optional[str] = None
    # Reference time for history lookups, defaults to now
    logged_at: Optional[datetime] = field(default=None)

    def __post_init__(self):
        self.entries = [
            entry if isinstance(entry, LoggedExercise) else LoggedExercise.from_dict(entry)
            for entry in self.entries or []
        ]
        self.position = AthletePosition(self.position)
        self.duration_min = int(self.duration_min or 0)
