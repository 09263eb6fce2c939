"""Wire models for the remote scorer.

The request is what gets rendered into the scoring prompt; the response
is the JSON object the model must return. Both use camelCase on the wire.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt

from .team import AthletePosition, SeasonPhase, TeamLevel


def to_camel(string: str) -> str:
    """Convert snake_case to camelCase."""
    components = string.split("_")
    return components[0] + "".join(x.title() for x in components[1:])


StrictNumber = Union[StrictInt, StrictFloat]


class RemoteExercise(BaseModel):
    """One exercise as described to the remote scorer."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    category: str
    sets_summary: str = Field(default="", description="Human-readable set breakdown")
    rpe: Optional[float] = None
    notes: Optional[str] = None

    def to_prompt_line(self) -> str:
        line = f"- {self.name} [{self.category}]: {self.sets_summary}"
        if self.rpe is not None:
            line += f" (RPE {self.rpe:g})"
        if self.notes:
            line += f' - Note: "{self.notes}"'
        return line


class RemoteReportRequest(BaseModel):
    """Session context sent for remote scoring."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "athleteName": "Jordan",
                "position": "WR",
                "seasonPhase": "off-season",
                "teamLevel": "semi-pro",
                "exercises": [
                    {"name": "Back Squat", "category": "Strength", "setsSummary": "4 sets: 5 reps @ 120kg"},
                ],
                "totalSets": 4,
                "totalReps": 20,
                "totalVolumeKg": 2400,
                "totalDistanceKm": 0.0,
                "avgRPE": 7.5,
                "durationMin": 45,
            }
        },
    )

    athlete_name: str = Field(default="Athlete")
    position: AthletePosition
    body_weight_kg: Optional[float] = Field(default=None, ge=0)
    height_cm: Optional[float] = Field(default=None, ge=0)
    season_phase: SeasonPhase = SeasonPhase.OFF_SEASON
    team_level: TeamLevel = TeamLevel.SEMI_PRO
    title: str = Field(default="Workout")
    exercises: List[RemoteExercise] = Field(default_factory=list)
    total_sets: int = 0
    sets_planned: int = 0
    total_reps: int = 0
    total_volume_kg: float = 0
    total_distance_km: float = 0
    avg_rpe: float = Field(default=5.0, alias="avgRPE")
    duration_min: int = 0
    notes: Optional[str] = None


class RemoteReportResponse(BaseModel):
    """
    Report JSON returned by the remote scorer.

    The four sub-scores are required and must be JSON numbers; a reply
    missing any of them is rejected. Everything else is optional and
    filled in locally when absent.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        # NaN and Infinity parse from JSON but cannot be scored
        allow_inf_nan=False,
    )

    session_valid: Optional[bool] = None

    intensity_score: StrictNumber
    work_capacity_score: StrictNumber
    athletic_quality_score: StrictNumber
    position_relevance_score: StrictNumber

    total_volume: Optional[float] = None
    total_distance: Optional[float] = None
    duration: Optional[float] = None
    avg_rpe: Optional[float] = Field(default=None, alias="avgRPE")
    sets_completed: Optional[int] = None
    sets_planned: Optional[int] = None

    session_primary_intent: Optional[str] = None
    session_secondary_intent: Optional[str] = None

    power_work: Optional[float] = None
    strength_work: Optional[float] = None
    speed_work: Optional[float] = None

    strengths: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)

    recovery_demand: Optional[str] = None
    recommended_rest_hours: Optional[float] = None

    coach_insights: Optional[str] = None
