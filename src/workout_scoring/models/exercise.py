"""Logged exercise data models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..exceptions import SessionValidationError


class ExerciseCategory(str, Enum):
    """Training categories an exercise can belong to."""
    STRENGTH = "Strength"
    PLYOMETRICS = "Plyometrics"
    SPEED = "Speed"
    COD = "COD"                    # Change of direction
    CONDITIONING = "Conditioning"
    MOBILITY = "Mobility"
    RECOVERY = "Recovery"
    TECHNIQUE = "Technique"

    @classmethod
    def parse(cls, value: Any) -> "ExerciseCategory":
        """Coerce a string or enum into a category."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise SessionValidationError(
                f"Unknown exercise category: {value!r}",
                field="category",
            )


def _first(data: Dict[str, Any], *keys: str) -> Any:
    """Return the first key present in data (front-end payloads use several spellings)."""
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def _check_non_negative(name: str, value: Optional[float]) -> None:
    if value is not None and value < 0:
        raise SessionValidationError(f"{name} must be >= 0, got {value}", field=name)


@dataclass(frozen=True)
class SetRecord:
    """
    One completed set.

    Every field is optional: a lift logs reps and load, a sprint logs
    distance, a hold logs duration.
    """
    reps: Optional[int] = None
    load_kg: Optional[float] = None
    duration_sec: Optional[float] = None
    distance_km: Optional[float] = None

    def __post_init__(self):
        _check_non_negative("reps", self.reps)
        _check_non_negative("load_kg", self.load_kg)
        _check_non_negative("duration_sec", self.duration_sec)
        _check_non_negative("distance_km", self.distance_km)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SetRecord":
        """Create from a dict with snake_case or front-end camelCase keys."""
        return cls(
            reps=_first(data, "reps"),
            load_kg=_first(data, "load_kg", "loadKg", "kg"),
            duration_sec=_first(data, "duration_sec", "durationSec"),
            distance_km=_first(data, "distance_km", "distanceKm", "distance"),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "reps": self.reps,
            "load_kg": self.load_kg,
            "duration_sec": self.duration_sec,
            "distance_km": self.distance_km,
        }

    def summary(self) -> str:
        """Short human-readable description, e.g. '10 reps @ 80kg'."""
        parts = []
        if self.reps:
            parts.append(f"{self.reps} reps")
        if self.load_kg:
            parts.append(f"{self.load_kg:g}kg")
        if self.duration_sec:
            parts.append(f"{self.duration_sec:g}sec")
        if self.distance_km:
            parts.append(f"{self.distance_km * 1000:.0f}m")
        return " @ ".join(parts)


@dataclass(frozen=True)
class LoggedExercise:
    """One exercise instance within a logged session."""
    name: str
    category: ExerciseCategory
    set_records: List[SetRecord] = field(default_factory=list)
    planned_sets: int = 0
    rpe: Optional[float] = None  # 1-10, athlete reported
    notes: Optional[str] = None

    def __post_init__(self):
        # frozen dataclass: coerce via object.__setattr__
        object.__setattr__(self, "category", ExerciseCategory.parse(self.category))
        object.__setattr__(self, "set_records", list(self.set_records or []))
        if self.planned_sets is None:
            object.__setattr__(self, "planned_sets", 0)
        _check_non_negative("planned_sets", self.planned_sets)
        if self.rpe is not None and not 1 <= self.rpe <= 10:
            raise SessionValidationError(
                f"rpe must be between 1 and 10, got {self.rpe}",
                field="rpe",
            )

    @property
    def lowered_name(self) -> str:
        return (self.name or "").lower()

    def name_contains(self, *keywords: str) -> bool:
        """Case-insensitive substring match against the exercise name."""
        name = self.lowered_name
        return any(keyword in name for keyword in keywords)

    def sets_summary(self) -> str:
        """Describe the logged sets, falling back to the planned count."""
        if self.set_records:
            details = ", ".join(s.summary() for s in self.set_records)
            return f"{len(self.set_records)} sets: {details}"
        return f"{self.planned_sets} sets planned, none logged"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LoggedExercise":
        """Create from a dict with snake_case or front-end camelCase keys."""
        raw_sets = _first(data, "set_records", "setRecords", "setData") or []
        return cls(
            name=data.get("name", ""),
            category=data.get("category"),
            set_records=[
                s if isinstance(s, SetRecord) else SetRecord.from_dict(s)
                for s in raw_sets
            ],
            planned_sets=_first(data, "planned_sets", "plannedSets", "sets") or 0,
            rpe=data.get("rpe"),
            notes=data.get("notes"),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "category": self.category.value,
            "set_records": [s.to_dict() for s in self.set_records],
            "planned_sets": self.planned_sets,
            "rpe": self.rpe,
            "notes": self.notes,
        }
