"""Workout schemas for request/response validation."""
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from src.core.schemas import IdentifiedResponse, RecordResponse, ensure_utc
from src.domains.exercises.models import ExerciseCategory
from src.domains.workouts.models import WorkoutStatus


# Set schemas

class SetInput(BaseModel):
    """A set as submitted by a client.

    set_number is advisory: sets are always renumbered 1..N on write.
    """

    set_number: int | None = Field(None, ge=1)
    reps: int = Field(default=0, ge=0)
    weight: float = Field(default=0.0, ge=0)
    completed: bool = False
    duration: int | None = Field(None, ge=0)
    distance: float | None = Field(None, ge=0)
    notes: str | None = None


class SetResponse(IdentifiedResponse):
    """Workout set response."""

    set_number: int
    reps: int = 0
    weight: float = 0.0
    completed: bool = False
    duration: int | None = None
    distance: float | None = None
    notes: str | None = None


def number_sets(sets: list[SetInput]) -> list[SetInput]:
    """Order sets by their requested number (falling back to position) and renumber 1..N."""
    ordered = sorted(
        enumerate(sets),
        key=lambda pair: (pair[1].set_number if pair[1].set_number is not None else pair[0] + 1, pair[0]),
    )
    return [
        item.model_copy(update={"set_number": number})
        for number, (_, item) in enumerate(ordered, start=1)
    ]


# Workout exercise schemas

class WorkoutExerciseInput(BaseModel):
    """Input for adding an exercise to a workout."""

    exercise_id: str | None = None
    exercise_name: str = Field(min_length=1, max_length=255)
    exercise_category: ExerciseCategory | None = None
    order: int | None = Field(None, ge=0)
    sets: list[SetInput] = Field(default_factory=list)


class WorkoutExerciseResponse(IdentifiedResponse):
    """Workout exercise response with its sets."""

    exercise_id: str | None = None
    exercise_name: str
    exercise_category: ExerciseCategory | None = None
    order: int = 0
    sets: list[SetResponse] = Field(default_factory=list)


# Workout schemas

def _clean_name(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Workout name cannot be blank")
    return value


class WorkoutCreate(BaseModel):
    """Create workout request."""

    name: str = Field(min_length=1, max_length=255)
    date: datetime
    status: WorkoutStatus = WorkoutStatus.PLANNED
    notes: str | None = None
    duration: int | None = Field(None, ge=0)
    calories_burned: int | None = Field(None, ge=0)
    exercises: list[WorkoutExerciseInput] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        return _clean_name(value)


class WorkoutUpdate(BaseModel):
    """Update workout request. Omitted fields are unchanged."""

    name: str | None = Field(None, min_length=1, max_length=255)
    date: datetime | None = None
    status: WorkoutStatus | None = None
    notes: str | None = None
    duration: int | None = Field(None, ge=0)
    calories_burned: int | None = Field(None, ge=0)
    exercises: list[WorkoutExerciseInput] | None = None

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str | None) -> str | None:
        if value is None:
            return value
        return _clean_name(value)


class WorkoutResponse(RecordResponse):
    """Workout response including nested exercises and sets."""

    name: str
    date: datetime
    status: WorkoutStatus = WorkoutStatus.PLANNED
    notes: str | None = None
    duration: int | None = None
    calories_burned: int | None = None
    exercises: list[WorkoutExerciseResponse] = Field(default_factory=list)

    @field_validator("date")
    @classmethod
    def _normalize_date(cls, value: datetime) -> datetime:
        return ensure_utc(value)
