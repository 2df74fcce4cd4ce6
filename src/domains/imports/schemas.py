"""Import schemas: normalized records produced by the parsers and the import response."""
from datetime import datetime
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, Field

from src.domains.exercises.models import ExerciseCategory

SupportedFileType = Literal["csv", "json", "xml"]
ImportDataType = Literal["exercise", "workout"]

T = TypeVar("T")


class ImportedExercise(BaseModel):
    """An exercise read from an import file."""

    name: str
    category: ExerciseCategory
    muscle_groups: list[str]
    notes: str | None = None


class ImportedSet(BaseModel):
    """A set read from an import file."""

    set_number: int
    reps: int | None = None
    weight: float | None = None
    duration: int | None = None
    distance: float | None = None
    notes: str | None = None


class ImportedWorkoutExercise(BaseModel):
    """An exercise entry of an imported workout, referenced by name."""

    exercise_name: str
    order: int = 0
    sets: list[ImportedSet] = Field(default_factory=list)


class ImportedWorkout(BaseModel):
    """A workout read from an import file."""

    name: str
    date: datetime
    notes: str | None = None
    exercises: list[ImportedWorkoutExercise] = Field(default_factory=list)


class ParseResult(BaseModel, Generic[T]):
    """Outcome of parsing a file: valid records plus per-record errors."""

    success: bool
    data: list[T] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)


class ImportSummary(BaseModel):
    """Counts reported after an import."""

    total: int
    imported: int
    skipped: int = 0
    errors: int = 0


class ImportResponse(BaseModel):
    """Import endpoint response."""

    success: bool = True
    summary: ImportSummary
    imported: list[dict[str, Any]] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    errors: list[str] | None = None
