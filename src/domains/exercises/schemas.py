"""Exercise schemas for request/response validation."""
from pydantic import BaseModel, Field, field_validator

from src.core.schemas import RecordResponse
from src.domains.exercises.models import Difficulty, ExerciseCategory


def _clean_name(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Exercise name cannot be blank")
    return value


def _clean_muscle_groups(value: list[str]) -> list[str]:
    groups = [g.strip() for g in value if g and g.strip()]
    if not groups:
        raise ValueError("At least one muscle group is required")
    return groups


class ExerciseCreate(BaseModel):
    """Create exercise request."""

    name: str = Field(min_length=1, max_length=255)
    category: ExerciseCategory
    muscle_groups: list[str] = Field(min_length=1)
    equipment: str | None = Field(None, max_length=255)
    difficulty: Difficulty = Difficulty.BEGINNER
    instructions: str | None = None
    notes: str | None = None

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        return _clean_name(value)

    @field_validator("muscle_groups")
    @classmethod
    def _validate_muscle_groups(cls, value: list[str]) -> list[str]:
        return _clean_muscle_groups(value)


class ExerciseUpdate(BaseModel):
    """Update exercise request."""

    name: str | None = Field(None, min_length=1, max_length=255)
    category: ExerciseCategory | None = None
    muscle_groups: list[str] | None = None
    equipment: str | None = Field(None, max_length=255)
    difficulty: Difficulty | None = None
    instructions: str | None = None
    notes: str | None = None

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str | None) -> str | None:
        if value is None:
            return value
        return _clean_name(value)

    @field_validator("muscle_groups")
    @classmethod
    def _validate_muscle_groups(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return value
        return _clean_muscle_groups(value)


class ExerciseResponse(RecordResponse):
    """Exercise response."""

    name: str
    category: ExerciseCategory
    muscle_groups: list[str] = Field(default_factory=list)
    equipment: str | None = None
    difficulty: Difficulty = Difficulty.BEGINNER
    instructions: str | None = None
    notes: str | None = None
