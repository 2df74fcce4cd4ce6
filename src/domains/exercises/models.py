"""Exercise models for the workout tracker."""
import enum

from sqlalchemy import JSON, Enum, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.config.database import Base
from src.core.models import TimestampMixin, UUIDMixin


class ExerciseCategory(str, enum.Enum):
    """Broad exercise categories."""

    STRENGTH = "strength"
    CARDIO = "cardio"
    FLEXIBILITY = "flexibility"
    BALANCE = "balance"
    SPORTS = "sports"
    OTHER = "other"


class Difficulty(str, enum.Enum):
    """Exercise difficulty levels."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


# Muscle groups accepted by the importers. Exercises created through the
# API may use any non-empty label.
KNOWN_MUSCLE_GROUPS = [
    "chest", "back", "shoulders", "biceps", "triceps", "forearms",
    "abs", "obliques", "lower back", "glutes", "quadriceps", "hamstrings",
    "calves", "hip flexors", "adductors", "abductors", "neck", "full body",
]


class Exercise(Base, UUIDMixin, TimestampMixin):
    """Exercise model representing a single exercise."""

    __tablename__ = "exercises"

    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    category: Mapped[ExerciseCategory] = mapped_column(
        Enum(ExerciseCategory, name="exercise_category_enum", values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    muscle_groups: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    equipment: Mapped[str | None] = mapped_column(String(255), nullable=True)
    difficulty: Mapped[Difficulty] = mapped_column(
        Enum(Difficulty, name="difficulty_enum", values_callable=lambda x: [e.value for e in x]),
        default=Difficulty.BEGINNER,
        nullable=False,
    )
    instructions: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Exercise {self.name}>"
