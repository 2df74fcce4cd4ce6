"""Workout models for the workout tracker."""
import enum
import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.config.database import Base
from src.core.models import TimestampMixin, UUIDMixin


class WorkoutStatus(str, enum.Enum):
    """Workout lifecycle. Transitions only planned -> completed."""

    PLANNED = "planned"
    COMPLETED = "completed"


class Workout(Base, UUIDMixin, TimestampMixin):
    """A dated workout made of exercises and their sets."""

    __tablename__ = "workouts"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[WorkoutStatus] = mapped_column(
        Enum(WorkoutStatus, name="workout_status_enum", values_callable=lambda x: [e.value for e in x]),
        default=WorkoutStatus.PLANNED,
        nullable=False,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    duration: Mapped[int | None] = mapped_column(Integer, nullable=True)  # minutes
    calories_burned: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Relationships
    exercises: Mapped[list["WorkoutExercise"]] = relationship(
        "WorkoutExercise",
        back_populates="workout",
        order_by="WorkoutExercise.order",
        lazy="selectin",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Workout {self.name}>"


class WorkoutExercise(Base, UUIDMixin):
    """An exercise performed within a workout.

    exercise_id is a plain reference (it may name a record that only exists
    on a client); name and category are snapshotted at write time.
    """

    __tablename__ = "workout_exercises"

    workout_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("workouts.id", ondelete="CASCADE"),
        nullable=False,
    )
    exercise_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    exercise_name: Mapped[str] = mapped_column(String(255), nullable=False)
    exercise_category: Mapped[str | None] = mapped_column(String(20), nullable=True)
    order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Relationships
    workout: Mapped["Workout"] = relationship(
        "Workout",
        back_populates="exercises",
    )
    sets: Mapped[list["WorkoutSet"]] = relationship(
        "WorkoutSet",
        back_populates="workout_exercise",
        order_by="WorkoutSet.set_number",
        lazy="selectin",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<WorkoutExercise workout={self.workout_id} exercise={self.exercise_name}>"


class WorkoutSet(Base, UUIDMixin):
    """A single set. set_number is 1..N within its workout exercise."""

    __tablename__ = "workout_sets"

    workout_exercise_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("workout_exercises.id", ondelete="CASCADE"),
        nullable=False,
    )
    set_number: Mapped[int] = mapped_column(Integer, nullable=False)
    reps: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    weight: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    duration: Mapped[int | None] = mapped_column(Integer, nullable=True)  # minutes
    distance: Mapped[float | None] = mapped_column(Float, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    workout_exercise: Mapped["WorkoutExercise"] = relationship(
        "WorkoutExercise",
        back_populates="sets",
    )

    def __repr__(self) -> str:
        return f"<WorkoutSet {self.set_number} reps={self.reps} weight={self.weight}>"
