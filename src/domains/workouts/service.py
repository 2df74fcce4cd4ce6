"""Workout service with database operations."""
import uuid
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.core.models import parse_uuid, utcnow
from src.domains.workouts.models import (
    Workout,
    WorkoutExercise,
    WorkoutSet,
    WorkoutStatus,
)
from src.domains.workouts.schemas import WorkoutExerciseInput, number_sets


class WorkoutService:
    """Service for handling workout operations.

    Nested exercises and sets are written as a whole: passing ``exercises``
    replaces the previous list.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    def _build_exercises(self, inputs: list[WorkoutExerciseInput]) -> list[WorkoutExercise]:
        exercises = []
        for index, item in enumerate(inputs):
            exercises.append(
                WorkoutExercise(
                    exercise_id=item.exercise_id,
                    exercise_name=item.exercise_name.strip(),
                    exercise_category=item.exercise_category.value if item.exercise_category else None,
                    order=item.order if item.order is not None else index,
                    sets=[
                        WorkoutSet(
                            set_number=s.set_number,
                            reps=s.reps,
                            weight=s.weight,
                            completed=s.completed,
                            duration=s.duration,
                            distance=s.distance,
                            notes=s.notes,
                        )
                        for s in number_sets(item.sets)
                    ],
                )
            )
        return exercises

    async def get_workout_by_id(self, workout_id: str | uuid.UUID) -> Workout | None:
        """Get a workout with exercises and sets. Malformed ids resolve to None."""
        parsed = parse_uuid(workout_id)
        if parsed is None:
            return None
        result = await self.db.execute(
            select(Workout)
            .where(Workout.id == parsed)
            .options(selectinload(Workout.exercises).selectinload(WorkoutExercise.sets))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_workouts(
        self,
        status: WorkoutStatus | None = None,
    ) -> list[Workout]:
        """List workouts, most recent date first."""
        query = select(Workout).options(
            selectinload(Workout.exercises).selectinload(WorkoutExercise.sets)
        )

        if status:
            query = query.where(Workout.status == status)

        query = query.order_by(Workout.date.desc(), Workout.created_at.desc())
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def create_workout(
        self,
        name: str,
        date: datetime,
        status: WorkoutStatus = WorkoutStatus.PLANNED,
        notes: str | None = None,
        duration: int | None = None,
        calories_burned: int | None = None,
        exercises: list[WorkoutExerciseInput] | None = None,
    ) -> Workout:
        """Create a workout together with its exercises and sets."""
        workout = Workout(
            name=name,
            date=date,
            status=status,
            notes=notes,
            duration=duration,
            calories_burned=calories_burned,
            exercises=self._build_exercises(exercises or []),
        )
        self.db.add(workout)
        await self.db.commit()
        return await self.get_workout_by_id(workout.id)

    async def update_workout(
        self,
        workout: Workout,
        name: str | None = None,
        date: datetime | None = None,
        status: WorkoutStatus | None = None,
        notes: str | None = None,
        duration: int | None = None,
        calories_burned: int | None = None,
        exercises: list[WorkoutExerciseInput] | None = None,
    ) -> Workout:
        """Update a workout. Callers enforce the planned-only edit rule."""
        if name is not None:
            workout.name = name
        if date is not None:
            workout.date = date
        if status is not None:
            workout.status = status
        if notes is not None:
            workout.notes = notes
        if duration is not None:
            workout.duration = duration
        if calories_burned is not None:
            workout.calories_burned = calories_burned
        if exercises is not None:
            workout.exercises = self._build_exercises(exercises)
        workout.updated_at = utcnow()

        await self.db.commit()
        return await self.get_workout_by_id(workout.id)

    async def delete_workout(self, workout: Workout) -> None:
        """Delete a workout; exercises and sets cascade."""
        await self.db.delete(workout)
        await self.db.commit()
