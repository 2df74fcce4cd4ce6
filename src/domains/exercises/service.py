"""Exercise service with database operations."""
import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.models import parse_uuid
from src.domains.exercises.models import Difficulty, Exercise, ExerciseCategory


class ExerciseService:
    """Service for handling exercise operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_exercise_by_id(self, exercise_id: str | uuid.UUID) -> Exercise | None:
        """Get an exercise by ID. Malformed identifiers resolve to None."""
        parsed = parse_uuid(exercise_id)
        if parsed is None:
            return None
        result = await self.db.execute(
            select(Exercise).where(Exercise.id == parsed)
        )
        return result.scalar_one_or_none()

    async def get_exercise_by_name(self, name: str) -> Exercise | None:
        """Case-insensitive lookup by exact name."""
        result = await self.db.execute(
            select(Exercise).where(func.lower(Exercise.name) == name.strip().lower())
        )
        return result.scalars().first()

    async def list_exercises(
        self,
        category: ExerciseCategory | None = None,
        search: str | None = None,
    ) -> list[Exercise]:
        """List exercises ordered by name."""
        query = select(Exercise)

        if category:
            query = query.where(Exercise.category == category)

        if search:
            query = query.where(Exercise.name.ilike(f"%{search}%"))

        query = query.order_by(Exercise.name.asc())
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def create_exercise(
        self,
        name: str,
        category: ExerciseCategory,
        muscle_groups: list[str],
        equipment: str | None = None,
        difficulty: Difficulty = Difficulty.BEGINNER,
        instructions: str | None = None,
        notes: str | None = None,
    ) -> Exercise:
        """Create an exercise."""
        exercise = Exercise(
            name=name,
            category=category,
            muscle_groups=muscle_groups,
            equipment=equipment,
            difficulty=difficulty,
            instructions=instructions,
            notes=notes,
        )
        self.db.add(exercise)
        await self.db.commit()
        await self.db.refresh(exercise)
        return exercise

    async def update_exercise(
        self,
        exercise: Exercise,
        name: str | None = None,
        category: ExerciseCategory | None = None,
        muscle_groups: list[str] | None = None,
        equipment: str | None = None,
        difficulty: Difficulty | None = None,
        instructions: str | None = None,
        notes: str | None = None,
    ) -> Exercise:
        """Update an exercise. Fields left as None are unchanged."""
        if name is not None:
            exercise.name = name
        if category is not None:
            exercise.category = category
        if muscle_groups is not None:
            exercise.muscle_groups = muscle_groups
        if equipment is not None:
            exercise.equipment = equipment
        if difficulty is not None:
            exercise.difficulty = difficulty
        if instructions is not None:
            exercise.instructions = instructions
        if notes is not None:
            exercise.notes = notes

        await self.db.commit()
        await self.db.refresh(exercise)
        return exercise

    async def delete_exercise(self, exercise: Exercise) -> None:
        """Delete an exercise."""
        await self.db.delete(exercise)
        await self.db.commit()

    async def count_exercises(self) -> int:
        result = await self.db.execute(select(func.count(Exercise.id)))
        return result.scalar() or 0
