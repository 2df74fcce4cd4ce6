"""
Seed script for populating the database with common exercises.

Run with:
    python -m src.scripts.seed_exercises
    python -m src.scripts.seed_exercises --clear  # Replace existing exercises
"""

import asyncio

import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import AsyncSessionLocal, init_db
from src.domains.exercises.models import Difficulty, Exercise, ExerciseCategory

logger = structlog.get_logger(__name__)


EXERCISES = [
    # Chest
    {
        "name": "Bench Press",
        "category": ExerciseCategory.STRENGTH,
        "muscle_groups": ["chest", "shoulders", "triceps"],
        "equipment": "barbell",
        "difficulty": Difficulty.INTERMEDIATE,
        "instructions": "Lower the bar to mid-chest and press it back up to full lockout.",
    },
    {
        "name": "Incline Dumbbell Press",
        "category": ExerciseCategory.STRENGTH,
        "muscle_groups": ["chest", "shoulders"],
        "equipment": "dumbbells",
        "difficulty": Difficulty.INTERMEDIATE,
    },
    {
        "name": "Push-ups",
        "category": ExerciseCategory.STRENGTH,
        "muscle_groups": ["chest", "shoulders", "triceps"],
        "equipment": None,
        "difficulty": Difficulty.BEGINNER,
        "instructions": "Keep a straight line from head to heels while lowering the chest to the floor.",
    },
    # Back
    {
        "name": "Pull-ups",
        "category": ExerciseCategory.STRENGTH,
        "muscle_groups": ["back", "biceps"],
        "equipment": "pull-up bar",
        "difficulty": Difficulty.INTERMEDIATE,
    },
    {
        "name": "Barbell Rows",
        "category": ExerciseCategory.STRENGTH,
        "muscle_groups": ["back", "biceps"],
        "equipment": "barbell",
        "difficulty": Difficulty.INTERMEDIATE,
    },
    {
        "name": "Lat Pulldowns",
        "category": ExerciseCategory.STRENGTH,
        "muscle_groups": ["back", "biceps"],
        "equipment": "cable machine",
        "difficulty": Difficulty.BEGINNER,
    },
    {
        "name": "Deadlifts",
        "category": ExerciseCategory.STRENGTH,
        "muscle_groups": ["hamstrings", "glutes", "lower back"],
        "equipment": "barbell",
        "difficulty": Difficulty.ADVANCED,
        "instructions": "Hinge at the hips with a neutral spine and drive through the heels.",
    },
    # Shoulders and arms
    {
        "name": "Shoulder Press",
        "category": ExerciseCategory.STRENGTH,
        "muscle_groups": ["shoulders", "triceps"],
        "equipment": "dumbbells",
        "difficulty": Difficulty.BEGINNER,
    },
    {
        "name": "Lateral Raises",
        "category": ExerciseCategory.STRENGTH,
        "muscle_groups": ["shoulders"],
        "equipment": "dumbbells",
        "difficulty": Difficulty.BEGINNER,
    },
    {
        "name": "Bicep Curls",
        "category": ExerciseCategory.STRENGTH,
        "muscle_groups": ["biceps", "forearms"],
        "equipment": "dumbbells",
        "difficulty": Difficulty.BEGINNER,
    },
    {
        "name": "Tricep Dips",
        "category": ExerciseCategory.STRENGTH,
        "muscle_groups": ["triceps", "chest"],
        "equipment": "parallel bars",
        "difficulty": Difficulty.INTERMEDIATE,
    },
    # Legs
    {
        "name": "Squats",
        "category": ExerciseCategory.STRENGTH,
        "muscle_groups": ["quadriceps", "glutes"],
        "equipment": "barbell",
        "difficulty": Difficulty.INTERMEDIATE,
        "instructions": "Sit back until the thighs are parallel to the floor, knees tracking the toes.",
    },
    {
        "name": "Romanian Deadlifts",
        "category": ExerciseCategory.STRENGTH,
        "muscle_groups": ["hamstrings", "glutes"],
        "equipment": "barbell",
        "difficulty": Difficulty.INTERMEDIATE,
    },
    {
        "name": "Lunges",
        "category": ExerciseCategory.STRENGTH,
        "muscle_groups": ["quadriceps", "glutes"],
        "equipment": None,
        "difficulty": Difficulty.BEGINNER,
    },
    {
        "name": "Calf Raises",
        "category": ExerciseCategory.STRENGTH,
        "muscle_groups": ["calves"],
        "equipment": None,
        "difficulty": Difficulty.BEGINNER,
    },
    # Core
    {
        "name": "Plank",
        "category": ExerciseCategory.STRENGTH,
        "muscle_groups": ["abs", "obliques"],
        "equipment": None,
        "difficulty": Difficulty.BEGINNER,
    },
    # Cardio
    {
        "name": "Running",
        "category": ExerciseCategory.CARDIO,
        "muscle_groups": ["full body"],
        "equipment": None,
        "difficulty": Difficulty.BEGINNER,
    },
    {
        "name": "Cycling",
        "category": ExerciseCategory.CARDIO,
        "muscle_groups": ["quadriceps", "calves"],
        "equipment": "bike",
        "difficulty": Difficulty.BEGINNER,
    },
    {
        "name": "Rowing Machine",
        "category": ExerciseCategory.CARDIO,
        "muscle_groups": ["back", "full body"],
        "equipment": "rowing machine",
        "difficulty": Difficulty.BEGINNER,
    },
    # Mobility
    {
        "name": "Hamstring Stretch",
        "category": ExerciseCategory.FLEXIBILITY,
        "muscle_groups": ["hamstrings"],
        "equipment": None,
        "difficulty": Difficulty.BEGINNER,
    },
    {
        "name": "Single-Leg Stand",
        "category": ExerciseCategory.BALANCE,
        "muscle_groups": ["calves", "glutes"],
        "equipment": None,
        "difficulty": Difficulty.BEGINNER,
    },
]


async def seed_exercises(session: AsyncSession, clear_existing: bool = False) -> int:
    """Seed the database with common exercises."""

    if clear_existing:
        logger.info("clearing_existing_exercises")
        await session.execute(delete(Exercise))
        await session.commit()
    else:
        result = await session.execute(select(Exercise).limit(1))
        if result.scalar_one_or_none():
            logger.info("exercises_already_exist", hint="Use --clear to replace them")
            return 0

    count = 0
    for exercise_data in EXERCISES:
        session.add(
            Exercise(
                name=exercise_data["name"],
                category=exercise_data["category"],
                muscle_groups=exercise_data["muscle_groups"],
                equipment=exercise_data.get("equipment"),
                difficulty=exercise_data["difficulty"],
                instructions=exercise_data.get("instructions"),
            )
        )
        count += 1

    await session.commit()
    return count


async def main():
    """Main function to run the seed."""
    import argparse

    parser = argparse.ArgumentParser(description="Seed exercises database")
    parser.add_argument("--clear", action="store_true", help="Clear existing exercises first")
    args = parser.parse_args()

    logger.info("exercise_seed_script_started", available=len(EXERCISES))

    await init_db()
    async with AsyncSessionLocal() as session:
        count = await seed_exercises(session, clear_existing=args.clear)

    if count > 0:
        logger.info("exercises_seeded_successfully", count=count)
    else:
        logger.info("no_exercises_seeded")


if __name__ == "__main__":
    asyncio.run(main())
