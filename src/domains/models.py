"""Central import of all domain models.

Importing this module registers every table with SQLAlchemy's metadata
before tables are created.
"""

# Exercises domain
from src.domains.exercises.models import (
    Difficulty,
    Exercise,
    ExerciseCategory,
)

# Workouts domain
from src.domains.workouts.models import (
    Workout,
    WorkoutExercise,
    WorkoutSet,
    WorkoutStatus,
)

__all__ = [
    # Exercises
    "Exercise",
    "ExerciseCategory",
    "Difficulty",
    # Workouts
    "Workout",
    "WorkoutExercise",
    "WorkoutSet",
    "WorkoutStatus",
]
