"""Import service: file type detection, parser dispatch and database import."""
import logging
import os

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.exercises.models import ExerciseCategory
from src.domains.exercises.service import ExerciseService
from src.domains.imports.csv_parser import parse_exercise_csv, parse_workout_csv
from src.domains.imports.json_parser import parse_exercise_json, parse_workout_json
from src.domains.imports.schemas import (
    ImportDataType,
    ImportedExercise,
    ImportedWorkout,
    ImportResponse,
    ImportSummary,
    ParseResult,
    SupportedFileType,
)
from src.domains.imports.validators import DEFAULT_MUSCLE_GROUP
from src.domains.imports.xml_parser import parse_exercise_xml, parse_workout_xml
from src.domains.workouts.models import WorkoutStatus
from src.domains.workouts.schemas import SetInput, WorkoutExerciseInput
from src.domains.workouts.service import WorkoutService

logger = logging.getLogger(__name__)

_PARSERS = {
    ("csv", "exercise"): parse_exercise_csv,
    ("csv", "workout"): parse_workout_csv,
    ("json", "exercise"): parse_exercise_json,
    ("json", "workout"): parse_workout_json,
    ("xml", "exercise"): parse_exercise_xml,
    ("xml", "workout"): parse_workout_xml,
}

_MIME_TYPES: dict[str, SupportedFileType] = {
    "text/csv": "csv",
    "application/csv": "csv",
    "application/json": "json",
    "text/json": "json",
    "application/xml": "xml",
    "text/xml": "xml",
}


def detect_file_type(filename: str | None) -> SupportedFileType | None:
    """Guess the file type from its extension."""
    if not filename:
        return None
    extension = os.path.splitext(filename)[1].lower().lstrip(".")
    if extension in ("csv", "json", "xml"):
        return extension
    return None


def file_type_from_mime(mime_type: str | None) -> SupportedFileType | None:
    """Guess the file type from a MIME type, ignoring parameters such as charset."""
    if not mime_type:
        return None
    return _MIME_TYPES.get(mime_type.split(";", 1)[0].strip().lower())


def parse_file(content: str, file_type: str, data_type: ImportDataType) -> ParseResult:
    """Parse file content with the parser for its type."""
    parser = _PARSERS.get((file_type, data_type))
    if parser is None:
        return ParseResult(success=False, errors=[f"Unsupported file type: {file_type}"])
    return parser(content)


class ImportService:
    """Writes parsed records to the database."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.exercises = ExerciseService(db)
        self.workouts = WorkoutService(db)

    async def import_exercises(self, exercises: list[ImportedExercise]) -> ImportResponse:
        """Create exercises, skipping names that already exist."""
        imported = []
        skipped = []
        errors = []

        for exercise in exercises:
            if await self.exercises.get_exercise_by_name(exercise.name):
                skipped.append(exercise.name)
                continue
            try:
                created = await self.exercises.create_exercise(
                    name=exercise.name,
                    category=exercise.category,
                    muscle_groups=exercise.muscle_groups,
                    notes=exercise.notes,
                )
            except SQLAlchemyError as e:
                await self.db.rollback()
                logger.error(f"Failed to import exercise {exercise.name}: {e}")
                errors.append(f'Failed to import exercise "{exercise.name}"')
                continue
            imported.append({
                "id": str(created.id),
                "name": created.name,
                "category": created.category.value,
            })

        return ImportResponse(
            summary=ImportSummary(
                total=len(exercises),
                imported=len(imported),
                skipped=len(skipped),
                errors=len(errors),
            ),
            imported=imported,
            skipped=skipped,
            errors=errors or None,
        )

    async def _resolve_exercise(self, name: str) -> tuple[str, ExerciseCategory]:
        exercise = await self.exercises.get_exercise_by_name(name)
        if exercise is None:
            exercise = await self.exercises.create_exercise(
                name=name,
                category=ExerciseCategory.OTHER,
                muscle_groups=[DEFAULT_MUSCLE_GROUP],
                notes="Auto-created during workout import",
            )
            logger.info(f"Created exercise {name} during workout import")
        return str(exercise.id), exercise.category

    async def import_workouts(self, workouts: list[ImportedWorkout]) -> ImportResponse:
        """Create completed workouts, resolving exercises by name."""
        imported = []
        errors = []

        for workout in workouts:
            try:
                entries = []
                for item in workout.exercises:
                    exercise_id, category = await self._resolve_exercise(item.exercise_name)
                    entries.append(
                        WorkoutExerciseInput(
                            exercise_id=exercise_id,
                            exercise_name=item.exercise_name,
                            exercise_category=category,
                            order=item.order,
                            sets=[
                                SetInput(
                                    set_number=s.set_number,
                                    reps=s.reps or 0,
                                    weight=s.weight or 0.0,
                                    completed=True,
                                    duration=s.duration,
                                    distance=s.distance,
                                    notes=s.notes,
                                )
                                for s in item.sets
                            ],
                        )
                    )
                created = await self.workouts.create_workout(
                    name=workout.name,
                    date=workout.date,
                    status=WorkoutStatus.COMPLETED,
                    notes=workout.notes,
                    exercises=entries,
                )
            except SQLAlchemyError as e:
                await self.db.rollback()
                logger.error(f"Failed to import workout {workout.name}: {e}")
                errors.append(f'Failed to import workout "{workout.name}"')
                continue

            imported.append({
                "id": str(created.id),
                "name": created.name,
                "date": workout.date.isoformat(),
                "exercise_count": len(workout.exercises),
                "total_sets": sum(len(e.sets) for e in workout.exercises),
            })

        return ImportResponse(
            summary=ImportSummary(
                total=len(workouts),
                imported=len(imported),
                errors=len(errors),
            ),
            imported=imported,
            errors=errors or None,
        )
