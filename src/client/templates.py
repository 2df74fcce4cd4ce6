"""Workout templates: a built-in library plus user templates kept in the local store."""
import re
from datetime import datetime

import structlog
from pydantic import BaseModel, Field, ValidationError

from src.client.exceptions import DraftValidationError
from src.client.local_store import LocalStore, StorageKey, generate_id
from src.client.resources import format_validation_error
from src.domains.exercises.models import Difficulty
from src.domains.exercises.schemas import ExerciseResponse
from src.domains.workouts.models import WorkoutStatus
from src.domains.workouts.schemas import SetInput, WorkoutCreate, WorkoutExerciseInput

logger = structlog.get_logger(__name__)

_SET_COUNT = re.compile(r"(\d+)\s*sets?", re.IGNORECASE)
_REP_TARGET = re.compile(r"x\s*(\d+)(?:\s*-\s*\d+)?\s*reps", re.IGNORECASE)


class TemplateExercise(BaseModel):
    name: str
    sets: str  # scheme such as "4 sets x 8-12 reps"
    muscles: list[str] = Field(default_factory=list)


class WorkoutTemplate(BaseModel):
    id: str
    name: str
    description: str = ""
    difficulty: Difficulty = Difficulty.INTERMEDIATE
    duration: str = ""
    exercises: list[TemplateExercise] = Field(min_length=1)
    builtin: bool = False


def _builtin(template_id: str, name: str, description: str, difficulty: Difficulty, duration: str,
             exercises: list[tuple[str, str, list[str]]]) -> WorkoutTemplate:
    return WorkoutTemplate(
        id=template_id,
        name=name,
        description=description,
        difficulty=difficulty,
        duration=duration,
        exercises=[TemplateExercise(name=n, sets=s, muscles=m) for n, s, m in exercises],
        builtin=True,
    )


BUILTIN_TEMPLATES = [
    _builtin(
        "push-day", "Push Day",
        "Upper body pushing movements targeting chest, shoulders, and triceps",
        Difficulty.INTERMEDIATE, "60-75 minutes",
        [
            ("Bench Press", "4 sets x 8-12 reps", ["chest", "shoulders", "triceps"]),
            ("Shoulder Press", "3 sets x 10-12 reps", ["shoulders", "triceps"]),
            ("Incline Dumbbell Press", "3 sets x 10-12 reps", ["chest", "shoulders"]),
            ("Tricep Dips", "3 sets x 12-15 reps", ["triceps", "chest"]),
            ("Lateral Raises", "3 sets x 12-15 reps", ["shoulders"]),
            ("Push-ups", "2 sets to failure", ["chest", "shoulders", "triceps"]),
        ],
    ),
    _builtin(
        "pull-day", "Pull Day",
        "Upper body pulling movements targeting back, biceps, and rear delts",
        Difficulty.INTERMEDIATE, "60-75 minutes",
        [
            ("Pull-ups", "4 sets x 6-10 reps", ["back", "biceps"]),
            ("Barbell Rows", "4 sets x 8-12 reps", ["back", "biceps"]),
            ("Lat Pulldowns", "3 sets x 10-12 reps", ["back", "biceps"]),
            ("Bicep Curls", "3 sets x 12-15 reps", ["biceps"]),
            ("Face Pulls", "3 sets x 15-20 reps", ["shoulders", "back"]),
            ("Hammer Curls", "2 sets x 12-15 reps", ["biceps", "forearms"]),
        ],
    ),
    _builtin(
        "leg-day", "Leg Day",
        "Lower body workout targeting quads, hamstrings, glutes, and calves",
        Difficulty.ADVANCED, "75-90 minutes",
        [
            ("Squats", "4 sets x 8-12 reps", ["quadriceps", "glutes"]),
            ("Romanian Deadlifts", "4 sets x 10-12 reps", ["hamstrings", "glutes"]),
            ("Lunges", "3 sets x 12 reps each leg", ["quadriceps", "glutes"]),
            ("Leg Press", "3 sets x 15-20 reps", ["quadriceps", "glutes"]),
            ("Calf Raises", "4 sets x 15-20 reps", ["calves"]),
            ("Leg Curls", "3 sets x 12-15 reps", ["hamstrings"]),
        ],
    ),
    _builtin(
        "upper-body", "Upper Body",
        "Complete upper body workout combining push and pull movements",
        Difficulty.INTERMEDIATE, "75-90 minutes",
        [
            ("Bench Press", "4 sets x 8-10 reps", ["chest", "shoulders", "triceps"]),
            ("Pull-ups", "4 sets x 6-10 reps", ["back", "biceps"]),
            ("Shoulder Press", "3 sets x 10-12 reps", ["shoulders", "triceps"]),
            ("Barbell Rows", "3 sets x 10-12 reps", ["back", "biceps"]),
            ("Bicep Curls", "3 sets x 12-15 reps", ["biceps"]),
            ("Tricep Extensions", "3 sets x 12-15 reps", ["triceps"]),
        ],
    ),
    _builtin(
        "lower-body", "Lower Body",
        "Comprehensive lower body strength and power workout",
        Difficulty.INTERMEDIATE, "60-75 minutes",
        [
            ("Deadlifts", "4 sets x 6-8 reps", ["hamstrings", "glutes", "back"]),
            ("Squats", "4 sets x 10-12 reps", ["quadriceps", "glutes"]),
            ("Bulgarian Split Squats", "3 sets x 10 reps each leg", ["quadriceps", "glutes"]),
            ("Hip Thrusts", "3 sets x 12-15 reps", ["glutes", "hamstrings"]),
            ("Calf Raises", "3 sets x 15-20 reps", ["calves"]),
            ("Glute Bridges", "2 sets x 15-20 reps", ["glutes"]),
        ],
    ),
    _builtin(
        "full-body", "Full Body",
        "Complete workout targeting all major muscle groups",
        Difficulty.BEGINNER, "45-60 minutes",
        [
            ("Squats", "3 sets x 12-15 reps", ["quadriceps", "glutes"]),
            ("Push-ups", "3 sets x 10-15 reps", ["chest", "shoulders", "triceps"]),
            ("Pull-ups or Rows", "3 sets x 8-12 reps", ["back", "biceps"]),
            ("Lunges", "2 sets x 10 reps each leg", ["quadriceps", "glutes"]),
            ("Plank", "3 sets x 30-60 seconds", ["abs"]),
            ("Shoulder Press", "2 sets x 10-12 reps", ["shoulders"]),
        ],
    ),
]


def parse_set_scheme(scheme: str) -> tuple[int, int]:
    """Return (set count, target reps) for a scheme like "4 sets x 8-12 reps".

    Reps default to 0 for timed or to-failure schemes; the set count to 1.
    """
    sets = _SET_COUNT.search(scheme)
    reps = _REP_TARGET.search(scheme)
    return (int(sets.group(1)) if sets else 1, int(reps.group(1)) if reps else 0)


def get_template(template_id: str) -> WorkoutTemplate | None:
    return next((t for t in BUILTIN_TEMPLATES if t.id == template_id), None)


def build_workout_draft(
    template: WorkoutTemplate,
    date: datetime,
    exercises_by_name: dict[str, ExerciseResponse] | None = None,
    name: str | None = None,
) -> WorkoutCreate:
    """Planned workout draft with sets pre-filled from the template scheme.

    Template exercises are linked to library exercises by case-insensitive name
    when a match exists.
    """
    library = {k.strip().lower(): v for k, v in (exercises_by_name or {}).items()}
    exercises = []
    for order, item in enumerate(template.exercises):
        match = library.get(item.name.lower())
        set_count, reps = parse_set_scheme(item.sets)
        exercises.append(
            WorkoutExerciseInput(
                exercise_id=match.id if match else None,
                exercise_name=item.name,
                exercise_category=match.category if match else None,
                order=order,
                sets=[SetInput(set_number=n, reps=reps, weight=0.0) for n in range(1, set_count + 1)],
            )
        )
    return WorkoutCreate(
        name=name or template.name,
        date=date,
        status=WorkoutStatus.PLANNED,
        exercises=exercises,
    )


class TemplateLibrary:
    """Built-in templates plus user templates persisted in the local store."""

    def __init__(self, store: LocalStore):
        self.store = store

    def custom_templates(self) -> list[WorkoutTemplate]:
        raw = self.store.get(StorageKey.WORKOUT_TEMPLATES, [])
        if not isinstance(raw, list):
            return []
        templates = []
        for entry in raw:
            try:
                templates.append(WorkoutTemplate.model_validate(entry))
            except ValidationError:
                logger.warning("template_entry_skipped")
        return templates

    def list_templates(self) -> list[WorkoutTemplate]:
        return BUILTIN_TEMPLATES + self.custom_templates()

    def get(self, template_id: str) -> WorkoutTemplate | None:
        return get_template(template_id) or next(
            (t for t in self.custom_templates() if t.id == template_id), None
        )

    def save(
        self,
        name: str,
        exercises: list[TemplateExercise | dict],
        description: str = "",
        difficulty: Difficulty = Difficulty.INTERMEDIATE,
        duration: str = "",
    ) -> WorkoutTemplate:
        """Store a user template under a new local id."""
        try:
            template = WorkoutTemplate(
                id=generate_id(),
                name=name,
                description=description,
                difficulty=difficulty,
                duration=duration,
                exercises=exercises,
            )
        except ValidationError as e:
            raise DraftValidationError(f"Invalid template: {format_validation_error(e)}") from e
        templates = self.custom_templates()
        templates.append(template)
        self.store.set(StorageKey.WORKOUT_TEMPLATES, [t.model_dump(mode="json") for t in templates])
        return template

    def remove(self, template_id: str) -> bool:
        """Delete a user template. Built-in templates cannot be removed."""
        templates = self.custom_templates()
        remaining = [t for t in templates if t.id != template_id]
        if len(remaining) == len(templates):
            return False
        self.store.set(StorageKey.WORKOUT_TEMPLATES, [t.model_dump(mode="json") for t in remaining])
        return True
