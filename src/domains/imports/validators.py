"""Validation and normalization of raw import records.

Parsers turn file content into plain dicts keyed by snake_case field names.
``validate_*`` collects human-readable problems for one record and
``normalize_*`` turns a valid record into its pydantic form.
"""
import math
import re
from datetime import datetime
from typing import Any

from src.core.schemas import ensure_utc
from src.domains.exercises.models import KNOWN_MUSCLE_GROUPS, ExerciseCategory
from src.domains.imports.schemas import (
    ImportedExercise,
    ImportedSet,
    ImportedWorkout,
    ImportedWorkoutExercise,
)

VALID_CATEGORIES = [c.value for c in ExerciseCategory]
DEFAULT_MUSCLE_GROUP = "full body"

_MUSCLE_GROUP_SEPARATORS = re.compile(r"[,;|]")
_DATE_FORMATS = ("%m/%d/%Y", "%m/%d/%Y %H:%M", "%Y/%m/%d")


def first_present(mapping: dict[str, Any], *keys: str) -> Any:
    """Return the value of the first key present and not None."""
    for key in keys:
        value = mapping.get(key)
        if value is not None:
            return value
    return None


def split_muscle_groups(text: str) -> list[str]:
    """Split a delimited muscle group string, falling back to full body."""
    groups = [g.strip() for g in _MUSCLE_GROUP_SEPARATORS.split(text or "") if g.strip()]
    return groups or [DEFAULT_MUSCLE_GROUP]


def to_int(text: str | None) -> int | str | None:
    """Parse an integer cell. Unparseable text is returned as-is for validation to report."""
    if text is None or not text.strip():
        return None
    try:
        return int(text)
    except ValueError:
        try:
            return int(float(text))
        except ValueError:
            return text.strip()


def to_float(text: str | None) -> float | str | None:
    if text is None or not text.strip():
        return None
    try:
        return float(text)
    except ValueError:
        return text.strip()


def parse_date(value: Any) -> datetime | None:
    """Parse an ISO-8601 (or US style) date, returning None when unparseable."""
    if isinstance(value, datetime):
        return ensure_utc(value)
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        return ensure_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return ensure_utc(datetime.strptime(text, fmt))
        except ValueError:
            continue
    return None


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value)


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def validate_exercise(exercise: dict[str, Any]) -> list[str]:
    """Validate a raw exercise record."""
    errors = []

    if _is_blank(exercise.get("name")):
        errors.append("Exercise name is required and must be a non-empty string")

    category = exercise.get("category")
    if not isinstance(category, str) or category.strip().lower() not in VALID_CATEGORIES:
        errors.append(f"Exercise category must be one of: {', '.join(VALID_CATEGORIES)}")

    groups = exercise.get("muscle_groups")
    if not isinstance(groups, list) or not groups:
        errors.append("Exercise must have at least one muscle group")
    else:
        invalid = [
            str(g) for g in groups
            if not isinstance(g, str) or g.strip().lower() not in KNOWN_MUSCLE_GROUPS
        ]
        if invalid:
            errors.append(
                f"Invalid muscle groups: {', '.join(invalid)}. "
                f"Valid options: {', '.join(KNOWN_MUSCLE_GROUPS)}"
            )

    notes = exercise.get("notes")
    if notes is not None and not isinstance(notes, str):
        errors.append("Exercise notes must be a string")

    return errors


def _validate_set(item: Any, index: int, prefix: str) -> list[str]:
    prefix = f"{prefix}Set {index + 1}: "
    if not isinstance(item, dict):
        return [prefix + "Set must be an object"]

    errors = []
    set_number = item.get("set_number")
    if not _is_number(set_number) or set_number < 1:
        errors.append(prefix + "Set number must be a positive number")

    metrics = ("reps", "weight", "duration", "distance")
    if all(item.get(m) is None for m in metrics):
        errors.append(prefix + "At least one metric (reps, weight, duration, or distance) is required")

    for metric in metrics:
        value = item.get(metric)
        if value is not None and (not _is_number(value) or value < 0):
            errors.append(prefix + f"{metric.capitalize()} must be a non-negative number")

    notes = item.get("notes")
    if notes is not None and not isinstance(notes, str):
        errors.append(prefix + "Notes must be a string")

    return errors


def _validate_workout_exercise(item: Any, index: int) -> list[str]:
    prefix = f"Exercise {index + 1}: "
    if not isinstance(item, dict):
        return [prefix + "Exercise must be an object"]

    errors = []
    if _is_blank(item.get("exercise_name")):
        errors.append(prefix + "Exercise name is required")

    order = item.get("order")
    if order is not None and (not _is_number(order) or order < 0):
        errors.append(prefix + "Exercise order must be a non-negative number")

    sets = item.get("sets")
    if not isinstance(sets, list) or not sets:
        errors.append(prefix + "Exercise must have at least one set")
    else:
        for set_index, set_item in enumerate(sets):
            errors.extend(_validate_set(set_item, set_index, prefix))

    return errors


def validate_workout(workout: dict[str, Any]) -> list[str]:
    """Validate a raw workout record including its exercises and sets."""
    errors = []

    if _is_blank(workout.get("name")):
        errors.append("Workout name is required and must be a non-empty string")

    date = workout.get("date")
    if date is None or date == "":
        errors.append("Workout date is required")
    elif parse_date(date) is None:
        errors.append("Invalid workout date format")

    notes = workout.get("notes")
    if notes is not None and not isinstance(notes, str):
        errors.append("Workout notes must be a string")

    exercises = workout.get("exercises")
    if not isinstance(exercises, list) or not exercises:
        errors.append("Workout must have at least one exercise")
    else:
        for index, item in enumerate(exercises):
            errors.extend(_validate_workout_exercise(item, index))

    return errors


def _clean_notes(notes: str | None) -> str | None:
    if notes is None:
        return None
    return notes.strip() or None


def _as_int(value: float | None) -> int | None:
    return int(value) if value is not None else None


def normalize_exercise(exercise: dict[str, Any]) -> ImportedExercise:
    """Build an ImportedExercise from a record that passed validate_exercise."""
    return ImportedExercise(
        name=exercise["name"].strip(),
        category=ExerciseCategory(exercise["category"].strip().lower()),
        muscle_groups=[g.strip().lower() for g in exercise["muscle_groups"]],
        notes=_clean_notes(exercise.get("notes")),
    )


def normalize_workout(workout: dict[str, Any]) -> ImportedWorkout:
    """Build an ImportedWorkout from a record that passed validate_workout."""
    exercises = []
    for index, item in enumerate(workout["exercises"]):
        order = item.get("order")
        exercises.append(
            ImportedWorkoutExercise(
                exercise_name=item["exercise_name"].strip(),
                order=int(order) if order is not None else index,
                sets=[
                    ImportedSet(
                        set_number=int(s["set_number"]),
                        reps=_as_int(s.get("reps")),
                        weight=s.get("weight"),
                        duration=_as_int(s.get("duration")),
                        distance=s.get("distance"),
                        notes=_clean_notes(s.get("notes")),
                    )
                    for s in item["sets"]
                ],
            )
        )
    return ImportedWorkout(
        name=workout["name"].strip(),
        date=parse_date(workout["date"]),
        notes=_clean_notes(workout.get("notes")),
        exercises=exercises,
    )
