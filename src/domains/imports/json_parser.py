"""JSON import parsers.

Accepts a single object or an array. Items may wrap their records in an
``exercises`` / ``workouts`` array. camelCase keys are accepted alongside
snake_case ones.
"""
import json
from typing import Any

from src.domains.imports.schemas import ImportedExercise, ImportedWorkout, ParseResult
from src.domains.imports.validators import (
    first_present,
    normalize_exercise,
    normalize_workout,
    split_muscle_groups,
    validate_exercise,
    validate_workout,
)


def _load(content: str) -> list[Any]:
    parsed = json.loads(content)
    return parsed if isinstance(parsed, list) else [parsed]


def _unwrap(item: Any, key: str) -> list[Any]:
    records = item.get(key, item) if isinstance(item, dict) else item
    return records if isinstance(records, list) else [records]


def _prefix(item_index: int, item_count: int, label: str, record_index: int, record_count: int) -> str:
    prefix = f"Item {item_index + 1}, " if item_count > 1 else ""
    if record_count > 1:
        prefix += f"{label} {record_index + 1}: "
    return prefix


def _exercise_record(raw: Any) -> dict[str, Any]:
    if not isinstance(raw, dict):
        return {}
    groups = first_present(raw, "muscle_groups", "muscleGroups", "muscleGroup", "muscle_group")
    if isinstance(groups, str):
        groups = split_muscle_groups(groups)
    return {
        "name": raw.get("name"),
        "category": raw.get("category"),
        "muscle_groups": groups,
        "notes": raw.get("notes"),
    }


def _set_record(raw: Any, position: int) -> Any:
    if not isinstance(raw, dict):
        return raw
    set_number = first_present(raw, "set_number", "setNumber", "number")
    return {
        "set_number": set_number if set_number is not None else position,
        "reps": raw.get("reps"),
        "weight": raw.get("weight"),
        "duration": raw.get("duration"),
        "distance": raw.get("distance"),
        "notes": raw.get("notes"),
    }


def _workout_exercise_record(raw: Any) -> Any:
    if not isinstance(raw, dict):
        return raw
    name = first_present(raw, "exercise_name", "exerciseName")
    if name is None:
        nested = raw.get("exercise")
        if isinstance(nested, dict) and nested.get("name"):
            name = nested["name"]
        else:
            name = raw.get("name")
    sets = first_present(raw, "sets", "set")
    if isinstance(sets, dict):
        sets = [sets]
    if isinstance(sets, list):
        sets = [_set_record(s, position) for position, s in enumerate(sets, start=1)]
    return {
        "exercise_name": name,
        "order": raw.get("order"),
        "sets": sets,
    }


def _workout_record(raw: Any) -> dict[str, Any]:
    if not isinstance(raw, dict):
        return {}
    exercises = first_present(raw, "exercises", "workout_exercises", "workoutExercises")
    if isinstance(exercises, list):
        exercises = [_workout_exercise_record(e) for e in exercises]
    return {
        "name": raw.get("name"),
        "date": raw.get("date"),
        "notes": raw.get("notes"),
        "exercises": exercises,
    }


def parse_exercise_json(content: str) -> ParseResult[ImportedExercise]:
    """Parse exercises from JSON."""
    try:
        items = _load(content)
    except json.JSONDecodeError as e:
        return ParseResult(success=False, errors=[f"Failed to parse JSON: {e}"])
    if not items:
        return ParseResult(success=False, errors=["JSON file contains no exercise data"])

    exercises = []
    errors = []
    for item_index, item in enumerate(items):
        records = _unwrap(item, "exercises")
        for index, raw in enumerate(records):
            record = _exercise_record(raw)
            problems = validate_exercise(record)
            if problems:
                prefix = _prefix(item_index, len(items), "Exercise", index, len(records))
                errors.append(prefix + "; ".join(problems))
            else:
                exercises.append(normalize_exercise(record))

    return ParseResult(success=not errors, data=exercises, errors=errors)


def parse_workout_json(content: str) -> ParseResult[ImportedWorkout]:
    """Parse workouts with nested exercises and sets from JSON."""
    try:
        items = _load(content)
    except json.JSONDecodeError as e:
        return ParseResult(success=False, errors=[f"Failed to parse JSON: {e}"])
    if not items:
        return ParseResult(success=False, errors=["JSON file contains no workout data"])

    workouts = []
    errors = []
    for item_index, item in enumerate(items):
        records = _unwrap(item, "workouts")
        for index, raw in enumerate(records):
            record = _workout_record(raw)
            problems = validate_workout(record)
            if problems:
                prefix = _prefix(item_index, len(items), "Workout", index, len(records))
                errors.append(prefix + "; ".join(problems))
            else:
                workouts.append(normalize_workout(record))

    return ParseResult(success=not errors, data=workouts, errors=errors)
