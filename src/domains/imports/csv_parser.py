"""CSV import parsers.

The first row is a header. Columns are located by substring match on the
lower-cased header so that "Exercise Name", "name" or "exercise_name" all work.
"""
import csv
import io
from typing import Any

from src.domains.imports.schemas import ImportedExercise, ImportedWorkout, ParseResult
from src.domains.imports.validators import (
    normalize_exercise,
    normalize_workout,
    split_muscle_groups,
    to_float,
    to_int,
    validate_exercise,
    validate_workout,
)

EXERCISE_HEADERS = ["name", "category", "musclegroup"]
WORKOUT_HEADERS = ["workout", "date", "exercise", "set", "reps"]


def _read_rows(content: str) -> tuple[list[str], list[tuple[int, list[str]]]]:
    """Return normalized headers and (line number, values) for each non-blank data row."""
    reader = csv.reader(io.StringIO(content.strip()))
    headers: list[str] = []
    rows = []
    for values in reader:
        if not headers:
            headers = [h.strip().lower().replace("_", " ") for h in values]
            continue
        if not any(v.strip() for v in values):
            continue
        rows.append((reader.line_num, values))
    return headers, rows


def _has_column(headers: list[str], needle: str) -> bool:
    return any(needle in h or needle in h.replace(" ", "") for h in headers)


def _column(headers: list[str], *needles: str, exclude: tuple[str, ...] = ()) -> int | None:
    for index, header in enumerate(headers):
        compact = header.replace(" ", "")
        if any(n in header or n in compact for n in needles) and not any(x in header for x in exclude):
            return index
    return None


def _cell(values: list[str], index: int | None) -> str | None:
    if index is None or index >= len(values):
        return None
    return values[index].strip()


def _check_headers(headers: list[str], required: list[str], rows: list) -> list[str]:
    if not headers or not rows:
        return ["CSV file must have a header row and at least one data row"]
    missing = [h for h in required if not _has_column(headers, h)]
    if missing:
        return [f"Missing required headers: {', '.join(missing)}"]
    return []


def parse_exercise_csv(content: str) -> ParseResult[ImportedExercise]:
    """Parse exercises, one per row."""
    headers, rows = _read_rows(content)
    problems = _check_headers(headers, EXERCISE_HEADERS, rows)
    if problems:
        return ParseResult(success=False, errors=problems)

    name_idx = _column(headers, "name")
    category_idx = _column(headers, "category")
    muscle_idx = _column(headers, "musclegroup")
    notes_idx = _column(headers, "notes")

    exercises = []
    errors = []
    for line, values in rows:
        record = {
            "name": _cell(values, name_idx) or "",
            "category": _cell(values, category_idx) or "",
            "muscle_groups": split_muscle_groups(_cell(values, muscle_idx) or ""),
            "notes": _cell(values, notes_idx) or None,
        }
        problems = validate_exercise(record)
        if problems:
            errors.append(f"Row {line}: {'; '.join(problems)}")
        else:
            exercises.append(normalize_exercise(record))

    return ParseResult(success=not errors, data=exercises, errors=errors)


def parse_workout_csv(content: str) -> ParseResult[ImportedWorkout]:
    """Parse workouts, one set per row.

    Rows are grouped into workouts by workout name and into exercises by
    exercise name, keeping first-seen order.
    """
    headers, rows = _read_rows(content)
    problems = _check_headers(headers, WORKOUT_HEADERS, rows)
    if problems:
        return ParseResult(success=False, errors=problems)

    workout_idx = _column(headers, "workout")
    date_idx = _column(headers, "date")
    notes_idx = _column(headers, "notes", exclude=("set",))
    exercise_idx = _column(headers, "exercise")
    set_idx = _column(headers, "set", exclude=("notes",))
    reps_idx = _column(headers, "reps")
    weight_idx = _column(headers, "weight")
    duration_idx = _column(headers, "duration")
    distance_idx = _column(headers, "distance")
    set_notes_idx = _column(headers, "set notes", "setnotes")

    workouts: dict[str, dict[str, Any]] = {}
    for _, values in rows:
        workout_name = _cell(values, workout_idx) or ""
        workout = workouts.get(workout_name)
        if workout is None:
            workout = {
                "name": workout_name,
                "date": _cell(values, date_idx) or "",
                "notes": _cell(values, notes_idx) or None,
                "exercises": [],
            }
            workouts[workout_name] = workout

        exercise_name = _cell(values, exercise_idx) or ""
        exercise = next(
            (e for e in workout["exercises"] if e["exercise_name"] == exercise_name),
            None,
        )
        if exercise is None:
            exercise = {
                "exercise_name": exercise_name,
                "order": len(workout["exercises"]),
                "sets": [],
            }
            workout["exercises"].append(exercise)

        set_number = to_int(_cell(values, set_idx))
        exercise["sets"].append({
            "set_number": set_number or len(exercise["sets"]) + 1,
            "reps": to_int(_cell(values, reps_idx)),
            "weight": to_float(_cell(values, weight_idx)),
            "duration": to_int(_cell(values, duration_idx)),
            "distance": to_float(_cell(values, distance_idx)),
            "notes": _cell(values, set_notes_idx) or None,
        })

    parsed = []
    errors = []
    for name, workout in workouts.items():
        problems = validate_workout(workout)
        if problems:
            errors.append(f'Workout "{name}": {"; ".join(problems)}')
        else:
            parsed.append(normalize_workout(workout))

    return ParseResult(success=not errors, data=parsed, errors=errors)
