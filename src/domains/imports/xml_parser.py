"""XML import parsers.

Records are ``<exercise>`` / ``<workout>`` elements found anywhere in the
document, matched case-insensitively. Fields are read from child elements or
attributes under a handful of accepted names.
"""
import xml.etree.ElementTree as ET
from typing import Any

from src.domains.imports.schemas import ImportedExercise, ImportedWorkout, ParseResult
from src.domains.imports.validators import (
    DEFAULT_MUSCLE_GROUP,
    normalize_exercise,
    normalize_workout,
    split_muscle_groups,
    to_float,
    to_int,
    validate_exercise,
    validate_workout,
)

_MUSCLE_TAGS = {"musclegroup", "musclegroups", "muscle", "muscles"}


def _tag(element: ET.Element) -> str:
    """Local tag name, lower-cased, without any namespace."""
    return element.tag.rsplit("}", 1)[-1].lower() if isinstance(element.tag, str) else ""


def _field(element: ET.Element, *names: str) -> str | None:
    """Text of the first direct child or attribute matching one of names."""
    wanted = [n.lower() for n in names]
    for name in wanted:
        for child in element:
            if _tag(child) == name and child.text and child.text.strip():
                return child.text.strip()
        for attr, value in element.attrib.items():
            if attr.lower() == name and value.strip():
                return value.strip()
    return None


def _find(root: ET.Element, *tags: str) -> list[ET.Element]:
    return [el for el in root.iter() if _tag(el) in tags]


def _looks_like(element: ET.Element, *required: tuple[str, ...]) -> bool:
    return all(_field(element, *names) is not None for names in required)


def _records(root: ET.Element, tag: str, *required: tuple[str, ...]) -> list[ET.Element]:
    elements = _find(root, tag)
    if elements:
        return elements
    children = list(root)
    if children and _looks_like(children[0], *required):
        return children
    return []


def _muscle_groups(element: ET.Element) -> list[str]:
    groups = []
    for child in element.iter():
        if child is element or _tag(child) not in _MUSCLE_TAGS or len(child):
            continue
        if child.text and child.text.strip():
            groups.extend(split_muscle_groups(child.text))
    if not groups:
        attr = _field(element, "muscleGroup", "muscleGroups")
        if attr:
            groups = split_muscle_groups(attr)
    return groups or [DEFAULT_MUSCLE_GROUP]


def _exercise_record(element: ET.Element) -> dict[str, Any]:
    return {
        "name": _field(element, "name", "exerciseName") or "",
        "category": _field(element, "category") or "",
        "muscle_groups": _muscle_groups(element),
        "notes": _field(element, "notes", "description"),
    }


def _set_record(element: ET.Element, position: int) -> dict[str, Any]:
    set_number = to_int(_field(element, "number", "setNumber"))
    return {
        "set_number": set_number if set_number is not None else position,
        "reps": to_int(_field(element, "reps", "repetitions")),
        "weight": to_float(_field(element, "weight")),
        "duration": to_int(_field(element, "duration", "time")),
        "distance": to_float(_field(element, "distance")),
        "notes": _field(element, "notes"),
    }


def _workout_exercise_record(element: ET.Element, position: int) -> dict[str, Any]:
    order = to_int(_field(element, "order", "position"))
    sets = _find(element, "set")
    return {
        "exercise_name": _field(element, "name", "exerciseName") or "",
        "order": order if order is not None else position,
        "sets": [_set_record(s, n) for n, s in enumerate(sets, start=1)],
    }


def _workout_record(element: ET.Element) -> dict[str, Any]:
    exercises = _find(element, "exercise", "workoutexercise")
    return {
        "name": _field(element, "name", "workoutName") or "",
        "date": _field(element, "date", "workoutDate") or "",
        "notes": _field(element, "notes", "description"),
        "exercises": [_workout_exercise_record(e, n) for n, e in enumerate(exercises)],
    }


def _parse_document(content: str) -> ET.Element:
    return ET.fromstring(content.strip())


def parse_exercise_xml(content: str) -> ParseResult[ImportedExercise]:
    """Parse exercises from XML."""
    try:
        root = _parse_document(content)
    except ET.ParseError as e:
        return ParseResult(success=False, errors=[f"XML parsing error: {e}"])

    elements = _records(root, "exercise", ("name", "exerciseName"), ("category",))
    if not elements:
        return ParseResult(success=False, errors=["No exercise elements found in XML"])

    exercises = []
    errors = []
    for index, element in enumerate(elements):
        record = _exercise_record(element)
        problems = validate_exercise(record)
        if problems:
            errors.append(f"Exercise {index + 1}: {'; '.join(problems)}")
        else:
            exercises.append(normalize_exercise(record))

    return ParseResult(success=not errors, data=exercises, errors=errors)


def parse_workout_xml(content: str) -> ParseResult[ImportedWorkout]:
    """Parse workouts with nested exercises and sets from XML."""
    try:
        root = _parse_document(content)
    except ET.ParseError as e:
        return ParseResult(success=False, errors=[f"XML parsing error: {e}"])

    elements = _records(root, "workout", ("name", "workoutName"), ("date", "workoutDate"))
    if not elements:
        return ParseResult(success=False, errors=["No workout elements found in XML"])

    workouts = []
    errors = []
    for index, element in enumerate(elements):
        record = _workout_record(element)
        problems = validate_workout(record)
        if problems:
            errors.append(f"Workout {index + 1}: {'; '.join(problems)}")
        else:
            workouts.append(normalize_workout(record))

    return ParseResult(success=not errors, data=workouts, errors=errors)
