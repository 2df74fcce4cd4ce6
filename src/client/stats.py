"""Derived statistics over a loaded list of workouts. All functions are pure."""
from collections import Counter

from pydantic import BaseModel

from src.domains.workouts.models import WorkoutStatus
from src.domains.workouts.schemas import WorkoutResponse


class WorkoutStats(BaseModel):
    """Aggregate numbers for a set of workouts."""

    total_workouts: int = 0
    completed_workouts: int = 0
    total_duration: int = 0
    total_calories: int = 0
    average_duration: float = 0.0
    total_volume: float = 0.0


def workout_volume(workout: WorkoutResponse) -> float:
    """Sum of weight x reps over completed sets."""
    return sum(
        s.weight * s.reps
        for exercise in workout.exercises
        for s in exercise.sets
        if s.completed
    )


def compute_workout_stats(workouts: list[WorkoutResponse]) -> WorkoutStats:
    # Average only over workouts that recorded a duration.
    durations = [w.duration for w in workouts if w.duration is not None]
    total_duration = sum(durations)
    return WorkoutStats(
        total_workouts=len(workouts),
        completed_workouts=sum(1 for w in workouts if w.status == WorkoutStatus.COMPLETED),
        total_duration=total_duration,
        total_calories=sum(w.calories_burned or 0 for w in workouts),
        average_duration=total_duration / len(durations) if durations else 0.0,
        total_volume=sum(workout_volume(w) for w in workouts),
    )


def most_recent(workouts: list[WorkoutResponse], n: int = 5) -> list[WorkoutResponse]:
    """The n most recently created workouts, newest first. Ties keep their input order."""
    return sorted(workouts, key=lambda w: w.created_at, reverse=True)[:n]


def weekly_frequency(workouts: list[WorkoutResponse]) -> dict[str, int]:
    """Workouts per ISO week, keyed like "2024-W03", in chronological order."""
    counts: Counter[str] = Counter()
    for workout in workouts:
        year, week, _ = workout.date.isocalendar()
        counts[f"{year}-W{week:02d}"] += 1
    return dict(sorted(counts.items()))


def exercise_frequency(workouts: list[WorkoutResponse]) -> dict[str, int]:
    """Number of workouts each exercise appears in, most frequent first."""
    counts: Counter[str] = Counter()
    for workout in workouts:
        counts.update(list(dict.fromkeys(e.exercise_name for e in workout.exercises)))
    return dict(counts.most_common())
