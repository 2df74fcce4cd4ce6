"""Tests for workout statistics."""
from datetime import datetime, timedelta, timezone

from src.client.stats import (
    compute_workout_stats,
    exercise_frequency,
    most_recent,
    weekly_frequency,
    workout_volume,
)
from src.domains.workouts.schemas import WorkoutResponse

_BASE = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def _workout(
    workout_id: str,
    duration: int | None = None,
    calories: int | None = None,
    status: str = "completed",
    date: datetime = _BASE,
    created_offset: int = 0,
    exercises: list[dict] | None = None,
) -> WorkoutResponse:
    created = _BASE + timedelta(hours=created_offset)
    return WorkoutResponse.model_validate({
        "id": workout_id,
        "name": f"Workout {workout_id}",
        "date": date,
        "status": status,
        "duration": duration,
        "calories_burned": calories,
        "created_at": created,
        "updated_at": created,
        "exercises": exercises or [],
    })


def _exercise(name: str, sets: list[tuple[int, float, bool]]) -> dict:
    return {
        "id": f"x-{name}",
        "exercise_name": name,
        "sets": [
            {"id": f"s-{name}-{n}", "set_number": n, "reps": reps, "weight": weight, "completed": done}
            for n, (reps, weight, done) in enumerate(sets, start=1)
        ],
    }


class TestComputeWorkoutStats:
    def test_totals_and_average(self):
        workouts = [
            _workout("1", duration=60, calories=300),
            _workout("2", duration=45, calories=250),
            _workout("3", duration=30, calories=200),
        ]

        stats = compute_workout_stats(workouts)

        assert stats.total_workouts == 3
        assert stats.completed_workouts == 3
        assert stats.total_duration == 135
        assert stats.average_duration == 45
        assert stats.total_calories == 750

    def test_average_skips_missing_durations(self):
        workouts = [
            _workout("1", duration=40),
            _workout("2", status="planned"),
        ]

        stats = compute_workout_stats(workouts)

        assert stats.completed_workouts == 1
        assert stats.average_duration == 40
        assert stats.total_calories == 0

    def test_empty(self):
        stats = compute_workout_stats([])

        assert stats.total_workouts == 0
        assert stats.average_duration == 0.0
        assert stats.total_volume == 0.0

    def test_volume_counts_completed_sets_only(self):
        workout = _workout("1", exercises=[
            _exercise("Squat", [(5, 100.0, True), (5, 100.0, False)]),
            _exercise("Curl", [(10, 12.5, True)]),
        ])

        assert workout_volume(workout) == 625.0
        assert compute_workout_stats([workout, workout]).total_volume == 1250.0


class TestMostRecent:
    def test_newest_created_first(self):
        workouts = [_workout(str(i), created_offset=i) for i in range(8)]

        recent = most_recent(workouts)

        assert [w.id for w in recent] == ["7", "6", "5", "4", "3"]

    def test_fewer_than_n(self):
        workouts = [_workout("a"), _workout("b", created_offset=1)]

        assert [w.id for w in most_recent(workouts, n=5)] == ["b", "a"]


class TestFrequencies:
    def test_weekly_frequency(self):
        workouts = [
            _workout("1", date=datetime(2024, 1, 16, tzinfo=timezone.utc)),
            _workout("2", date=datetime(2024, 1, 1, tzinfo=timezone.utc)),
            _workout("3", date=datetime(2024, 1, 18, tzinfo=timezone.utc)),
        ]

        assert weekly_frequency(workouts) == {"2024-W01": 1, "2024-W03": 2}

    def test_exercise_frequency_counts_workouts(self):
        workouts = [
            _workout("1", exercises=[
                _exercise("Squat", [(5, 100.0, True)]),
                _exercise("Squat", [(5, 100.0, True)]),
                _exercise("Lunge", [(10, 20.0, True)]),
            ]),
            _workout("2", exercises=[_exercise("Squat", [(5, 100.0, True)])]),
        ]

        frequency = exercise_frequency(workouts)

        assert frequency == {"Squat": 2, "Lunge": 1}
        assert list(frequency) == ["Squat", "Lunge"]
