"""Workout collection store."""
from datetime import datetime
from typing import Any

from src.client.exceptions import ApiError, WorkoutLockedError
from src.client.local_store import StorageKey, generate_id
from src.client.resources import ResourceStore
from src.core.schemas import ensure_utc
from src.domains.workouts.models import WorkoutStatus
from src.domains.workouts.schemas import (
    WorkoutCreate,
    WorkoutExerciseInput,
    WorkoutResponse,
    WorkoutUpdate,
    number_sets,
)


def materialize_exercises(inputs: list[WorkoutExerciseInput]) -> list[dict[str, Any]]:
    """Give submitted exercises and sets local ids, ordering and set numbers 1..N."""
    exercises = []
    for index, item in enumerate(inputs):
        exercises.append({
            "id": generate_id(),
            "exercise_id": item.exercise_id,
            "exercise_name": item.exercise_name.strip(),
            "exercise_category": item.exercise_category,
            "order": item.order if item.order is not None else index,
            "sets": [
                {**s.model_dump(), "id": generate_id()}
                for s in number_sets(item.sets)
            ],
        })
    exercises.sort(key=lambda e: e["order"])
    return exercises


class WorkoutStore(ResourceStore[WorkoutResponse, WorkoutCreate, WorkoutUpdate]):
    """Workouts, remote-first with a local mirror.

    Completed workouts are read-only: updates raise WorkoutLockedError.
    """

    record_model = WorkoutResponse
    create_model = WorkoutCreate
    update_model = WorkoutUpdate
    storage_key = StorageKey.WORKOUTS
    resource_name = "workout"

    def _draft_fields(self, draft: WorkoutCreate) -> dict[str, Any]:
        fields = draft.model_dump(exclude={"exercises"})
        fields["exercises"] = materialize_exercises(draft.exercises)
        return fields

    def _patch_fields(self, patch: WorkoutUpdate) -> dict[str, Any]:
        fields = patch.model_dump(exclude_none=True, exclude={"exercises"})
        if patch.exercises is not None:
            fields["exercises"] = materialize_exercises(patch.exercises)
        return fields

    def _check_editable(self, current: WorkoutResponse | None) -> None:
        if current is not None and current.status == WorkoutStatus.COMPLETED:
            raise WorkoutLockedError(f"Workout {current.id} is completed and cannot be edited")

    def _on_update_error(self, record_id: str, error: ApiError) -> None:
        if error.status_code == 409:
            raise WorkoutLockedError(error.message) from error

    def get_by_status(self, status: WorkoutStatus | str) -> list[WorkoutResponse]:
        status = WorkoutStatus(status)
        return [w for w in self.items if w.status == status]

    def get_by_date_range(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[WorkoutResponse]:
        """Workouts dated within [start, end]. Naive bounds are taken as UTC."""
        start = ensure_utc(start) if start else None
        end = ensure_utc(end) if end else None
        return [
            w for w in self.items
            if (start is None or w.date >= start) and (end is None or w.date <= end)
        ]

    async def complete(
        self,
        workout_id: str,
        duration: int | None = None,
        calories_burned: int | None = None,
        notes: str | None = None,
        exercises: list[WorkoutExerciseInput] | None = None,
    ) -> WorkoutResponse | None:
        """Move a planned workout to completed, optionally recording what was done."""
        patch = WorkoutUpdate(
            status=WorkoutStatus.COMPLETED,
            duration=duration,
            calories_burned=calories_burned,
            notes=notes,
            exercises=exercises,
        )
        return await self.update(workout_id, patch)
