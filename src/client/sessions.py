"""Live tracking of a planned workout until it is finished."""
from collections.abc import Callable
from datetime import datetime

import structlog
from pydantic import BaseModel, Field, ValidationError

from src.client.exceptions import DraftValidationError, SessionError
from src.client.local_store import LocalStore, StorageKey, generate_id
from src.client.resources import format_validation_error
from src.client.workouts import WorkoutStore
from src.core.models import utcnow
from src.core.schemas import ensure_utc
from src.domains.exercises.models import ExerciseCategory
from src.domains.workouts.models import WorkoutStatus
from src.domains.workouts.schemas import SetInput, WorkoutExerciseInput

logger = structlog.get_logger(__name__)


class SessionSet(BaseModel):
    set_number: int = Field(ge=1)
    reps: int = Field(default=0, ge=0)
    weight: float = Field(default=0.0, ge=0)
    completed: bool = False


class SessionExercise(BaseModel):
    exercise_id: str | None = None
    name: str
    category: ExerciseCategory | None = None
    sets: list[SessionSet] = Field(default_factory=list)


class ActiveSession(BaseModel):
    """The in-progress session, persisted after every change."""

    workout_id: str
    name: str
    started_at: datetime
    exercises: list[SessionExercise] = Field(default_factory=list)


class SessionSummary(BaseModel):
    """Record of a finished session."""

    id: str
    workout_id: str
    name: str
    started_at: datetime
    ended_at: datetime
    duration_minutes: int
    total_volume: float
    completed_sets: int
    total_sets: int


def session_volume(session: ActiveSession) -> float:
    return sum(
        s.weight * s.reps
        for exercise in session.exercises
        for s in exercise.sets
        if s.completed
    )


class SessionTracker:
    """Runs one active session at a time on top of a WorkoutStore.

    Every mutation is written to the local store under the active session key
    so that a session survives a restart (see ``resume``).
    """

    def __init__(
        self,
        workouts: WorkoutStore,
        store: LocalStore,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.workouts = workouts
        self.store = store
        self.clock = clock
        self.active: ActiveSession | None = None

    def _persist(self) -> None:
        if self.active is not None:
            self.store.set(StorageKey.ACTIVE_SESSION, self.active.model_dump(mode="json"))

    def _require(self) -> ActiveSession:
        if self.active is None:
            raise SessionError("No active session")
        return self.active

    def _exercise(self, exercise_index: int) -> SessionExercise:
        exercises = self._require().exercises
        if not 0 <= exercise_index < len(exercises):
            raise SessionError(f"No exercise at position {exercise_index}")
        return exercises[exercise_index]

    def _set(self, exercise_index: int, set_index: int) -> SessionSet:
        sets = self._exercise(exercise_index).sets
        if not 0 <= set_index < len(sets):
            raise SessionError(f"No set at position {set_index}")
        return sets[set_index]

    def start(self, workout_id: str) -> ActiveSession:
        """Begin tracking a planned workout, replacing any unfinished session."""
        workout = self.workouts.get(workout_id)
        if workout is None:
            raise SessionError(f"Workout {workout_id} not found")
        if workout.status != WorkoutStatus.PLANNED:
            raise SessionError("Only planned workouts can be started")
        if self.active is not None:
            logger.info("session_replaced", workout_id=self.active.workout_id)

        self.active = ActiveSession(
            workout_id=workout.id,
            name=workout.name,
            started_at=self.clock(),
            exercises=[
                SessionExercise(
                    exercise_id=e.exercise_id,
                    name=e.exercise_name,
                    category=e.exercise_category,
                    sets=[
                        SessionSet(set_number=s.set_number, reps=s.reps, weight=s.weight, completed=s.completed)
                        for s in e.sets
                    ],
                )
                for e in workout.exercises
            ],
        )
        self._persist()
        logger.info("session_started", workout_id=workout.id)
        return self.active

    def resume(self) -> ActiveSession | None:
        """Reload a persisted session. Unreadable sessions are discarded."""
        raw = self.store.get(StorageKey.ACTIVE_SESSION)
        if raw is None:
            self.active = None
            return None
        try:
            self.active = ActiveSession.model_validate(raw)
        except ValidationError:
            logger.warning("active_session_discarded")
            self.store.remove(StorageKey.ACTIVE_SESSION)
            self.active = None
        return self.active

    def add_exercise(
        self,
        name: str,
        exercise_id: str | None = None,
        category: ExerciseCategory | None = None,
    ) -> int:
        """Append an exercise with no sets. Returns its position."""
        session = self._require()
        if not name.strip():
            raise DraftValidationError("Exercise name is required")
        session.exercises.append(
            SessionExercise(exercise_id=exercise_id, name=name.strip(), category=category)
        )
        self._persist()
        return len(session.exercises) - 1

    def add_set(self, exercise_index: int, reps: int | None = None, weight: float | None = None) -> SessionSet:
        """Append a set, copying reps and weight from the previous set unless given."""
        exercise = self._exercise(exercise_index)
        previous = exercise.sets[-1] if exercise.sets else None
        try:
            new_set = SessionSet(
                set_number=len(exercise.sets) + 1,
                reps=reps if reps is not None else (previous.reps if previous else 0),
                weight=weight if weight is not None else (previous.weight if previous else 0.0),
            )
        except ValidationError as e:
            raise DraftValidationError(format_validation_error(e)) from e
        exercise.sets.append(new_set)
        self._persist()
        return new_set

    def remove_set(self, exercise_index: int, set_index: int) -> None:
        """Remove a set and renumber the rest 1..N."""
        self._set(exercise_index, set_index)
        exercise = self._exercise(exercise_index)
        del exercise.sets[set_index]
        for number, item in enumerate(exercise.sets, start=1):
            item.set_number = number
        self._persist()

    def update_set(
        self,
        exercise_index: int,
        set_index: int,
        reps: int | None = None,
        weight: float | None = None,
        completed: bool | None = None,
    ) -> SessionSet:
        current = self._set(exercise_index, set_index)
        changes = {
            k: v for k, v in {"reps": reps, "weight": weight, "completed": completed}.items()
            if v is not None
        }
        try:
            updated = SessionSet.model_validate({**current.model_dump(), **changes})
        except ValidationError as e:
            raise DraftValidationError(format_validation_error(e)) from e
        self._exercise(exercise_index).sets[set_index] = updated
        self._persist()
        return updated

    def toggle_set(self, exercise_index: int, set_index: int) -> SessionSet:
        current = self._set(exercise_index, set_index)
        return self.update_set(exercise_index, set_index, completed=not current.completed)

    async def finish(self, calories_burned: int | None = None, notes: str | None = None) -> SessionSummary:
        """Complete the workout with what was recorded and close the session."""
        session = self._require()
        ended_at = self.clock()
        elapsed = ended_at - ensure_utc(session.started_at)
        duration_minutes = max(int(elapsed.total_seconds() // 60), 0)

        exercises = [
            WorkoutExerciseInput(
                exercise_id=e.exercise_id,
                exercise_name=e.name,
                exercise_category=e.category,
                order=order,
                sets=[
                    SetInput(set_number=number, reps=s.reps, weight=s.weight, completed=s.completed)
                    for number, s in enumerate(e.sets, start=1)
                ],
            )
            for order, e in enumerate(session.exercises)
        ]
        workout = await self.workouts.complete(
            session.workout_id,
            duration=duration_minutes,
            calories_burned=calories_burned,
            notes=notes,
            exercises=exercises,
        )
        if workout is None:
            raise SessionError(f"Workout {session.workout_id} no longer exists")

        all_sets = [s for e in session.exercises for s in e.sets]
        summary = SessionSummary(
            id=generate_id(),
            workout_id=session.workout_id,
            name=session.name,
            started_at=session.started_at,
            ended_at=ended_at,
            duration_minutes=duration_minutes,
            total_volume=session_volume(session),
            completed_sets=sum(1 for s in all_sets if s.completed),
            total_sets=len(all_sets),
        )
        history = self.store.get(StorageKey.WORKOUT_SESSIONS, [])
        if not isinstance(history, list):
            history = []
        history.append(summary.model_dump(mode="json"))
        self.store.set(StorageKey.WORKOUT_SESSIONS, history)

        self.store.remove(StorageKey.ACTIVE_SESSION)
        self.active = None
        logger.info(
            "session_finished",
            workout_id=summary.workout_id,
            duration_minutes=duration_minutes,
            total_volume=summary.total_volume,
        )
        return summary

    def cancel(self) -> None:
        """Drop the active session without touching the workout."""
        self.store.remove(StorageKey.ACTIVE_SESSION)
        self.active = None

    def history(self) -> list[SessionSummary]:
        raw = self.store.get(StorageKey.WORKOUT_SESSIONS, [])
        if not isinstance(raw, list):
            return []
        summaries = []
        for entry in raw:
            try:
                summaries.append(SessionSummary.model_validate(entry))
            except ValidationError:
                logger.warning("session_summary_skipped")
        return summaries
