"""Workout CRUD endpoints."""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import get_db
from src.domains.workouts.models import WorkoutStatus
from src.domains.workouts.schemas import WorkoutCreate, WorkoutResponse, WorkoutUpdate
from src.domains.workouts.service import WorkoutService

logger = logging.getLogger(__name__)

router = APIRouter()


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Workout not found",
    )


@router.get("", response_model=list[WorkoutResponse])
async def list_workouts(
    db: Annotated[AsyncSession, Depends(get_db)],
    workout_status: Annotated[WorkoutStatus | None, Query(alias="status")] = None,
) -> list[WorkoutResponse]:
    """List workouts, most recent first."""
    service = WorkoutService(db)
    try:
        workouts = await service.list_workouts(status=workout_status)
    except SQLAlchemyError as e:
        logger.error(f"Failed to fetch workouts: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch workouts",
        )
    return [WorkoutResponse.model_validate(w) for w in workouts]


@router.post("", response_model=WorkoutResponse, status_code=status.HTTP_201_CREATED)
async def create_workout(
    request: WorkoutCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> WorkoutResponse:
    """Create a workout with its exercises and sets."""
    service = WorkoutService(db)
    try:
        workout = await service.create_workout(
            name=request.name,
            date=request.date,
            status=request.status,
            notes=request.notes,
            duration=request.duration,
            calories_burned=request.calories_burned,
            exercises=request.exercises,
        )
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to create workout: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create workout",
        )

    return WorkoutResponse.model_validate(workout)


@router.get("/{workout_id}", response_model=WorkoutResponse)
async def get_workout(
    workout_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> WorkoutResponse:
    """Get workout details."""
    service = WorkoutService(db)
    workout = await service.get_workout_by_id(workout_id)

    if not workout:
        raise _not_found()

    return WorkoutResponse.model_validate(workout)


@router.put("/{workout_id}", response_model=WorkoutResponse)
async def update_workout(
    workout_id: str,
    request: WorkoutUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> WorkoutResponse:
    """Update a planned workout. Completed workouts are read-only."""
    service = WorkoutService(db)
    workout = await service.get_workout_by_id(workout_id)

    if not workout:
        raise _not_found()

    if workout.status == WorkoutStatus.COMPLETED:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Completed workouts cannot be edited",
        )

    try:
        updated = await service.update_workout(
            workout=workout,
            name=request.name,
            date=request.date,
            status=request.status,
            notes=request.notes,
            duration=request.duration,
            calories_burned=request.calories_burned,
            exercises=request.exercises,
        )
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to update workout {workout_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update workout",
        )

    return WorkoutResponse.model_validate(updated)


@router.delete("/{workout_id}")
async def delete_workout(
    workout_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict[str, bool]:
    """Delete a workout."""
    service = WorkoutService(db)
    workout = await service.get_workout_by_id(workout_id)

    if not workout:
        raise _not_found()

    try:
        await service.delete_workout(workout)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to delete workout {workout_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete workout",
        )

    return {"success": True}
