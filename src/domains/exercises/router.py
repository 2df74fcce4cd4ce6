"""Exercise CRUD endpoints."""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import get_db
from src.domains.exercises.models import ExerciseCategory
from src.domains.exercises.schemas import ExerciseCreate, ExerciseResponse, ExerciseUpdate
from src.domains.exercises.service import ExerciseService

logger = logging.getLogger(__name__)

router = APIRouter()


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Exercise not found",
    )


@router.get("", response_model=list[ExerciseResponse])
async def list_exercises(
    db: Annotated[AsyncSession, Depends(get_db)],
    category: Annotated[ExerciseCategory | None, Query()] = None,
    search: Annotated[str | None, Query(max_length=100)] = None,
) -> list[ExerciseResponse]:
    """List exercises ordered by name."""
    service = ExerciseService(db)
    try:
        exercises = await service.list_exercises(category=category, search=search)
    except SQLAlchemyError as e:
        logger.error(f"Failed to fetch exercises: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch exercises",
        )
    return [ExerciseResponse.model_validate(e) for e in exercises]


@router.post("", response_model=ExerciseResponse, status_code=status.HTTP_201_CREATED)
async def create_exercise(
    request: ExerciseCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ExerciseResponse:
    """Create an exercise."""
    service = ExerciseService(db)
    try:
        exercise = await service.create_exercise(
            name=request.name,
            category=request.category,
            muscle_groups=request.muscle_groups,
            equipment=request.equipment,
            difficulty=request.difficulty,
            instructions=request.instructions,
            notes=request.notes,
        )
    except IntegrityError:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="An exercise with this name already exists",
        )
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to create exercise: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create exercise",
        )

    return ExerciseResponse.model_validate(exercise)


@router.get("/{exercise_id}", response_model=ExerciseResponse)
async def get_exercise(
    exercise_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ExerciseResponse:
    """Get exercise details."""
    service = ExerciseService(db)
    exercise = await service.get_exercise_by_id(exercise_id)

    if not exercise:
        raise _not_found()

    return ExerciseResponse.model_validate(exercise)


@router.put("/{exercise_id}", response_model=ExerciseResponse)
async def update_exercise(
    exercise_id: str,
    request: ExerciseUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ExerciseResponse:
    """Update an exercise."""
    service = ExerciseService(db)
    exercise = await service.get_exercise_by_id(exercise_id)

    if not exercise:
        raise _not_found()

    try:
        updated = await service.update_exercise(
            exercise=exercise,
            name=request.name,
            category=request.category,
            muscle_groups=request.muscle_groups,
            equipment=request.equipment,
            difficulty=request.difficulty,
            instructions=request.instructions,
            notes=request.notes,
        )
    except IntegrityError:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="An exercise with this name already exists",
        )
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to update exercise {exercise_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update exercise",
        )

    return ExerciseResponse.model_validate(updated)


@router.delete("/{exercise_id}")
async def delete_exercise(
    exercise_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict[str, bool]:
    """Delete an exercise."""
    service = ExerciseService(db)
    exercise = await service.get_exercise_by_id(exercise_id)

    if not exercise:
        raise _not_found()

    try:
        await service.delete_exercise(exercise)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to delete exercise {exercise_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete exercise",
        )

    return {"success": True}
