"""Bulk import endpoints for exercise and workout files."""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import get_db
from src.config.settings import settings
from src.domains.imports.schemas import ImportDataType, ImportResponse
from src.domains.imports.service import (
    ImportService,
    detect_file_type,
    file_type_from_mime,
    parse_file,
)

logger = logging.getLogger(__name__)

router = APIRouter()


async def _parse_upload(file: UploadFile, data_type: ImportDataType) -> list:
    """Read and parse an uploaded file, raising 400 on any problem."""
    file_type = detect_file_type(file.filename) or file_type_from_mime(file.content_type)
    if file_type is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Unsupported file type. Please upload CSV, JSON, or XML files.",
        )

    raw = await file.read()
    if len(raw) > settings.IMPORT_MAX_FILE_BYTES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File too large",
        )
    try:
        content = raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File must be UTF-8 encoded text",
        )

    result = parse_file(content, file_type, data_type)
    if not result.success:
        logger.info(f"Rejected {data_type} import {file.filename}: {len(result.errors)} errors")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "Failed to parse file", "details": result.errors},
        )
    return result.data


@router.post("/exercises", response_model=ImportResponse, response_model_exclude_none=True)
async def import_exercises(
    file: UploadFile,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ImportResponse:
    """Import exercises from a CSV, JSON or XML file.

    Exercises whose name already exists are skipped.
    """
    exercises = await _parse_upload(file, "exercise")
    return await ImportService(db).import_exercises(exercises)


@router.post("/workouts", response_model=ImportResponse, response_model_exclude_none=True)
async def import_workouts(
    file: UploadFile,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ImportResponse:
    """Import workout history from a CSV, JSON or XML file.

    Imported workouts are stored as completed. Exercises are matched by
    name; unknown names are created with category "other".
    """
    workouts = await _parse_upload(file, "workout")
    return await ImportService(db).import_workouts(workouts)
