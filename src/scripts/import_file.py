"""
Import exercises or workouts from a CSV, JSON or XML file straight into the database.

Run with:
    python -m src.scripts.import_file exercises path/to/exercises.csv
    python -m src.scripts.import_file workouts path/to/history.json
"""

import asyncio
import sys
from pathlib import Path

import structlog

from src.config.database import AsyncSessionLocal, init_db
from src.domains.imports.service import ImportService, detect_file_type, parse_file

logger = structlog.get_logger(__name__)


async def import_file(path: Path, data_type: str) -> int:
    """Parse and import one file. Returns a process exit code."""
    file_type = detect_file_type(path.name)
    if file_type is None:
        logger.error("unsupported_file_type", path=str(path))
        return 2

    content = path.read_text(encoding="utf-8-sig")
    result = parse_file(content, file_type, data_type)
    if not result.success:
        for error in result.errors:
            logger.error("parse_error", path=str(path), error=error)
        return 1

    await init_db()
    async with AsyncSessionLocal() as session:
        service = ImportService(session)
        if data_type == "exercise":
            response = await service.import_exercises(result.data)
        else:
            response = await service.import_workouts(result.data)

    logger.info(
        "import_finished",
        path=str(path),
        total=response.summary.total,
        imported=response.summary.imported,
        skipped=response.summary.skipped,
        errors=response.summary.errors,
    )
    for error in response.errors or []:
        logger.warning("import_error", error=error)
    return 0 if not response.errors else 1


async def main() -> int:
    """Main function to run the import."""
    import argparse

    parser = argparse.ArgumentParser(description="Import exercises or workouts from a file")
    parser.add_argument("kind", choices=["exercises", "workouts"], help="What the file contains")
    parser.add_argument("path", type=Path, help="CSV, JSON or XML file")
    args = parser.parse_args()

    if not args.path.is_file():
        logger.error("file_not_found", path=str(args.path))
        return 2

    data_type = "exercise" if args.kind == "exercises" else "workout"
    logger.info("import_script_started", kind=args.kind, path=str(args.path))
    return await import_file(args.path, data_type)


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
