"""Tests for the seed and file import scripts."""
from unittest.mock import AsyncMock, patch

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.domains.exercises.models import Exercise
from src.domains.exercises.service import ExerciseService
from src.scripts.import_file import import_file
from src.scripts.seed_exercises import EXERCISES, seed_exercises


class TestSeedExercises:
    async def test_seed_empty_database(self, db_session: AsyncSession):
        count = await seed_exercises(db_session)

        assert count == len(EXERCISES)
        assert await ExerciseService(db_session).count_exercises() == len(EXERCISES)

    async def test_seed_skips_when_populated(self, db_session: AsyncSession, sample_exercise: Exercise):
        assert await seed_exercises(db_session) == 0
        assert await ExerciseService(db_session).count_exercises() == 1

    async def test_seed_with_clear(self, db_session: AsyncSession, sample_exercise: Exercise):
        count = await seed_exercises(db_session, clear_existing=True)

        assert count == len(EXERCISES)
        names = (await db_session.execute(select(Exercise.name))).scalars().all()
        assert len(names) == len(set(names)) == len(EXERCISES)


class TestImportFile:
    async def _run(self, test_engine, path, data_type: str) -> int:
        sessions = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
        with patch("src.scripts.import_file.init_db", AsyncMock()), \
                patch("src.scripts.import_file.AsyncSessionLocal", sessions):
            return await import_file(path, data_type)

    async def test_imports_exercises(self, test_engine, db_session: AsyncSession, tmp_path):
        path = tmp_path / "exercises.csv"
        path.write_text("name,category,muscle groups\nPlank,strength,abs\n", encoding="utf-8")

        assert await self._run(test_engine, path, "exercise") == 0
        assert await ExerciseService(db_session).get_exercise_by_name("plank") is not None

    async def test_parse_errors_exit_nonzero(self, test_engine, tmp_path):
        path = tmp_path / "exercises.json"
        path.write_text('[{"name": "Plank"}]', encoding="utf-8")

        assert await self._run(test_engine, path, "exercise") == 1

    async def test_unsupported_extension(self, test_engine, tmp_path):
        path = tmp_path / "exercises.yaml"
        path.write_text("- Plank", encoding="utf-8")

        assert await self._run(test_engine, path, "exercise") == 2
