"""Test configuration and fixtures for the Workout Tracker API and client."""

import json
from collections.abc import AsyncGenerator, Callable
from datetime import datetime, timezone
from typing import Any

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from src.client.api import ResourceApi
from src.client.connectivity import ConnectivityMonitor
from src.client.exercises import ExerciseStore
from src.client.local_store import MemoryLocalStore
from src.client.workouts import WorkoutStore
from src.config.database import Base, get_db
from src.domains.exercises.models import Difficulty, Exercise, ExerciseCategory
from src.domains.workouts.models import Workout, WorkoutExercise, WorkoutSet, WorkoutStatus
from src.main import create_app

# Test database URL - use SQLite in-memory for tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

API_BASE_URL = "http://test/api"


@pytest.fixture(scope="function")
async def test_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
    )

    # Import all models to register them
    from src.domains import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture(scope="function")
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session


@pytest.fixture(scope="function")
def app(db_session):
    """Application with the database dependency bound to the test session."""
    application = create_app()

    async def override_get_db():
        yield db_session

    application.dependency_overrides[get_db] = override_get_db
    yield application
    application.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with database session override."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


@pytest.fixture
async def api_http(app) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client rooted at the API prefix, the way the tracker client talks to it."""
    async with httpx.AsyncClient(
        transport=ASGITransport(app=app),
        base_url=API_BASE_URL,
    ) as http:
        yield http


@pytest.fixture
def memory_store() -> MemoryLocalStore:
    """Empty in-memory local store."""
    return MemoryLocalStore()


# =============================================================================
# Database samples
# =============================================================================


@pytest.fixture
async def sample_exercise(db_session: AsyncSession) -> Exercise:
    """Create a sample exercise."""
    exercise = Exercise(
        name="Bench Press",
        category=ExerciseCategory.STRENGTH,
        muscle_groups=["chest", "triceps"],
        equipment="Barbell",
        difficulty=Difficulty.INTERMEDIATE,
    )
    db_session.add(exercise)
    await db_session.commit()
    await db_session.refresh(exercise)
    return exercise


@pytest.fixture
async def sample_workout(db_session: AsyncSession, sample_exercise: Exercise) -> Workout:
    """Create a planned workout with one exercise and two sets."""
    workout = Workout(
        name="Push Day",
        date=datetime(2024, 3, 4, 18, 0, tzinfo=timezone.utc),
        status=WorkoutStatus.PLANNED,
        exercises=[
            WorkoutExercise(
                exercise_id=str(sample_exercise.id),
                exercise_name=sample_exercise.name,
                exercise_category=sample_exercise.category.value,
                order=0,
                sets=[
                    WorkoutSet(set_number=1, reps=10, weight=60.0),
                    WorkoutSet(set_number=2, reps=8, weight=70.0),
                ],
            )
        ],
    )
    db_session.add(workout)
    await db_session.commit()
    await db_session.refresh(workout)
    return workout


# =============================================================================
# Client-side fakes
# =============================================================================


def record(record_id: str, **fields: Any) -> dict[str, Any]:
    """A record as the API would return it."""
    now = "2024-03-01T10:00:00+00:00"
    return {"id": record_id, "created_at": now, "updated_at": now, **fields}


def exercise_record(record_id: str, name: str, category: str = "strength", muscle_groups=None, **fields) -> dict:
    return record(
        record_id,
        name=name,
        category=category,
        muscle_groups=muscle_groups or ["chest"],
        **fields,
    )


def workout_record(record_id: str, name: str, date: str = "2024-03-04T18:00:00+00:00", **fields) -> dict:
    return record(record_id, name=name, date=date, **fields)


class FakeApi:
    """Scripted REST backend served through httpx.MockTransport.

    Collections live in ``collections``; ``fail`` maps (method, path) to a
    status code to return instead, and ``offline`` makes every request raise
    a connection error. Every request is recorded in ``calls``.
    """

    def __init__(self, connected: bool = True):
        self.collections: dict[str, dict[str, dict[str, Any]]] = {"exercises": {}, "workouts": {}}
        self.connected = connected
        self.offline = False
        self.fail: dict[tuple[str, str], int] = {}
        self.calls: list[tuple[str, str]] = []
        self._next_id = 1

    def seed(self, collection: str, *records: dict[str, Any]) -> None:
        for item in records:
            self.collections[collection][item["id"]] = item

    def seed_exercise(self, record_id: str, name: str, **fields: Any) -> dict[str, Any]:
        item = exercise_record(record_id, name, **fields)
        self.seed("exercises", item)
        return item

    def seed_workout(self, record_id: str, name: str, **fields: Any) -> dict[str, Any]:
        item = workout_record(record_id, name, **fields)
        self.seed("workouts", item)
        return item

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/api")
        self.calls.append((request.method, path))
        if self.offline:
            raise httpx.ConnectError("connection refused", request=request)
        if (request.method, path) in self.fail:
            code = self.fail[(request.method, path)]
            return httpx.Response(code, json={"error": f"failure {code}"})

        if path == "/health/database":
            return httpx.Response(200, json={"connected": self.connected, "timestamp": "now"})

        parts = path.strip("/").split("/")
        collection = self.collections.get(parts[0])
        if collection is None:
            return httpx.Response(404, json={"error": "Not found"})

        if len(parts) == 1:
            if request.method == "GET":
                return httpx.Response(200, json=list(collection.values()))
            if request.method == "POST":
                body = json.loads(request.content)
                created = record(f"srv-{self._next_id}", **body)
                self._next_id += 1
                collection[created["id"]] = created
                return httpx.Response(201, json=created)

        record_id = parts[1]
        existing = collection.get(record_id)
        if existing is None:
            return httpx.Response(404, json={"error": "Not found"})
        if request.method == "GET":
            return httpx.Response(200, json=existing)
        if request.method == "PUT":
            if existing.get("status") == "completed":
                return httpx.Response(409, json={"error": "Completed workouts cannot be edited"})
            updated = {**existing, **json.loads(request.content), "updated_at": "2024-03-02T10:00:00+00:00"}
            collection[record_id] = updated
            return httpx.Response(200, json=updated)
        if request.method == "DELETE":
            del collection[record_id]
            return httpx.Response(200, json={"success": True})
        return httpx.Response(405, json={"error": "Method not allowed"})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def fake_api() -> FakeApi:
    return FakeApi()


@pytest.fixture
async def fake_http(fake_api: FakeApi) -> AsyncGenerator[httpx.AsyncClient, None]:
    async with httpx.AsyncClient(transport=fake_api.transport(), base_url=API_BASE_URL) as http:
        yield http


@pytest.fixture
def make_stores(fake_http: httpx.AsyncClient, memory_store: MemoryLocalStore) -> Callable:
    """Build connected exercise and workout stores over the fake backend."""

    async def build(connected: bool = True) -> tuple[ExerciseStore, WorkoutStore, ConnectivityMonitor]:
        connectivity = ConnectivityMonitor(fake_http)
        if connected:
            await connectivity.start()
        else:
            connectivity.connected = False
            connectivity.checking = False
        exercises = ExerciseStore(ResourceApi(fake_http, "/exercises"), connectivity, memory_store)
        workouts = WorkoutStore(ResourceApi(fake_http, "/workouts"), connectivity, memory_store)
        return exercises, workouts, connectivity

    return build
