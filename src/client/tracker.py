"""Client facade wiring connectivity, stores, sessions and templates together."""
from pathlib import Path

import httpx
import structlog

from src.client.api import ResourceApi
from src.client.connectivity import ConnectivityMonitor
from src.client.exercises import ExerciseStore
from src.client.local_store import FileLocalStore, LocalStore
from src.client.sessions import SessionTracker
from src.client.templates import TemplateLibrary
from src.client.workouts import WorkoutStore
from src.config.settings import settings

logger = structlog.get_logger(__name__)


class TrackerClient:
    """Owns the HTTP client and every store built on it.

    Usage::

        async with TrackerClient() as client:
            await client.exercises.add({...})
    """

    def __init__(
        self,
        base_url: str | None = None,
        store: LocalStore | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = None,
    ):
        self.http = httpx.AsyncClient(
            base_url=base_url or settings.CLIENT_API_URL,
            timeout=timeout if timeout is not None else settings.CLIENT_TIMEOUT_SECONDS,
            transport=transport,
        )
        self.store = store or FileLocalStore(Path(settings.CLIENT_STORE_DIR))
        self.connectivity = ConnectivityMonitor(self.http, settings.CLIENT_HEALTH_PATH)
        self.exercises = ExerciseStore(ResourceApi(self.http, "/exercises"), self.connectivity, self.store)
        self.workouts = WorkoutStore(ResourceApi(self.http, "/workouts"), self.connectivity, self.store)
        self.sessions = SessionTracker(self.workouts, self.store)
        self.templates = TemplateLibrary(self.store)

    async def start(self) -> None:
        """Probe the backend, load both collections and pick up an unfinished session."""
        await self.connectivity.start()
        await self.exercises.load()
        await self.workouts.load()
        self.sessions.resume()
        logger.info(
            "tracker_started",
            connected=self.connectivity.connected,
            exercises=len(self.exercises.items),
            workouts=len(self.workouts.items),
        )

    async def aclose(self) -> None:
        self.exercises.close()
        self.workouts.close()
        await self.http.aclose()

    async def __aenter__(self) -> "TrackerClient":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
