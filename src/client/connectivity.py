"""Backend reachability tracking."""
import httpx
import structlog

logger = structlog.get_logger(__name__)


class ConnectivityMonitor:
    """Tracks whether the API and its database answer.

    ``connected`` starts False and ``checking`` starts True until the first
    probe settles. Consumers read ``connected`` and pick their own fallback.
    """

    def __init__(self, http: httpx.AsyncClient, health_path: str = "/health/database"):
        self.http = http
        self.health_path = health_path
        self.connected = False
        self.checking = True
        self.error: str | None = None

    async def start(self) -> bool:
        """Initial probe."""
        return await self.recheck()

    async def recheck(self) -> bool:
        """Probe the health endpoint once. Never raises."""
        self.checking = True
        try:
            response = await self.http.get(self.health_path)
            if not response.is_success:
                self._settle(False, f"Health check returned HTTP {response.status_code}")
            else:
                body = response.json()
                if isinstance(body, dict) and body.get("connected"):
                    self._settle(True, None)
                else:
                    error = body.get("error") if isinstance(body, dict) else None
                    self._settle(False, error or "Database not connected")
        except (httpx.HTTPError, ValueError) as e:
            self._settle(False, str(e) or type(e).__name__)
        return self.connected

    def _settle(self, connected: bool, error: str | None) -> None:
        if connected != self.connected:
            logger.info("connectivity_changed", connected=connected, error=error)
        self.connected = connected
        self.error = error
        self.checking = False
