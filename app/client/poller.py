import asyncio
import logging
from typing import Any, Callable, Dict, Optional
import httpx
from app.errors import JobNotFoundError

logger = logging.getLogger(__name__)

TERMINAL_STATUSES = {"completed", "failed"}


class PollingError(RuntimeError):
    """Polling gave up before the job reached a terminal state."""


class StatusPoller:
    """Polls ``GET /api/job/{id}`` on a fixed interval until the job is terminal.

    One poller backs one view, so it runs at most one polling task: starting
    a new poll cancels the previous one.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        interval: float = 2.0,
        timeout: Optional[float] = None,
        max_errors: Optional[int] = None,
        on_update: Optional[Callable[[Dict[str, Any]], None]] = None,
    ):
        self.client = client
        self.interval = interval
        self.timeout = timeout
        self.max_errors = max_errors
        self.on_update = on_update
        self.job_id: Optional[str] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, job_id: str) -> asyncio.Task:
        """Begin polling ``job_id``, replacing any poll already running."""
        self.stop()
        self.job_id = job_id
        self._task = asyncio.get_running_loop().create_task(self._poll(job_id), name=f"poll-{job_id}")
        return self._task

    def stop(self) -> None:
        """Cancel the running poll, if any."""
        if self._task is not None and not self._task.done():
            logger.debug(f"Stopping poll for {self.job_id}")
            self._task.cancel()
        self._task = None

    async def wait(self) -> Optional[Dict[str, Any]]:
        """Terminal snapshot of the current poll.

        Returns ``None`` when the poll is stopped or replaced while waiting.
        Cancelling the waiter itself still raises ``CancelledError``.
        """
        if self._task is None:
            raise RuntimeError("No poll has been started")
        task = self._task
        await asyncio.wait({task})
        if task.cancelled():
            return None
        return task.result()

    async def fetch(self, job_id: str) -> Dict[str, Any]:
        response = await self.client.get(f"/api/job/{job_id}")
        if response.status_code == 404:
            raise JobNotFoundError(job_id)
        response.raise_for_status()
        return response.json()

    async def _poll(self, job_id: str) -> Dict[str, Any]:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.timeout if self.timeout is not None else None
        errors = 0
        while True:
            try:
                snapshot = await self.fetch(job_id)
            except (httpx.TransportError, httpx.HTTPStatusError, ValueError) as e:
                errors += 1
                logger.warning(f"Polling error for {job_id} ({errors}): {e}")
                if self.max_errors is not None and errors >= self.max_errors:
                    raise PollingError(f"Gave up polling {job_id} after {errors} errors") from e
            else:
                errors = 0
                if self.on_update is not None:
                    self.on_update(snapshot)
                if snapshot.get("status") in TERMINAL_STATUSES:
                    logger.info(f"Job {job_id} finished with status {snapshot['status']}")
                    return snapshot
            if deadline is not None and loop.time() + self.interval > deadline:
                raise PollingError(f"Job {job_id} did not finish within {self.timeout} seconds")
            await asyncio.sleep(self.interval)
