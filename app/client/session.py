import logging
import mimetypes
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional
import httpx
from app.client.poller import PollingError, StatusPoller
from app.client.sync import MediaPlayer, PlaybackSynchronizer
from app.errors import JobNotFoundError
from app.models.job import Step

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Failed to load tutorial. Please try again."
FAILED_MESSAGE = "Tutorial generation failed. Please try uploading again."


class View(str, Enum):
    UPLOAD = "upload"
    PROCESSING = "processing"
    RESULTS = "results"
    ERROR = "error"


class TutorialSession:
    """Client flow: upload a recording, wait for its tutorial, then play it.

    The session moves through ``upload -> processing -> results``; any
    failure lands on ``error`` with a message and a way back to upload.
    """

    def __init__(self, client: httpx.AsyncClient, poll_interval: float = 2.0,
                 player: Optional[MediaPlayer] = None, poll_timeout: Optional[float] = None,
                 max_poll_errors: Optional[int] = None):
        self.client = client
        self.player = player
        self.poller = StatusPoller(client, interval=poll_interval, timeout=poll_timeout,
                                   max_errors=max_poll_errors, on_update=self._on_update)
        self.view = View.UPLOAD
        self.job_id: Optional[str] = None
        self.job: Optional[Dict[str, Any]] = None
        self.synchronizer: Optional[PlaybackSynchronizer] = None
        self.error_message: Optional[str] = None
        self.can_retry = False

    @property
    def video_url(self) -> Optional[str]:
        if not self.job:
            return None
        return self.job.get("directVideoUrl") or self.job.get("videoUrl")

    def _on_update(self, snapshot: Dict[str, Any]) -> None:
        self.job = snapshot

    def _show_error(self, message: str) -> None:
        self.poller.stop()
        self.view = View.ERROR
        self.error_message = message
        self.can_retry = True

    async def upload(self, path: Path, content_type: Optional[str] = None) -> Optional[str]:
        """Upload a video and start polling for its tutorial."""
        path = Path(path)
        content_type = content_type or mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        try:
            with open(path, "rb") as f:
                response = await self.client.post(
                    "/api/upload", files={"video": (path.name, f, content_type)}
                )
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Upload error: {e}")
            self._show_error("Error uploading file. Please try again.")
            return None

        if response.status_code != 200 or not body.get("success"):
            logger.error(f"Upload rejected: {body}")
            self._show_error(body.get("tip") or body.get("error") or "Upload failed. Please try again.")
            return None

        self.job_id = body["jobId"]
        self.view = View.PROCESSING
        self.error_message = None
        self.can_retry = False
        logger.info(f"Upload successful: {self.job_id}")
        self.poller.start(self.job_id)
        return self.job_id

    async def wait_for_results(self) -> View:
        """Wait for the active poll and move to the results or error view."""
        try:
            snapshot = await self.poller.wait()
        except JobNotFoundError:
            self._show_error(LOAD_ERROR_MESSAGE)
            return self.view
        except PollingError as e:
            logger.error(str(e))
            self._show_error(LOAD_ERROR_MESSAGE)
            return self.view

        if snapshot is None:
            # reset() tore the view down mid-poll
            return self.view

        self.job = snapshot
        if snapshot["status"] == "failed":
            logger.error(f"Job {self.job_id} failed: {snapshot.get('error')}")
            self._show_error(FAILED_MESSAGE)
            return self.view

        steps = [Step(**{key: raw[key] for key in Step.model_fields if key in raw}) for raw in snapshot.get("steps", [])]
        self.synchronizer = PlaybackSynchronizer(steps, player=self.player)
        self.view = View.RESULTS
        return self.view

    def reset(self) -> None:
        """Back to the upload view, tearing down any poll."""
        self.poller.stop()
        self.view = View.UPLOAD
        self.job_id = None
        self.job = None
        self.synchronizer = None
        self.error_message = None
        self.can_retry = False
