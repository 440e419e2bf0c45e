import asyncio
import logging
import time
from typing import Dict, Optional
from app.core.logging import setup_job_logger, release_job_logger
from app.errors import GenerationError, InvalidTransitionError
from app.generators.base import TutorialGenerator
from app.job_store import JobStore
from app.models.video import StoredVideo

logger = logging.getLogger(__name__)

class JobOrchestrator:
    """Registers jobs and runs tutorial generation in the background.

    ``submit`` returns as soon as the job exists. Each job gets exactly one
    task; the task finishes the job with exactly one store transition.
    """

    def __init__(self, store: JobStore, generator: TutorialGenerator, timeout: Optional[float] = None):
        self.store = store
        self.generator = generator
        self.timeout = timeout
        self._tasks: Dict[str, asyncio.Task] = {}

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def submit(self, video: StoredVideo) -> str:
        """Create the job and schedule its generation. Needs a running loop."""
        loop = asyncio.get_running_loop()
        job = self.store.create(video, ai_mode=self.generator.mode)
        job_logger = setup_job_logger(job.id)
        job_logger.info(f"New upload: {job.id} - {video.original_name} ({video.size_label})")
        self._schedule(loop, job.id, video)
        return job.id

    def _schedule(self, loop: asyncio.AbstractEventLoop, job_id: str, video: StoredVideo) -> asyncio.Task:
        if job_id in self._tasks:
            raise RuntimeError(f"Job {job_id} is already scheduled")
        task = loop.create_task(self._run(job_id, video), name=f"generate-{job_id}")
        self._tasks[job_id] = task
        task.add_done_callback(lambda t: self._finished(job_id, t))
        return task

    def _finished(self, job_id: str, task: asyncio.Task) -> None:
        self._tasks.pop(job_id, None)
        if task.cancelled():
            logger.warning(f"Generation for {job_id} was cancelled; job left in processing")
            return
        exc = task.exception()
        if exc is not None:
            logger.critical(f"Generation task for {job_id} crashed", exc_info=exc)

    async def _run(self, job_id: str, video: StoredVideo) -> None:
        job_logger = setup_job_logger(job_id)
        try:
            await self._generate(job_id, video, job_logger)
        finally:
            # Cancelled and crashed runs close their log file too
            release_job_logger(job_id)

    async def _generate(self, job_id: str, video: StoredVideo, job_logger: logging.Logger) -> None:
        job_logger.info(f"Generating tutorial with {self.generator.mode} generator")
        started = time.monotonic()
        try:
            if self.timeout is not None:
                result = await asyncio.wait_for(self.generator.generate(video), timeout=self.timeout)
            else:
                result = await self.generator.generate(video)
        except asyncio.CancelledError:
            raise
        except asyncio.TimeoutError:
            self._fail(job_id, f"Generation timed out after {self.timeout} seconds", job_logger)
            return
        except GenerationError as e:
            self._fail(job_id, str(e), job_logger)
            return
        except Exception as e:
            job_logger.error("Unexpected generator error", exc_info=True)
            self._fail(job_id, f"Unexpected generator error: {str(e)}", job_logger)
            return

        try:
            job = self.store.complete(job_id, result)
        except InvalidTransitionError:
            job_logger.critical(f"Job {job_id} was already terminal when generation finished")
            raise
        elapsed = int((time.monotonic() - started) * 1000)
        job_logger.info(
            f"Generated {job.total_steps} steps in {elapsed}ms",
            extra={"job_id": job_id, "template": job.template_title, "steps": job.total_steps},
        )

    def _fail(self, job_id: str, reason: str, job_logger: logging.Logger) -> None:
        try:
            self.store.fail(job_id, reason)
        except InvalidTransitionError:
            job_logger.critical(f"Job {job_id} was already terminal when generation failed")
            raise
        job_logger.error(f"Generation failed: {reason}", extra={"job_id": job_id})

    async def wait(self, job_id: str) -> None:
        """Wait for a job's generation task, if it is still running."""
        task = self._tasks.get(job_id)
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)

    async def drain(self) -> None:
        """Wait for every outstanding generation task."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks.values()), return_exceptions=True)

    async def shutdown(self) -> None:
        """Cancel outstanding generation. Cancelled jobs stay in processing."""
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
