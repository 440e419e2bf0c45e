from typing import Dict, List
from threading import Lock
import time
import uuid
from app.errors import InvalidTransitionError, JobNotFoundError
from app.models.job import Job, JobStatus, TutorialResult, utcnow
from app.models.video import StoredVideo

class JobStore:
    """Thread-safe in-memory job store.

    Records are immutable; every transition replaces the whole record under
    the lock, so readers see either the processing record or the terminal one.
    """
    def __init__(self):
        self._jobs: Dict[str, Job] = {}
        self._lock = Lock()

    def _new_id(self) -> str:
        # Caller holds the lock
        while True:
            job_id = f"job_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"
            if job_id not in self._jobs:
                return job_id

    def create(self, video: StoredVideo, ai_mode: str = "simulated") -> Job:
        """Register a new job in the processing state.

        ``ai_mode`` names the generator that will produce the tutorial, so
        clients see it while the job is still processing.
        """
        with self._lock:
            job = Job(
                id=self._new_id(),
                status=JobStatus.PROCESSING,
                video_url=video.url,
                video_filename=video.filename,
                original_name=video.original_name,
                file_size=video.size_label,
                ai_mode=ai_mode,
            )
            self._jobs[job.id] = job
        return job

    def get(self, job_id: str) -> Job:
        """Get job by ID."""
        with self._lock:
            job = self._jobs.get(job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        return job

    def complete(self, job_id: str, result: TutorialResult) -> Job:
        """Move a processing job to completed with its generated tutorial."""
        with self._lock:
            job = self._require_processing(job_id, JobStatus.COMPLETED)
            completed_at = utcnow()
            updated = job.model_copy(update={
                "status": JobStatus.COMPLETED,
                "steps": result.steps,
                "transcript": result.transcript,
                "enhanced_script": result.enhanced_script,
                "template_id": result.template_id,
                "template_title": result.template_title,
                "template_category": result.template_category,
                "template_description": result.template_description,
                "ai_mode": result.ai_mode,
                "completed_at": completed_at,
                "processing_time_ms": _elapsed_ms(job, completed_at),
            })
            self._jobs[job_id] = updated
        return updated

    def fail(self, job_id: str, reason: str) -> Job:
        """Move a processing job to failed, keeping the reason for clients."""
        with self._lock:
            job = self._require_processing(job_id, JobStatus.FAILED)
            completed_at = utcnow()
            updated = job.model_copy(update={
                "status": JobStatus.FAILED,
                "error": reason,
                "completed_at": completed_at,
                "processing_time_ms": _elapsed_ms(job, completed_at),
            })
            self._jobs[job_id] = updated
        return updated

    def list(self) -> List[Job]:
        """All jobs in creation order."""
        with self._lock:
            return list(self._jobs.values())

    def counts(self) -> Dict[str, int]:
        with self._lock:
            jobs = list(self._jobs.values())
        counts = {"total": len(jobs)}
        for status in JobStatus:
            counts[status.value] = sum(1 for job in jobs if job.status is status)
        return counts

    def _require_processing(self, job_id: str, target: JobStatus) -> Job:
        job = self._jobs.get(job_id)
        if job is None:
            raise InvalidTransitionError(job_id, None, target.value)
        if job.status.is_terminal:
            raise InvalidTransitionError(job_id, job.status.value, target.value)
        return job

def _elapsed_ms(job: Job, completed_at) -> int:
    return int((completed_at - job.created_at).total_seconds() * 1000)
