from datetime import datetime, timezone
from pathlib import Path
from typing import Dict
from app.job_store import JobStore
from app.models.job import Job, JobStatus
from app.schemas import HealthResponse, HealthStats, JobList, JobSnapshot, JobSummary, StepOut

VERSION = "1.0.0"
SERVER_NAME = "Tutorial Steps Backend"

ENDPOINTS: Dict[str, str] = {
    "upload": "POST /api/upload",
    "jobStatus": "GET /api/job/:id",
    "generator": "GET /api/generator",
    "jobsList": "GET /api/jobs",
    "health": "GET /api/health",
    "videos": "GET /uploads/:filename",
}

class StatusService:
    """Read-only views over the job store for polling clients."""

    def __init__(self, store: JobStore, public_base_url: str, uploads_dir: Path):
        self.store = store
        self.public_base_url = public_base_url.rstrip("/")
        self.uploads_dir = Path(uploads_dir)

    def direct_url(self, video_url: str) -> str:
        return f"{self.public_base_url}{video_url}"

    def query(self, job_id: str) -> JobSnapshot:
        """Snapshot of one job; raises JobNotFoundError for unknown ids."""
        # one read from the store, so the snapshot is never half-updated
        job = self.store.get(job_id)
        return self.snapshot(job)

    def snapshot(self, job: Job) -> JobSnapshot:
        return JobSnapshot(
            id=job.id,
            status=job.status,
            steps=[
                StepOut(
                    id=step.id,
                    step_number=step.id,
                    timestamp=step.timestamp,
                    text=step.text,
                    screenshot=step.screenshot,
                    thumbnail=step.thumbnail,
                    color=step.color,
                    type=step.type,
                    duration=step.duration,
                )
                for step in job.steps
            ],
            transcript=job.transcript,
            enhanced_script=job.enhanced_script,
            video_url=job.video_url,
            direct_video_url=self.direct_url(job.video_url),
            original_name=job.original_name,
            file_size=job.file_size,
            template_id=job.template_id,
            template_title=job.template_title,
            template_category=job.template_category,
            template_description=job.template_description,
            total_steps=job.total_steps,
            created_at=job.created_at,
            completed_at=job.completed_at,
            processing_time=job.processing_time_ms,
            ai_mode=job.ai_mode,
            error=job.error,
        )

    def summaries(self) -> JobList:
        jobs = self.store.list()
        return JobList(
            total=len(jobs),
            jobs=[
                JobSummary(
                    id=job.id,
                    status=job.status,
                    created_at=job.created_at,
                    video_name=job.original_name,
                    steps_count=job.total_steps,
                    video_url=self.direct_url(job.video_url),
                )
                for job in jobs
            ],
        )

    def health(self) -> HealthResponse:
        counts = self.store.counts()
        return HealthResponse(
            timestamp=datetime.now(timezone.utc),
            version=VERSION,
            server=SERVER_NAME,
            endpoints=ENDPOINTS,
            stats=HealthStats(
                total_jobs=counts["total"],
                active_jobs=counts[JobStatus.PROCESSING.value],
                completed_jobs=counts[JobStatus.COMPLETED.value],
                failed_jobs=counts[JobStatus.FAILED.value],
                uploads_dir="Exists" if self.uploads_dir.exists() else "Missing",
            ),
        )
