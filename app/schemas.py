from datetime import datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from app.models.job import JobStatus


class WireModel(BaseModel):
    """Responses use camelCase keys on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class StepOut(WireModel):
    id: int
    step_number: int
    timestamp: str = Field(..., description="Offset into the video as MM:SS")
    text: str
    screenshot: str
    thumbnail: str
    color: str
    type: str
    duration: str


class JobSnapshot(WireModel):
    id: str
    status: JobStatus
    steps: List[StepOut] = Field(default_factory=list)
    transcript: str = ""
    enhanced_script: str = ""
    video_url: str
    direct_video_url: str
    original_name: str
    file_size: str
    template_id: Optional[str] = None
    template_title: Optional[str] = None
    template_category: Optional[str] = None
    template_description: Optional[str] = None
    total_steps: int = 0
    created_at: datetime
    completed_at: Optional[datetime] = None
    processing_time: Optional[int] = Field(None, description="Milliseconds from submission to terminal state")
    ai_mode: str
    error: Optional[str] = None


class FileInfo(WireModel):
    name: str
    size: str
    type: str


class UploadResponse(WireModel):
    success: bool = True
    job_id: str
    message: str = "Video uploaded successfully"
    video_url: str
    file_info: FileInfo


class JobSummary(WireModel):
    id: str
    status: JobStatus
    created_at: datetime
    video_name: str
    steps_count: int
    video_url: str


class JobList(WireModel):
    total: int
    jobs: List[JobSummary]


class HealthStats(WireModel):
    total_jobs: int
    active_jobs: int
    completed_jobs: int
    failed_jobs: int
    uploads_dir: str


class HealthResponse(WireModel):
    status: str = "healthy"
    timestamp: datetime
    version: str
    server: str
    endpoints: Dict[str, str]
    stats: HealthStats


class ErrorResponse(WireModel):
    error: str
    details: Optional[str] = None
    tip: Optional[str] = None
    job_id: Optional[str] = None
