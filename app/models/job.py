from enum import Enum
from datetime import datetime, timezone
from typing import Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, model_validator
from app.timecode import parse_timestamp

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class JobStatus(str, Enum):
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    def __str__(self):
        return self.value

    @property
    def is_terminal(self) -> bool:
        return self is not JobStatus.PROCESSING

class Step(BaseModel):
    """One instruction bound to an offset into the video."""
    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=1)
    timestamp: str
    text: str
    screenshot: str = ""
    thumbnail: str = ""
    color: str = ""
    type: str = "action"
    duration: str = ""

    @property
    def seconds(self) -> int:
        return parse_timestamp(self.timestamp)

class TutorialResult(BaseModel):
    """What a generator hands back for a finished job."""
    model_config = ConfigDict(frozen=True)

    steps: Tuple[Step, ...]
    transcript: str
    enhanced_script: str = ""
    template_id: Optional[str] = None
    template_title: Optional[str] = None
    template_category: Optional[str] = None
    template_description: Optional[str] = None
    ai_mode: str = "simulated"

    @model_validator(mode="after")
    def check_steps(self):
        if not self.steps:
            raise ValueError("a tutorial needs at least one step")
        if not self.transcript.strip():
            raise ValueError("a tutorial needs a transcript")
        previous = None
        for ordinal, step in enumerate(self.steps, start=1):
            if step.id != ordinal:
                raise ValueError(f"step ids must be contiguous from 1, got {step.id} at position {ordinal}")
            if previous is not None and step.seconds <= previous:
                raise ValueError(f"step {step.id} at {step.timestamp} does not follow the previous step")
            previous = step.seconds
        return self

class Job(BaseModel):
    """Job record. Records are never edited in place; the store swaps in copies."""
    model_config = ConfigDict(frozen=True)

    id: str
    status: JobStatus = JobStatus.PROCESSING
    video_url: str
    video_filename: str
    original_name: str
    file_size: str = ""
    steps: Tuple[Step, ...] = ()
    transcript: str = ""
    enhanced_script: str = ""
    template_id: Optional[str] = None
    template_title: Optional[str] = None
    template_category: Optional[str] = None
    template_description: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    completed_at: Optional[datetime] = None
    processing_time_ms: Optional[int] = None
    ai_mode: str = "simulated"
    error: Optional[str] = None

    @property
    def total_steps(self) -> int:
        return len(self.steps)
