"""Error types shared by the job pipeline and the HTTP layer."""
from app.core.config import UPLOAD_TIP


class JobNotFoundError(LookupError):
    """Raised when a job id is not known to the store."""

    def __init__(self, job_id: str):
        super().__init__(f"Job {job_id} not found")
        self.job_id = job_id


class InvalidTransitionError(RuntimeError):
    """Raised when a job record is mutated outside processing -> terminal."""

    def __init__(self, job_id: str, current: str | None, target: str):
        state = current if current is not None else "missing"
        super().__init__(f"Job {job_id} cannot move from {state} to {target}")
        self.job_id = job_id
        self.current = current
        self.target = target


class UploadValidationError(ValueError):
    """Raised when an uploaded payload is rejected before a job is created."""

    status_code = 400

    def __init__(self, message: str, details: str | None = None, tip: str = UPLOAD_TIP):
        super().__init__(message)
        self.message = message
        self.details = details or message
        self.tip = tip


class UnsupportedMediaError(UploadValidationError):
    status_code = 400


class UploadTooLargeError(UploadValidationError):
    status_code = 413


class GenerationError(RuntimeError):
    """Raised by a tutorial generator when it cannot produce a result."""
