from abc import ABC, abstractmethod
from app.models.job import TutorialResult
from app.models.video import StoredVideo

class TutorialGenerator(ABC):
    """Turns a stored screen recording into ordered steps plus a transcript.

    Implementations raise ``GenerationError`` when they cannot produce a
    result; the orchestrator records that on the job instead of raising it
    into a request.
    """

    #: Reported to clients as the job's ``aiMode``.
    mode: str = "unknown"

    @abstractmethod
    async def generate(self, video: StoredVideo) -> TutorialResult:
        """Produce the tutorial for ``video``."""

    def describe(self) -> dict:
        """Short description served by the generator status endpoint."""
        return {"mode": self.mode}
