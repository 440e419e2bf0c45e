import asyncio
import logging
from app.errors import GenerationError
from app.generators.base import TutorialGenerator
from app.models.job import TutorialResult
from app.models.state import TutorialState
from app.models.video import StoredVideo
from app.workflow.graph import workflow

logger = logging.getLogger(__name__)

class OpenAIGenerator(TutorialGenerator):
    """Runs the transcribe -> extract -> build graph against the OpenAI API."""

    mode = "openai"

    def __init__(self, model: str, transcription_model: str = "whisper-1"):
        self.model = model
        self.transcription_model = transcription_model

    async def generate(self, video: StoredVideo) -> TutorialResult:
        initial_state = TutorialState(
            video_path=str(video.path),
            video_name=video.original_name,
            model=self.model,
            transcription_model=self.transcription_model,
            transcript_text=None,
            segments=[],
            outline=None,
            result=None,
            error=None,
            current_stage="transcribe",
        )
        # the graph makes blocking API calls, so it runs in the default executor
        loop = asyncio.get_running_loop()
        state = await loop.run_in_executor(None, workflow.invoke, initial_state)

        if state.get("error"):
            raise GenerationError(state["error"])
        if state.get("result") is None:
            raise GenerationError(f"Workflow stopped at '{state.get('current_stage')}' without a result")
        return state["result"]

    def describe(self) -> dict:
        return {
            "mode": self.mode,
            "message": "Using OpenAI transcription and step extraction",
            "model": self.model,
            "transcriptionModel": self.transcription_model,
        }
