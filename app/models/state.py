from typing import Any, Literal, TypedDict

class TutorialState(TypedDict, total=False):
    """State model for the OpenAI tutorial workflow graph."""
    video_path: str
    video_name: str
    model: str
    transcription_model: str
    transcript_text: str | None
    segments: list[dict[str, Any]]
    outline: dict[str, Any] | None
    result: Any
    error: str | None
    current_stage: Literal['transcribe', 'extract', 'build']
