import json
import logging
from typing import Any, Dict, List, Optional
from langsmith import traceable
from openai import OpenAI
from app.generators.steps import build_enhanced_script, build_steps, STEP_TYPES
from app.models.job import TutorialResult
from app.models.state import TutorialState
from app.templates import get_prompt
from app.timecode import format_timestamp

logger = logging.getLogger(__name__)

_client: Optional[OpenAI] = None

def get_client() -> OpenAI:
    """Return the shared OpenAI client, created on first use."""
    global _client
    if _client is None:
        _client = OpenAI()
    return _client

def _segment_value(segment: Any, key: str) -> Any:
    if isinstance(segment, dict):
        return segment.get(key)
    return getattr(segment, key, None)

def format_segments(segments: List[Dict[str, Any]]) -> str:
    """Render transcription segments as ``[m:ss] text`` lines."""
    return "\n".join(
        f"[{format_timestamp(segment['start'], pad_minutes=False)}] {segment['text']}"
        for segment in segments
    )

@traceable(name="transcribe_video")
def transcribe_video(state: TutorialState) -> TutorialState:
    """Transcribe the audio track of the uploaded recording."""
    logger.info(f"Transcribing {state['video_path']}")
    try:
        with open(state["video_path"], "rb") as f:
            response = get_client().audio.transcriptions.create(
                model=state["transcription_model"],
                file=f,
                response_format="verbose_json",
            )
        segments = [
            {
                "start": float(_segment_value(segment, "start") or 0),
                "end": float(_segment_value(segment, "end") or 0),
                "text": (_segment_value(segment, "text") or "").strip(),
            }
            for segment in (getattr(response, "segments", None) or [])
        ]
        text = (getattr(response, "text", "") or "").strip()
        if not text:
            raise ValueError("transcription returned no speech")
        return {
            **state,
            "transcript_text": text,
            "segments": segments,
            "current_stage": "transcribe",
        }
    except Exception as e:
        logger.error(f"Transcription failed: {e}")
        return {**state, "error": f"Transcription failed: {str(e)}", "current_stage": "transcribe"}

@traceable(name="extract_steps")
def extract_steps(state: TutorialState) -> TutorialState:
    """Ask the chat model for a titled, timed list of instructions."""
    logger.info("Extracting tutorial steps from transcript")
    timed = format_segments(state.get("segments") or []) or state["transcript_text"]
    try:
        response = get_client().chat.completions.create(
            model=state["model"],
            response_format={"type": "json_object"},
            messages=[{
                "role": "system",
                "content": get_prompt("extract_steps"),
            }, {
                "role": "user",
                "content": f"Video: {state['video_name']}\n\nTranscript:\n{timed}",
            }],
        )
        outline = json.loads(response.choices[0].message.content)
        if not isinstance(outline, dict) or not outline.get("steps"):
            raise ValueError("model returned no steps")
        return {**state, "outline": outline, "current_stage": "extract"}
    except Exception as e:
        logger.error(f"Step extraction failed: {e}")
        return {**state, "error": f"Step extraction failed: {str(e)}", "current_stage": "extract"}

def _offsets_from_outline(raw_steps: List[Dict[str, Any]]) -> Optional[List[int]]:
    """Model-supplied offsets, or None when they are missing or out of order."""
    offsets = []
    for raw in raw_steps:
        try:
            offsets.append(int(raw["seconds"]))
        except (KeyError, TypeError, ValueError):
            return None
    if any(offset < 0 for offset in offsets):
        return None
    if any(later <= earlier for earlier, later in zip(offsets, offsets[1:])):
        return None
    return offsets

@traceable(name="build_tutorial")
def build_tutorial(state: TutorialState) -> TutorialState:
    """Assemble steps, transcript and script into the final result."""
    outline = state["outline"]
    try:
        raw_steps = [raw for raw in outline["steps"] if str(raw.get("text", "")).strip()]
        instructions = [str(raw["text"]).strip() for raw in raw_steps]
        offsets = _offsets_from_outline(raw_steps)
        if offsets is None:
            logger.warning("Model offsets unusable, falling back to the fixed schedule")
        types = [raw.get("type") if raw.get("type") in STEP_TYPES else None for raw in raw_steps]
        steps = build_steps(instructions, offsets=offsets, types=types)

        title = outline.get("title") or "Screen Recording Tutorial"
        category = outline.get("category") or "Productivity"
        description = outline.get("description") or "Follow these steps to complete the task"
        timed = format_segments(state.get("segments") or []) or state["transcript_text"]
        transcript = (
            f"# Transcript: {title}\n\n"
            f"Video: {state['video_name']}\n"
            f"Category: {category}\n\n"
            f"{timed}\n"
        )
        result = TutorialResult(
            steps=steps,
            transcript=transcript,
            enhanced_script=build_enhanced_script(title, description, steps),
            template_title=title,
            template_category=category,
            template_description=description,
            ai_mode="openai",
        )
        return {**state, "result": result, "current_stage": "build"}
    except Exception as e:
        logger.error(f"Tutorial assembly failed: {e}")
        return {**state, "error": f"Tutorial assembly failed: {str(e)}", "current_stage": "build"}
