import json
import pytest
from unittest.mock import patch, MagicMock
from app.errors import GenerationError
from app.generators.openai_generator import OpenAIGenerator
from app.workflow.graph import workflow
from app.workflow.nodes import build_tutorial, extract_steps, format_segments

SEGMENTS = [
    {"start": 4.2, "end": 9.0, "text": "Open the settings page."},
    {"start": 14.8, "end": 20.1, "text": "Turn on dark mode."},
    {"start": 31.0, "end": 35.5, "text": "Reload the page."},
]

OUTLINE = {
    "title": "Enable Dark Mode",
    "category": "UI Customization",
    "description": "Switch the app to its dark theme",
    "steps": [
        {"text": "Open the settings page", "seconds": 4, "type": "setup"},
        {"text": "Turn on dark mode", "seconds": 15, "type": "action"},
        {"text": "Reload the page", "seconds": 31, "type": "bogus"},
    ],
}

def transcription_response():
    return MagicMock(
        text="Open the settings page. Turn on dark mode. Reload the page.",
        segments=[MagicMock(**segment) for segment in SEGMENTS],
    )

def chat_response(content):
    return MagicMock(choices=[MagicMock(message=MagicMock(content=content))])

def initial_state(video_path):
    return {
        "video_path": str(video_path),
        "video_name": "demo.mp4",
        "model": "gpt-test",
        "transcription_model": "whisper-test",
        "transcript_text": None,
        "segments": [],
        "outline": None,
        "result": None,
        "error": None,
        "current_stage": "transcribe",
    }

@pytest.mark.integration
class TestTutorialWorkflow:
    @pytest.fixture
    def mock_client(self):
        with patch("app.workflow.nodes.get_client") as get_client:
            client = MagicMock()
            get_client.return_value = client
            yield client

    def test_format_segments(self):
        assert format_segments(SEGMENTS) == (
            "[0:04] Open the settings page.\n[0:14] Turn on dark mode.\n[0:31] Reload the page."
        )

    def test_full_graph(self, mock_client, stored_video):
        mock_client.audio.transcriptions.create.return_value = transcription_response()
        mock_client.chat.completions.create.return_value = chat_response(json.dumps(OUTLINE))

        state = workflow.invoke(initial_state(stored_video.path))

        assert state.get("error") is None
        result = state["result"]
        assert [step.timestamp for step in result.steps] == ["00:04", "00:15", "00:31"]
        assert [step.type for step in result.steps] == ["setup", "action", "configuration"]
        assert result.template_title == "Enable Dark Mode"
        assert "[0:14] Turn on dark mode." in result.transcript
        assert result.ai_mode == "openai"

        call = mock_client.chat.completions.create.call_args
        assert call.kwargs["model"] == "gpt-test"
        assert "[0:04] Open the settings page." in call.kwargs["messages"][1]["content"]
        assert mock_client.audio.transcriptions.create.call_args.kwargs["model"] == "whisper-test"

    def test_unordered_offsets_fall_back_to_schedule(self):
        outline = dict(OUTLINE, steps=[
            {"text": "First", "seconds": 30},
            {"text": "Second", "seconds": 10},
        ])
        state = dict(initial_state("unused"), transcript_text="hello", outline=outline)
        result = build_tutorial(state)["result"]
        assert [step.timestamp for step in result.steps] == ["00:05", "00:12"]

    def test_extract_steps_rejects_empty_outline(self, mock_client):
        mock_client.chat.completions.create.return_value = chat_response(json.dumps({"steps": []}))
        state = dict(initial_state("unused"), transcript_text="hello")
        state = extract_steps(state)
        assert state["error"].startswith("Step extraction failed")

    def test_transcription_error_stops_graph(self, mock_client, stored_video):
        mock_client.audio.transcriptions.create.side_effect = RuntimeError("quota exceeded")

        state = workflow.invoke(initial_state(stored_video.path))

        assert state["error"] == "Transcription failed: quota exceeded"
        assert state["current_stage"] == "transcribe"
        mock_client.chat.completions.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_generator_raises_generation_error(self, mock_client, stored_video):
        mock_client.audio.transcriptions.create.return_value = transcription_response()
        mock_client.chat.completions.create.return_value = chat_response("not json")

        generator = OpenAIGenerator(model="gpt-test", transcription_model="whisper-test")
        with pytest.raises(GenerationError, match="Step extraction failed"):
            await generator.generate(stored_video)

    @pytest.mark.asyncio
    async def test_generator_returns_result(self, mock_client, stored_video):
        mock_client.audio.transcriptions.create.return_value = transcription_response()
        mock_client.chat.completions.create.return_value = chat_response(json.dumps(OUTLINE))

        generator = OpenAIGenerator(model="gpt-test")
        result = await generator.generate(stored_video)
        assert len(result.steps) == 3
        assert generator.describe()["model"] == "gpt-test"
