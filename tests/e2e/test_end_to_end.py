import asyncio
import httpx
import pytest
from app.client.session import LOAD_ERROR_MESSAGE, FAILED_MESSAGE, TutorialSession, View
from app.config import Settings
from app.errors import GenerationError
from app.generators.base import TutorialGenerator
from app.main import create_app

EXPECTED_TIMESTAMPS = ["00:05", "00:12", "00:19", "00:26", "00:33", "00:40", "00:47", "00:54"]

def make_client(app):
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver")

class BrokenGenerator(TutorialGenerator):
    mode = "broken"

    async def generate(self, video):
        await asyncio.sleep(0.05)
        raise GenerationError("transcription failed")

@pytest.mark.e2e
class TestEndToEnd:
    """Upload -> poll -> play, through the real app in-process."""

    @pytest.mark.asyncio
    async def test_demo_upload_with_default_timings(self, tmp_path, demo_video_file, player):
        """Default 3-6s generation, polled every 2s, done within 10s."""
        settings = Settings(
            _env_file=None,
            UPLOADS_DIR=str(tmp_path / "uploads"),
            LOG_FILE_PATH=str(tmp_path / "logs" / "app.log"),
            PUBLIC_BASE_URL="http://testserver",
        )
        app = create_app(settings)
        async with make_client(app) as client:
            session = TutorialSession(client, poll_interval=2.0, poll_timeout=10.0, player=player)
            job_id = await session.upload(demo_video_file)
            assert session.view == View.PROCESSING

            view = await session.wait_for_results()
            assert view == View.RESULTS

            response = await client.get(f"/api/job/{job_id}")
            data = response.json()
            assert data["status"] == "completed"
            assert data["totalSteps"] == 8
            assert data["transcript"]
            assert [step["timestamp"] for step in data["steps"]] == EXPECTED_TIMESTAMPS
        await app.state.orchestrator.shutdown()

    @pytest.mark.asyncio
    async def test_results_drive_playback(self, test_settings, demo_video_file, player):
        app = create_app(test_settings)
        async with make_client(app) as client:
            session = TutorialSession(client, poll_interval=0.05, poll_timeout=10.0, player=player)
            await session.upload(demo_video_file)
            assert await session.wait_for_results() == View.RESULTS

        sync = session.synchronizer
        assert session.video_url.startswith("http://testserver/uploads/")
        assert [step.timestamp for step in sync.steps] == EXPECTED_TIMESTAMPS

        # auto-highlight without a click
        assert sync.on_time_update(13).timestamp == "00:12"

        # click-to-seek, then a nearby sample keeps the choice
        step = next(step for step in sync.steps if step.timestamp == "00:33")
        sync.select_step(step.id)
        assert player.seeks == [33]
        assert sync.on_time_update(34).timestamp == "00:33"
        assert sync.is_step_active(step)
        assert player.seeks == [33]

    @pytest.mark.asyncio
    async def test_failed_generation_shows_retry(self, test_settings, demo_video_file):
        app = create_app(test_settings, generator=BrokenGenerator())
        async with make_client(app) as client:
            session = TutorialSession(client, poll_interval=0.02, poll_timeout=5.0)
            await session.upload(demo_video_file)
            assert await session.wait_for_results() == View.ERROR

        assert session.error_message == FAILED_MESSAGE
        assert session.can_retry
        assert session.job["error"] == "transcription failed"
        session.reset()
        assert session.view == View.UPLOAD
        assert not session.poller.running

    @pytest.mark.asyncio
    async def test_rejected_upload_shows_tip(self, test_settings, tmp_path):
        notes = tmp_path / "notes.txt"
        notes.write_text("not a video")
        app = create_app(test_settings)
        async with make_client(app) as client:
            session = TutorialSession(client, poll_interval=0.02)
            assert await session.upload(notes) is None

        assert session.view == View.ERROR
        assert "under 200MB" in session.error_message
        assert session.job_id is None

    @pytest.mark.asyncio
    async def test_unknown_job_shows_error_screen(self, test_settings):
        app = create_app(test_settings)
        async with make_client(app) as client:
            session = TutorialSession(client, poll_interval=0.02)
            session.job_id = "job_missing"
            session.view = View.PROCESSING
            session.poller.start("job_missing")
            assert await session.wait_for_results() == View.ERROR

        assert session.error_message == LOAD_ERROR_MESSAGE
        assert session.can_retry
