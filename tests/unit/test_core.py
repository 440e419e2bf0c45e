import pytest
from app.core.config import (
    ACTIVE_DISPLAY_TOLERANCE,
    AUTO_SWITCH_TOLERANCE,
    GENERATED_DIR,
    LOGS_DIR,
    VIDEO_CONTENT_TYPES,
)
from app.core.logging import release_job_logger, setup_job_logger

@pytest.mark.unit
def test_directories_exist():
    """Test that required directories are created."""
    assert GENERATED_DIR.exists()
    assert LOGS_DIR.exists()

@pytest.mark.unit
def test_tolerances_stay_distinct():
    assert AUTO_SWITCH_TOLERANCE == 2
    assert ACTIVE_DISPLAY_TOLERANCE == 3

@pytest.mark.unit
def test_explicit_video_content_types():
    assert VIDEO_CONTENT_TYPES[".mp4"] == "video/mp4"
    assert VIDEO_CONTENT_TYPES[".mov"] == "video/quicktime"
    assert VIDEO_CONTENT_TYPES[".avi"] == "video/x-msvideo"

@pytest.mark.unit
def test_job_logger_writes_json_lines():
    logger = setup_job_logger("job_123_abcdef01")
    assert setup_job_logger("job_123_abcdef01") is logger
    assert len(logger.handlers) == 2

    logger.info("Generated 8 steps", extra={"steps": 8})
    release_job_logger("job_123_abcdef01")

    lines = (LOGS_DIR / "job_123_abcdef01.log").read_text().strip().splitlines()
    assert '"message": "Generated 8 steps"' in lines[-1]
    assert '"steps": 8' in lines[-1]
    assert logger.handlers == []
