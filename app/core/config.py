import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Directory Configuration
BASE_DIR = Path(__file__).parent.parent.parent
GENERATED_DIR = Path(os.getenv("GENERATED_DIR", BASE_DIR / "generated"))
LOGS_DIR = GENERATED_DIR / "logs"

# Ensure directories exist
GENERATED_DIR.mkdir(parents=True, exist_ok=True)
LOGS_DIR.mkdir(exist_ok=True)

# Step schedule used when a generator has no offsets of its own
STEP_BASE_OFFSET = 5  # seconds
STEP_STRIDE = 7  # seconds

# Playback tolerances (seconds). Kept separate: one decides when to switch,
# the other whether a step is shown as active.
AUTO_SWITCH_TOLERANCE = 2
ACTIVE_DISPLAY_TOLERANCE = 3

# Upload rules
VIDEO_EXTENSIONS = ["mp4", "mov", "avi", "wmv", "flv", "webm", "mkv"]
MAX_UPLOAD_BYTES = 200 * 1024 * 1024
UPLOAD_TIP = "Make sure file is a video (MP4, MOV, etc.) under 200MB"

# Served video content types
VIDEO_CONTENT_TYPES = {
    ".mp4": "video/mp4",
    ".mov": "video/quicktime",
    ".avi": "video/x-msvideo",
}
DEFAULT_CONTENT_TYPE = "application/octet-stream"
