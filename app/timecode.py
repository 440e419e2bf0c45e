import math
import re

_TIMESTAMP_RE = re.compile(r"^\s*(\d+):([0-5]\d)\s*$")


def parse_timestamp(timestamp: str) -> int:
    """Convert an ``MM:SS`` timestamp to total seconds.

    Minutes may be unpadded (``"0:05"``) or zero-padded (``"00:05"``);
    seconds must always be two digits.
    """
    match = _TIMESTAMP_RE.match(timestamp or "")
    if not match:
        raise ValueError(f"Invalid timestamp '{timestamp}', expected MM:SS")
    minutes, seconds = int(match.group(1)), int(match.group(2))
    return minutes * 60 + seconds


def format_timestamp(seconds: float, pad_minutes: bool = True) -> str:
    """Format seconds as ``MM:SS`` (or ``M:SS`` when ``pad_minutes`` is off)."""
    if seconds < 0:
        raise ValueError("Timestamp offsets cannot be negative")
    whole = int(math.floor(seconds))
    mins, secs = divmod(whole, 60)
    minutes = f"{mins:02d}" if pad_minutes else str(mins)
    return f"{minutes}:{secs:02d}"
