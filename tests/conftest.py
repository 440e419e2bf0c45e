import os
import sys
import pytest
from rich.console import Console
from rich.live import Live
from rich.table import Table
from io import BytesIO
from pathlib import Path

# Add the project root directory to Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.config import Settings
from app.generators.simulated import SimulatedGenerator
from app.models.video import StoredVideo

def pytest_configure(config):
    """Add custom markers"""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "e2e: End-to-end tests")
    config.addinivalue_line("markers", "api: API tests")

class TestProgress:
    __test__ = False  # not a test class

    def __init__(self):
        self.console = Console()
        self.table = Table(show_header=True, header_style="bold magenta")
        self.table.add_column("Category")
        self.table.add_column("Total")
        self.table.add_column("Passed")
        self.table.add_column("Failed")
        self.table.add_column("Duration")
        self.stats = {
            category: {"total": 0, "passed": 0, "failed": 0, "duration": 0}
            for category in ("unit", "integration", "e2e", "api")
        }
        self.live = None
        self.refresh_table()

    def start(self):
        """Start the live display"""
        try:
            self.refresh_table()
            self.live = Live(self.table, refresh_per_second=4, console=self.console)
            self.live.start()
        except Exception:
            self.live = None

    def stop(self):
        """Stop the live display"""
        if self.live:
            try:
                self.refresh_table()
                self.live.stop()
            except Exception:
                pass  # Suppress errors during shutdown
            finally:
                self.live = None

    def refresh_table(self):
        """Refresh the table with current stats"""
        self.table.rows.clear()
        for category, stats in self.stats.items():
            self.table.add_row(
                category,
                str(stats["total"]),
                f"[green]{stats['passed']}[/]",
                f"[red]{stats['failed']}[/]",
                f"{stats['duration']:.2f}s"
            )

    def update_stats(self, category, passed, duration):
        """Update test statistics"""
        if category not in self.stats:
            return
        self.stats[category]["total"] += 1
        if passed:
            self.stats[category]["passed"] += 1
        else:
            self.stats[category]["failed"] += 1
        self.stats[category]["duration"] += duration
        self.refresh_table()

test_progress = TestProgress()

@pytest.fixture(scope="session", autouse=True)
def progress_tracker():
    test_progress.start()
    yield test_progress
    test_progress.stop()

def pytest_runtest_logreport(report):
    """Update progress after each test"""
    if report.when == "call":
        category = next(
            (name for name in ("unit", "integration", "e2e", "api") if f"tests/{name}/" in report.nodeid),
            "unit",
        )
        test_progress.update_stats(category, report.passed, report.duration)

@pytest.fixture
def test_settings(tmp_path):
    """Settings with millisecond generation delays and a private uploads dir."""
    return Settings(
        _env_file=None,
        ENVIRONMENT="test",
        UPLOADS_DIR=str(tmp_path / "uploads"),
        LOG_FILE_PATH=str(tmp_path / "logs" / "app.log"),
        PUBLIC_BASE_URL="http://testserver",
        GENERATOR_MODE="simulated",
        SIMULATED_DELAY_MIN=0.3,
        SIMULATED_DELAY_MAX=0.4,
        SIMULATED_SEED=7,
    )

@pytest.fixture
def fast_generator():
    return SimulatedGenerator(delay_min=0.01, delay_max=0.02)

@pytest.fixture
def stored_video(tmp_path):
    path = tmp_path / "1700000000000-demo.mp4"
    path.write_bytes(b"\x00\x00\x00\x18ftypmp42")
    return StoredVideo(
        filename=path.name,
        path=path,
        url=f"/uploads/{path.name}",
        original_name="demo.mp4",
        size_bytes=path.stat().st_size,
        content_type="video/mp4",
    )

@pytest.fixture
def video_bytes():
    return BytesIO(b"\x00\x00\x00\x18ftypmp42" + b"\x00" * 2048)

class FakePlayer:
    """Stands in for a video element; records seeks."""

    def __init__(self, refuse_autoplay: bool = False):
        self.seeks = []
        self.plays = 0
        self.pauses = 0
        self.paused = True
        self.refuse_autoplay = refuse_autoplay

    def seek(self, seconds):
        self.seeks.append(seconds)

    def play(self):
        if self.refuse_autoplay:
            raise RuntimeError("NotAllowedError: play() failed because the user didn't interact")
        self.plays += 1
        self.paused = False

    def pause(self):
        self.pauses += 1
        self.paused = True

@pytest.fixture
def player():
    return FakePlayer()

@pytest.fixture
def player_factory():
    return FakePlayer

@pytest.fixture
def demo_video_file(tmp_path) -> Path:
    path = tmp_path / "demo.mp4"
    path.write_bytes(b"\x00\x00\x00\x18ftypmp42" + b"\x00" * 4096)
    return path
