from pathlib import Path
from pydantic import BaseModel, ConfigDict

class StoredVideo(BaseModel):
    """Locator for an accepted upload."""
    model_config = ConfigDict(frozen=True)

    filename: str
    path: Path
    url: str
    original_name: str
    size_bytes: int
    content_type: str

    @property
    def size_label(self) -> str:
        return f"{self.size_bytes / (1024 * 1024):.2f} MB"
