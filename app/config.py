from pydantic_settings import BaseSettings, NoDecode
from pydantic import Field, field_validator, model_validator
from typing import Annotated, List, Optional

class Settings(BaseSettings):
    # Basic environment settings
    ENVIRONMENT: str = Field("development", env="ENVIRONMENT")
    HOST: str = Field("0.0.0.0", env="HOST")
    PORT: int = Field(8000, env="PORT")
    PUBLIC_BASE_URL: str = Field("http://localhost:8000", env="PUBLIC_BASE_URL")

    # CORS settings: Allowed origins should be provided as a comma-separated list in the env var.
    ALLOWED_ORIGINS: Annotated[List[str], NoDecode] = Field(
        default=["http://localhost:3000", "http://localhost:3001"], env="ALLOWED_ORIGINS"
    )

    # Logging configuration
    LOG_LEVEL: str = Field("INFO", env="LOG_LEVEL")
    LOG_FILE_PATH: str = Field("logs/app.log", env="LOG_FILE_PATH")

    # Upload settings
    UPLOADS_DIR: str = Field("uploads", env="UPLOADS_DIR")
    MAX_UPLOAD_MB: int = Field(200, env="MAX_UPLOAD_MB")

    # Generator settings
    GENERATOR_MODE: str = Field("simulated", env="GENERATOR_MODE")
    OPENAI_API_KEY: Optional[str] = Field(None, env="OPENAI_API_KEY")
    OPENAI_MODEL: str = Field("gpt-4o-mini", env="OPENAI_MODEL")
    TRANSCRIPTION_MODEL: str = Field("whisper-1", env="TRANSCRIPTION_MODEL")
    SIMULATED_DELAY_MIN: float = Field(3.0, env="SIMULATED_DELAY_MIN")
    SIMULATED_DELAY_MAX: float = Field(6.0, env="SIMULATED_DELAY_MAX")
    SIMULATED_SEED: Optional[int] = Field(None, env="SIMULATED_SEED")

    # Job processing and polling
    JOB_TIMEOUT_SECONDS: Optional[float] = Field(None, env="JOB_TIMEOUT_SECONDS")
    POLL_INTERVAL_SECONDS: float = Field(2.0, env="POLL_INTERVAL_SECONDS")

    @field_validator("ALLOWED_ORIGINS", mode="before")
    def assemble_allowed_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v

    @field_validator("GENERATOR_MODE")
    def normalize_generator_mode(cls, v):
        mode = v.strip().lower()
        if mode not in ("simulated", "openai"):
            raise ValueError(f"Unknown GENERATOR_MODE '{v}', expected 'simulated' or 'openai'")
        return mode

    @model_validator(mode="after")
    def check_generator_requirements(self):
        if self.GENERATOR_MODE == "openai" and not self.OPENAI_API_KEY:
            raise ValueError("GENERATOR_MODE=openai requires OPENAI_API_KEY")
        if self.SIMULATED_DELAY_MIN > self.SIMULATED_DELAY_MAX:
            raise ValueError("SIMULATED_DELAY_MIN must not exceed SIMULATED_DELAY_MAX")
        return self

    @property
    def max_upload_bytes(self) -> int:
        return self.MAX_UPLOAD_MB * 1024 * 1024

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

# Create a single instance of the settings that can be imported anywhere in the project.
settings = Settings()
