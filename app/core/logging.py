import logging
from pathlib import Path
from app.core.config import LOGS_DIR
from pythonjsonlogger.json import JsonFormatter

def setup_job_logger(job_id: str) -> logging.Logger:
    """Setup a logger for a specific job."""
    logger = logging.getLogger(f"job.{job_id}")
    if not logger.handlers:  # Only add handler if none exists
        safe_name = "".join(c if c.isalnum() or c == "_" else "_" for c in job_id)
        log_file = LOGS_DIR / f"{safe_name}.log"

        logger.setLevel(logging.INFO)
        # Records are handled here; don't duplicate them on the root handlers
        logger.propagate = False

        # create a json formatter for structured logging
        formatter = JsonFormatter('%(asctime)s - %(levelname)s - %(message)s')
        # Add file handler
        fh = logging.FileHandler(log_file)
        fh.setLevel(logging.INFO)
        fh.setFormatter(formatter)
        logger.addHandler(fh)

        # Add console handler
        ch = logging.StreamHandler()
        ch.setLevel(logging.INFO)
        ch.setFormatter(formatter)
        logger.addHandler(ch)

    return logger

def release_job_logger(job_id: str) -> None:
    """Close the file handle held by a job logger once the job is terminal."""
    logger = logging.getLogger(f"job.{job_id}")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

def configure_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure the root logger for the service."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        handlers=handlers,
    )
