import os
from typing import Optional

from pydantic import BaseModel, Field


class RefinerSettings(BaseModel):
    """Explicit configuration handed to the factory at startup."""

    api_key: Optional[str] = None
    model: str = "gpt-4o-mini"
    base_url: Optional[str] = None
    temperature: float = 0.2
    timeout_seconds: float = Field(default=60.0, gt=0)
    max_attempts: int = Field(default=3, ge=1)
    storage_dir: str = ".resume_refiner"

    @classmethod
    def from_env(cls) -> "RefinerSettings":
        values = {
            "api_key": os.getenv("OPENAI_API_KEY"),
            "model": os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
            "base_url": os.getenv("OPENAI_BASE_URL") or None,
        }
        # only override defaults for variables that are actually set
        timeout = os.getenv("RESUME_REFINER_TIMEOUT")
        if timeout:
            values["timeout_seconds"] = float(timeout)
        attempts = os.getenv("RESUME_REFINER_MAX_ATTEMPTS")
        if attempts:
            values["max_attempts"] = int(attempts)
        storage = os.getenv("RESUME_REFINER_STORAGE_DIR")
        if storage:
            values["storage_dir"] = storage
        return cls(**values)
