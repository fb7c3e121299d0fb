"""Usage logging data models."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class AiCallLog(BaseModel):
    """Single AI gateway call, successful or not."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = Field(default_factory=datetime.now)
    operation: str  # "enhance" | "score"
    resume_id: int | None = None
    prompt_chars: int = 0
    attempts: int = 0
    elapsed_seconds: float = 0.0
    result_kind: str | None = None  # "structured" | "raw"
    success: bool = True
    error_type: str | None = None
    error_message: str | None = None
