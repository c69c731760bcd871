"""Usage logging data models."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class UsageLog(BaseModel):
    """Single usage log entry for one tailoring request."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str = "local"
    timestamp: datetime = Field(default_factory=datetime.now)
    application_id: str | None = None
    company_name: str | None = None
    job_title: str | None = None
    attempts: int = 0
    elapsed_seconds: float = 0.0
    total_input_tokens: int = 0
    total_output_tokens: int = 0
    estimated_cost_usd: float = 0.0
    model: str | None = None
    success: bool = True
    error_message: str | None = None
