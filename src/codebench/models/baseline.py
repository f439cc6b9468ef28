"""Persisted baseline snapshot model."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from codebench.models.result import Violation


class BaselineRecord(BaseModel):
    """Most recent score/violation snapshot for one (adapter, model, scenario)."""

    scenario_id: str
    score: float
    violations: list[Violation] = Field(default_factory=list)
    timestamp: datetime
    adapter: str
    model: str
