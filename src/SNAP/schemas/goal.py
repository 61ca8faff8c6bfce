from __future__ import annotations
from datetime import datetime, timezone
from pydantic import Field
from .base import Entity, temp_id


class WeeklyGoal(Entity):
    id: str = Field(default_factory=temp_id)
    text: str
    completed: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
