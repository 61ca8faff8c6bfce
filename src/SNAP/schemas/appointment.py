from __future__ import annotations
from datetime import datetime
from typing import Literal, Optional
from pydantic import Field
from .base import Entity, temp_id


class Appointment(Entity):
    id: str = Field(default_factory=temp_id)
    title: str
    date: datetime
    type: Literal["Consultation", "Meeting", "Review"]
    notes: Optional[str] = None
