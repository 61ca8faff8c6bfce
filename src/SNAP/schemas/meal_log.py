from __future__ import annotations
from datetime import datetime, timezone
from enum import Enum
from typing import Literal
from pydantic import Field
from .base import Entity, temp_id


class MealType(str, Enum):
    BREAKFAST = "Café da Manhã"
    LUNCH = "Almoço"
    SNACK = "Lanche"
    DINNER = "Jantar"


Mood = Literal["Happy", "Neutral", "Fussy", "Refused"]


class MealLog(Entity):
    id: str = Field(default_factory=temp_id)
    student_id: str
    date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    meal_type: MealType
    consumption_percentage: int = Field(ge=0, le=100)
    mood: Mood
    notes: str = ""
