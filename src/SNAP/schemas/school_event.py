from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Optional

from pydantic import Field

from .base import APIModel, Entity, temp_id


class EventAudience(str, Enum):
    GLOBAL = "GLOBAL"
    CLASS = "CLASS"
    STUDENT = "STUDENT"


class EventStatus(str, Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"


class DispatchStatus(str, Enum):
    PENDING = "PENDING"
    SENDING = "SENDING"
    COMPLETED = "COMPLETED"


class DeliveryStats(APIModel):
    total: int = 0
    success: int = 0
    failed: int = 0


class SchoolEvent(Entity):
    id: str = Field(default_factory=temp_id)
    title: str
    description: str = ""
    date: dt.date
    time: str = Field(default="", pattern=r"^$|^\d{2}:\d{2}$")
    audience: EventAudience = EventAudience.GLOBAL
    # class name for CLASS, student id for STUDENT
    target_id: Optional[str] = None
    status: EventStatus = EventStatus.DRAFT
    whatsapp_status: DispatchStatus = DispatchStatus.PENDING
    delivery_stats: DeliveryStats = Field(default_factory=DeliveryStats)
    created_at: dt.datetime = Field(default_factory=lambda: dt.datetime.now(dt.timezone.utc))
