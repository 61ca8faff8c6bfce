from __future__ import annotations
from enum import Enum
from .base import APIModel


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    NUTRITIONIST = "NUTRITIONIST"


class User(APIModel):
    id: str
    username: str
    role: UserRole = UserRole.ADMIN
    name: str
