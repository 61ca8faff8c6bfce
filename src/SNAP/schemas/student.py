from __future__ import annotations

from enum import Enum
from typing import List, Literal, Optional

from pydantic import Field

from .base import APIModel, Entity, temp_id


class AllergySeverity(str, Enum):
    MILD = "Leve"
    MODERATE = "Moderada"
    SEVERE = "Grave"


class Allergy(APIModel):
    id: str = Field(default_factory=temp_id)
    name: str
    severity: AllergySeverity
    notes: Optional[str] = None


class MedicalRecord(APIModel):
    has_restriction: bool = False
    allergies: List[Allergy] = Field(default_factory=list)
    intolerances: List[str] = Field(default_factory=list)
    medical_notes: str = ""
    blood_type: str = ""


class Student(Entity):
    id: str = Field(default_factory=temp_id)
    full_name: str
    date_of_birth: str = ""  # YYYY-MM-DD, may be empty on legacy records
    gender: Literal["M", "F"] = "M"
    height_cm: float = 0
    weight_kg: float = 0
    guardian_name: str = ""
    contact_phone: str = ""
    contact_email: str = ""
    school_class: str = ""
    shift: Literal["Matutino", "Vespertino", "Integral"] = "Matutino"
    teacher_name: str = ""
    medical: MedicalRecord = Field(default_factory=MedicalRecord)
    avatar_url: str = ""
    general_notes: str = ""

    def with_restriction_flag(self) -> "Student":
        """Copy whose restriction flag follows the allergy list."""
        medical = self.medical.model_copy(update={"has_restriction": bool(self.medical.allergies)})
        return self.model_copy(update={"medical": medical})
