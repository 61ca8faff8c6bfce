# src/SNAP/schemas/__init__.py
from .base import APIModel, Entity, temp_id
from .user import User, UserRole
from .student import Allergy, AllergySeverity, MedicalRecord, Student
from .meal_log import MealLog, MealType
from .appointment import Appointment
from .goal import WeeklyGoal
from .expense import Expense, ExpenseCategory, PaymentMethod
from .school_event import DeliveryStats, DispatchStatus, EventAudience, EventStatus, SchoolEvent

__all__ = [
    "APIModel", "Entity", "temp_id",
    "User", "UserRole",
    "Allergy", "AllergySeverity", "MedicalRecord", "Student",
    "MealLog", "MealType",
    "Appointment",
    "WeeklyGoal",
    "Expense", "ExpenseCategory", "PaymentMethod",
    "DeliveryStats", "DispatchStatus", "EventAudience", "EventStatus", "SchoolEvent",
]
