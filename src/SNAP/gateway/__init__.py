from .crud import (
    ALERT_STUDENT_CREATE_FAILED,
    CONFIRM_DELETE_EVENT,
    CONFIRM_DELETE_EXPENSE,
    CONFIRM_DELETE_STUDENT,
    DomainGateway,
    always_confirm,
)
from .dispatch import CONFIRM_RESEND, DispatchResult, EventDispatcher, resolve_recipients, simulated_send
from .whatsapp import build_link, build_message, clean_phone, international_phone

__all__ = [
    "ALERT_STUDENT_CREATE_FAILED",
    "CONFIRM_DELETE_EVENT",
    "CONFIRM_DELETE_EXPENSE",
    "CONFIRM_DELETE_STUDENT",
    "CONFIRM_RESEND",
    "DomainGateway",
    "always_confirm",
    "DispatchResult",
    "EventDispatcher",
    "resolve_recipients",
    "simulated_send",
    "build_link",
    "build_message",
    "clean_phone",
    "international_phone",
]
