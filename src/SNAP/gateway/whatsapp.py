# src/SNAP/gateway/whatsapp.py
from __future__ import annotations

import re
from urllib.parse import quote

from SNAP.schemas import SchoolEvent, Student

# characters encodeURIComponent leaves alone
_URI_COMPONENT_SAFE = "-_.!~*'()"


def clean_phone(phone: str) -> str:
    return re.sub(r"\D", "", phone or "")


def international_phone(phone: str, country_code: str = "55") -> str:
    """Digits only, country code prefixed when the number is 11 digits or fewer."""
    digits = clean_phone(phone)
    return f"{country_code}{digits}" if len(digits) <= 11 else digits


def build_message(student: Student, event: SchoolEvent, school_name: str) -> str:
    return (
        f"*{school_name}*\n\n"
        f"Olá {student.guardian_name}, nova atualização na agenda:\n\n"
        f"*{event.title}*\n"
        f"📅 {event.date.strftime('%d/%m/%Y')} às {event.time}\n"
        f"📝 {event.description}\n\n"
        f"Acesse o app para mais detalhes."
    )


def build_link(
    student: Student,
    event: SchoolEvent,
    *,
    school_name: str,
    base_url: str = "https://wa.me",
    country_code: str = "55",
) -> str:
    phone = international_phone(student.contact_phone, country_code)
    text = quote(build_message(student, event, school_name), safe=_URI_COMPONENT_SAFE)
    return f"{base_url.rstrip('/')}/{phone}?text={text}"
