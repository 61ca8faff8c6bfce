# src/SNAP/sync/normalize.py
"""
Turn raw store documents into entities.

Students go through a defaulting pass so half-written or legacy records
never break a consumer and are never rejected. Every other entity only
gets its canonical id injected; a document missing a required field is
rejected.
"""
from __future__ import annotations

from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import ValidationError

from SNAP.exceptions import DocumentShapeError
from SNAP.schemas import AllergySeverity, Entity, Student, temp_id
from SNAP.store.base import DocumentSnapshot

E = TypeVar("E", bound=Entity)

STUDENT_DEFAULTS: Dict[str, Any] = {
    "fullName": "Sem Nome",
    "dateOfBirth": "",
    "gender": "M",
    "heightCm": 0,
    "weightKg": 0,
    "guardianName": "",
    "contactPhone": "",
    "contactEmail": "",
    "schoolClass": "",
    "shift": "Matutino",
    "teacherName": "",
    "avatarUrl": "",
    "generalNotes": "",
}

MEDICAL_DEFAULTS: Dict[str, Any] = {
    "hasRestriction": False,
    "allergies": [],
    "intolerances": [],
    "medicalNotes": "",
    "bloodType": "",
}

GENDERS = ("M", "F")
SHIFTS = ("Matutino", "Vespertino", "Integral")
SEVERITIES = tuple(s.value for s in AllergySeverity)
NUMERIC_FIELDS = ("heightCm", "weightKg")


def _with_defaults(data: Dict[str, Any], defaults: Dict[str, Any]) -> Dict[str, Any]:
    # falsy values count as missing, matching the `value || default` reads of the web client
    return {key: data.get(key) or (list(default) if isinstance(default, list) else default)
            for key, default in defaults.items()}


def _number(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0


def _text(value: Any) -> str:
    return value if isinstance(value, str) else str(value)


def _allergy(raw: Any) -> Optional[Dict[str, Any]]:
    if isinstance(raw, str):
        raw = {"name": raw}
    if not isinstance(raw, dict):
        return None
    severity = raw.get("severity")
    notes = raw.get("notes")
    return {
        "id": _text(raw.get("id") or temp_id()),
        "name": _text(raw.get("name") or ""),
        "severity": severity if severity in SEVERITIES else AllergySeverity.MILD.value,
        "notes": None if notes is None else _text(notes),
    }


def _medical(raw: Any) -> Dict[str, Any]:
    out = _with_defaults(raw if isinstance(raw, dict) else {}, MEDICAL_DEFAULTS)
    allergies = out["allergies"] if isinstance(out["allergies"], list) else []
    out["allergies"] = [a for a in map(_allergy, allergies) if a is not None]
    intolerances = out["intolerances"] if isinstance(out["intolerances"], list) else [out["intolerances"]]
    out["intolerances"] = [_text(i) for i in intolerances if i]
    out["hasRestriction"] = bool(out["hasRestriction"])
    out["medicalNotes"] = _text(out["medicalNotes"])
    out["bloodType"] = _text(out["bloodType"])
    return out


def student_document(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Defaulted copy of a raw student document (unknown keys dropped).

    Values outside an enumerated set (gender, shift, allergy severity) fall
    back to the default, numbers that do not parse become 0, and allergy
    entries get an id, an empty name and the mildest severity when missing.
    The result always validates as a Student.
    """
    out = _with_defaults(data, STUDENT_DEFAULTS)
    for key, value in out.items():
        if key in NUMERIC_FIELDS:
            out[key] = _number(value)
        else:
            out[key] = _text(value)
    if out["gender"] not in GENDERS:
        out["gender"] = STUDENT_DEFAULTS["gender"]
    if out["shift"] not in SHIFTS:
        out["shift"] = STUDENT_DEFAULTS["shift"]
    out["medical"] = _medical(data.get("medical"))
    return out


def normalize_student(doc: DocumentSnapshot) -> Student:
    payload = student_document(doc.data)
    payload["id"] = doc.id
    try:
        return Student.model_validate(payload)
    except ValidationError as e:
        raise DocumentShapeError("students", doc.id, _first_error(e), cause=e) from e


def inject_id(model: Type[E], collection: str, doc: DocumentSnapshot) -> E:
    # canonical id wins over any stray "id" key stored in the document
    try:
        return model.model_validate({**doc.data, "id": doc.id})
    except ValidationError as e:
        raise DocumentShapeError(collection, doc.id, _first_error(e), cause=e) from e


def _first_error(e: ValidationError) -> str:
    errs = e.errors()
    if not errs:
        return str(e)
    first = errs[0]
    loc = ".".join(str(p) for p in first.get("loc", ()))
    return f"{loc}: {first.get('msg')}"
