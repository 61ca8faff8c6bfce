# src/SNAP/services/student_report.py
"""
AI nutrition report for one student.

Calls the Gemini `generateContent` REST endpoint asking for a JSON answer.
Without an API key a canned report comes back after a short delay, so the
feature can be demonstrated offline. API and parse failures give None.
"""
from __future__ import annotations

import asyncio
import datetime as dt
import json
from typing import List, Optional

import httpx
from pydantic import ValidationError

from SNAP.app_logger import get_logger
from SNAP.core.config import Settings, settings as default_settings
from SNAP.schemas import APIModel, Student

log = get_logger("services.student_report")


class StudentReport(APIModel):
    summary: str
    recommendations: List[str] = []
    risk_assessment: str = ""


MOCK_REPORT = StudentReport(
    summary=(
        "Análise simulada: O aluno apresenta desenvolvimento dentro da curva esperada. "
        "Atenção às restrições alimentares cadastradas."
    ),
    recommendations=[
        "Aumentar ingestão de fibras.",
        "Monitorar hidratação durante atividades físicas.",
        "Evitar contaminação cruzada devido às alergias.",
    ],
    risk_assessment="Risco Moderado devido a alergias múltiplas.",
)


def calculate_age(date_of_birth: str, today: Optional[dt.date] = None) -> int:
    try:
        born = dt.date.fromisoformat(date_of_birth[:10])
    except (TypeError, ValueError):
        return 0
    today = today or dt.date.today()
    return abs(today.year - born.year - ((today.month, today.day) < (born.month, born.day)))


def build_prompt(student: Student, today: Optional[dt.date] = None) -> str:
    medical = student.medical
    allergies = ", ".join(f"{a.name} ({a.severity.value})" for a in medical.allergies) or "Nenhuma"
    intolerances = ", ".join(medical.intolerances) or "Nenhuma"
    return (
        "Atue como um nutricionista pediátrico sênior. Analise os dados do seguinte aluno "
        "e gere um relatório curto em JSON.\n\n"
        "Dados do Aluno:\n"
        f"Nome: {student.full_name}\n"
        f"Idade: {calculate_age(student.date_of_birth, today)} anos\n"
        f"Peso: {student.weight_kg:g}kg\n"
        f"Altura: {student.height_cm:g}cm\n"
        f"Alergias: {allergies}\n"
        f"Intolerâncias: {intolerances}\n"
        f"Notas Médicas: {medical.medical_notes}\n\n"
        "Gere um JSON com a seguinte estrutura (sem markdown):\n"
        "{\n"
        '  "summary": "Um resumo de 2 parágrafos sobre o estado nutricional e cuidados.",\n'
        '  "recommendations": ["Lista de 3 a 5 recomendações práticas para a escola e pais."],\n'
        '  "riskAssessment": "Avaliação de risco (Baixo/Médio/Alto) e justificativa curta."\n'
        "}\n"
    )


def _response_text(payload: dict) -> str:
    parts = payload["candidates"][0]["content"]["parts"]
    return "".join(p.get("text", "") for p in parts)


async def generate_student_report(student: Student, cfg: Settings = default_settings) -> Optional[StudentReport]:
    if not cfg.GEMINI_API_KEY:
        log.warning("Gemini API key not found; returning mock report")
        if cfg.REPORT_MOCK_DELAY_SECONDS > 0:
            await asyncio.sleep(cfg.REPORT_MOCK_DELAY_SECONDS)
        return MOCK_REPORT.model_copy(deep=True)

    url = f"{cfg.GEMINI_BASE_URL.rstrip('/')}/models/{cfg.GEMINI_MODEL}:generateContent"
    body = {
        "contents": [{"parts": [{"text": build_prompt(student)}]}],
        "generationConfig": {"responseMimeType": "application/json"},
    }
    try:
        async with httpx.AsyncClient(timeout=cfg.REPORT_TIMEOUT_SECONDS) as client:
            resp = await client.post(url, params={"key": cfg.GEMINI_API_KEY}, json=body)
            resp.raise_for_status()
        text = _response_text(resp.json())
        if not text:
            log.error("Gemini returned an empty response for student %s", student.id)
            return None
        return StudentReport.model_validate(json.loads(text))
    except httpx.HTTPError as e:
        log.error("Gemini API error for student %s: %s", student.id, e)
    except (KeyError, IndexError, TypeError, ValueError, ValidationError) as e:
        log.error("unusable Gemini response for student %s: %s", student.id, e)
    return None
