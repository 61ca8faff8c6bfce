# src/SNAP/tests/test_student_report.py
import datetime as dt
import json

import httpx
import pytest

from SNAP.services import MOCK_REPORT, build_prompt, calculate_age, generate_student_report

pytestmark = pytest.mark.anyio


def _patch_gemini_http(monkeypatch, status_code, json_body=None):
    calls = []

    class DummyAsyncResp:
        def __init__(self):
            self.status_code = status_code
            self._json = json_body or {}

        def json(self):
            return self._json

        def raise_for_status(self):
            if self.status_code >= 400:
                request = httpx.Request("POST", "https://example.test")
                raise httpx.HTTPStatusError("error", request=request, response=httpx.Response(self.status_code, request=request))

    class DummyAsyncClient:
        def __init__(self, *a, **kw): pass
        async def __aenter__(self): return self
        async def __aexit__(self, *args): pass

        async def post(self, url, **kw):
            calls.append((url, kw))
            return DummyAsyncResp()

    monkeypatch.setattr(httpx, "AsyncClient", DummyAsyncClient)
    return calls


def _gemini_body(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def test_calculate_age():
    today = dt.date(2024, 6, 10)
    assert calculate_age("2021-06-10", today) == 3
    assert calculate_age("2021-06-11", today) == 2
    assert calculate_age("", today) == 0


def test_prompt_lists_allergies_and_defaults(make_student, peanut_allergy):
    with_allergy = build_prompt(make_student("Ana", medical=peanut_allergy, weight_kg=14.5, height_cm=95))
    assert "Nome: Ana" in with_allergy
    assert "Alergias: Amendoim (Grave)" in with_allergy
    assert "Peso: 14.5kg" in with_allergy
    assert "Intolerâncias: Nenhuma" in with_allergy
    assert "Alergias: Nenhuma" in build_prompt(make_student("Bia"))


async def test_mock_report_without_api_key(cfg, make_student, monkeypatch):
    calls = _patch_gemini_http(monkeypatch, 200)
    report = await generate_student_report(make_student(), cfg)
    assert report == MOCK_REPORT
    assert calls == []


async def test_report_from_gemini(cfg, make_student, monkeypatch):
    answer = {"summary": "Tudo certo.", "recommendations": ["Mais fibras."], "riskAssessment": "Baixo"}
    calls = _patch_gemini_http(monkeypatch, 200, _gemini_body(json.dumps(answer)))
    cfg = cfg.model_copy(update={"GEMINI_API_KEY": "g-key"})

    report = await generate_student_report(make_student(), cfg)

    assert report.risk_assessment == "Baixo"
    assert report.recommendations == ["Mais fibras."]
    url, kw = calls[0]
    assert url.endswith("/models/gemini-2.5-flash:generateContent")
    assert kw["json"]["generationConfig"]["responseMimeType"] == "application/json"


@pytest.mark.parametrize(
    "status_code, body",
    [
        (500, {}),
        (200, _gemini_body("not json")),
        (200, _gemini_body("")),
        (200, {"candidates": []}),
    ],
)
async def test_report_failures_yield_none(cfg, make_student, monkeypatch, status_code, body):
    _patch_gemini_http(monkeypatch, status_code, body)
    cfg = cfg.model_copy(update={"GEMINI_API_KEY": "g-key"})
    assert await generate_student_report(make_student(), cfg) is None
