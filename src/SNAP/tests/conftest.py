# src/SNAP/tests/conftest.py
from __future__ import annotations

import datetime as dt
import logging
import os
import sys
from typing import Dict, List, Optional, Tuple

import pytest
from httpx import ASGITransport, AsyncClient

from SNAP.api.main import create_app
from SNAP.auth import IdentityProvider, TokenSet
from SNAP.core.config import Settings
from SNAP.exceptions import IdentityProviderError
from SNAP.gateway import DomainGateway
from SNAP.schemas import Allergy, AllergySeverity, EventAudience, Expense, ExpenseCategory, MedicalRecord, SchoolEvent, Student
from SNAP.store import InMemoryDocumentStore
from SNAP.sync import RealtimeSync


# =========================
# Logging -> stdout
# =========================
@pytest.fixture(scope="session", autouse=True)
def _tests_log_to_stdout():
    root = logging.getLogger()
    if not any(isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stdout for h in root.handlers):
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        root.addHandler(h)
    root.setLevel(os.getenv("TEST_LOG_LEVEL", "INFO").upper())


# Make anyio run on asyncio
@pytest.fixture(scope="session", autouse=True)
def anyio_backend():
    return "asyncio"


# ==============================================================
# Settings / collaborators
# ==============================================================

@pytest.fixture
def cfg(tmp_path) -> Settings:
    return Settings().model_copy(update={
        "FIREBASE_API_KEY": "test-api-key",
        "GEMINI_API_KEY": None,
        "LOCAL_OVERRIDE_ENABLED": True,
        "LOCAL_OVERRIDE_USERNAME": "admin",
        "LOCAL_OVERRIDE_SECRET": "7777777",
        "LOCAL_SESSION_PATH": str(tmp_path / "local_storage.json"),
        "LOCAL_SESSION_KEY": "local_user",
        "DISPATCH_DELAY_MIN_SECONDS": 0.0,
        "DISPATCH_DELAY_MAX_SECONDS": 0.0,
        "REPORT_MOCK_DELAY_SECONDS": 0.0,
        "NOTIFICATION_TTL_SECONDS": 5.0,
        "LOG_JSON": False,
        "cors_origins": [],
    })


class FakeIdentityProvider(IdentityProvider):
    """In-process stand-in for the managed provider; records every call."""

    def __init__(self, accounts: Optional[Dict[str, str]] = None) -> None:
        self.accounts = dict(accounts or {})
        self.calls: List[Tuple[str, str]] = []
        self._session: Optional[TokenSet] = None

    @property
    def current_session(self) -> Optional[TokenSet]:
        return self._session

    def _issue(self, email: str) -> TokenSet:
        uid = "uid-" + email.split("@")[0]
        self._session = TokenSet.from_sign_in_response(
            {"localId": uid, "email": email, "idToken": f"id-{uid}", "refreshToken": f"rt-{uid}", "expiresIn": "3600"}
        )
        return self._session

    async def sign_in(self, email: str, password: str) -> TokenSet:
        self.calls.append(("sign_in", email))
        if self.accounts.get(email) != password:
            raise IdentityProviderError("INVALID_LOGIN_CREDENTIALS", status_code=400)
        return self._issue(email)

    async def sign_up(self, email: str, password: str) -> TokenSet:
        self.calls.append(("sign_up", email))
        if email in self.accounts:
            raise IdentityProviderError("EMAIL_EXISTS", status_code=400)
        if len(password) < 6:
            raise IdentityProviderError("WEAK_PASSWORD : Password should be at least 6 characters", status_code=400)
        self.accounts[email] = password
        return self._issue(email)

    async def sign_out(self) -> None:
        self.calls.append(("sign_out", ""))
        self._session = None


@pytest.fixture
def provider() -> FakeIdentityProvider:
    return FakeIdentityProvider({"nutri@escola.com": "segredo123"})


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def sync(store) -> RealtimeSync:
    s = RealtimeSync(store)
    s.start()
    yield s
    s.stop()


@pytest.fixture
def gateway(store) -> DomainGateway:
    return DomainGateway(store)


# ==============================================================
# Entity builders
# ==============================================================

@pytest.fixture
def make_student():
    def _make(name: str = "Ana Souza", **kw) -> Student:
        kw.setdefault("guardian_name", "Maria Souza")
        kw.setdefault("contact_phone", "(11) 98765-4321")
        kw.setdefault("school_class", "Maternal I")
        return Student(full_name=name, **kw)
    return _make


@pytest.fixture
def peanut_allergy() -> MedicalRecord:
    return MedicalRecord(allergies=[Allergy(name="Amendoim", severity=AllergySeverity.SEVERE)])


@pytest.fixture
def make_expense():
    def _make(amount: float = 150.0, date: str = "2024-03-15", **kw) -> Expense:
        kw.setdefault("description", "Compra de hortifruti")
        kw.setdefault("category", ExpenseCategory.FOOD)
        return Expense(amount=amount, date=dt.date.fromisoformat(date), **kw)
    return _make


@pytest.fixture
def make_event():
    def _make(title: str = "Festa Junina", **kw) -> SchoolEvent:
        kw.setdefault("date", dt.date(2024, 6, 15))
        kw.setdefault("time", "09:00")
        kw.setdefault("audience", EventAudience.GLOBAL)
        return SchoolEvent(title=title, **kw)
    return _make


# ==============================================================
# In-process app
# ==============================================================

@pytest.fixture
async def app(cfg, store, provider):
    app = create_app(cfg, store=store, provider=provider)
    # ASGITransport does not drive lifespan events itself
    async with app.router.lifespan_context(app):
        yield app


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
async def admin_client(client):
    r = await client.post("/auth/login", json={"username": "admin", "password": "7777777"})
    assert r.status_code == 200, r.text
    return client
