# src/SNAP/auth/identity.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from SNAP.app_logger import get_logger, mask
from SNAP.core.config import Settings
from SNAP.exceptions import IdentityProviderError

from .tokens import TokenSet

log = get_logger("auth.identity")


class IdentityProvider(ABC):
    """Managed identity provider: email/password accounts and one live session."""

    @property
    @abstractmethod
    def current_session(self) -> Optional[TokenSet]:
        ...

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> TokenSet:
        ...

    @abstractmethod
    async def sign_up(self, email: str, password: str) -> TokenSet:
        ...

    @abstractmethod
    async def sign_out(self) -> None:
        ...


class FirebaseIdentityProvider(IdentityProvider):
    """
    Firebase Authentication through the Identity Toolkit REST API.

    Failures surface as IdentityProviderError whose `code` is the provider's
    error message (INVALID_LOGIN_CREDENTIALS, EMAIL_EXISTS, ...) or
    NETWORK_REQUEST_FAILED when the provider cannot be reached.
    """

    def __init__(
        self,
        api_key: Optional[str],
        *,
        base_url: str = "https://identitytoolkit.googleapis.com/v1",
        securetoken_url: str = "https://securetoken.googleapis.com/v1",
        timeout: float = 10.0,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._securetoken_url = securetoken_url.rstrip("/")
        self._timeout = timeout
        self._session: Optional[TokenSet] = None

    @classmethod
    def from_settings(cls, cfg: Settings) -> "FirebaseIdentityProvider":
        return cls(
            cfg.FIREBASE_API_KEY,
            base_url=cfg.IDENTITY_BASE_URL,
            securetoken_url=cfg.SECURETOKEN_BASE_URL,
            timeout=cfg.IDENTITY_TIMEOUT_SECONDS,
        )

    @property
    def current_session(self) -> Optional[TokenSet]:
        return self._session

    # ---- endpoints ----
    def _accounts_url(self, action: str) -> str:
        return f"{self._base_url}/accounts:{action}"

    def _token_url(self) -> str:
        return f"{self._securetoken_url}/token"

    async def _post(self, url: str, *, json: Optional[Dict[str, Any]] = None,
                    data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        if not self._api_key:
            raise IdentityProviderError("CONFIGURATION_NOT_FOUND", "Firebase API key is not configured")
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.post(url, params={"key": self._api_key}, json=json, data=data)
        except httpx.HTTPError as e:
            log.warning("identity provider unreachable: %s", e)
            raise IdentityProviderError("NETWORK_REQUEST_FAILED", str(e), cause=e) from e

        if resp.status_code != 200:
            code = _error_code(resp)
            log.info("identity provider rejected request: status=%s code=%s", resp.status_code, code)
            raise IdentityProviderError(code, status_code=resp.status_code)
        return resp.json()

    # ---- operations ----
    async def sign_in(self, email: str, password: str) -> TokenSet:
        payload = await self._post(
            self._accounts_url("signInWithPassword"),
            json={"email": email, "password": password, "returnSecureToken": True},
        )
        self._session = TokenSet.from_sign_in_response(payload)
        log.info("signed in uid=%s token=%s", self._session.uid, mask(self._session.id_token))
        return self._session

    async def sign_up(self, email: str, password: str) -> TokenSet:
        payload = await self._post(
            self._accounts_url("signUp"),
            json={"email": email, "password": password, "returnSecureToken": True},
        )
        self._session = TokenSet.from_sign_in_response(payload)
        log.info("account created uid=%s", self._session.uid)
        return self._session

    async def refresh(self) -> TokenSet:
        """Exchange the refresh token for a fresh id token."""
        if not self._session or not self._session.refresh_token:
            raise IdentityProviderError("TOKEN_EXPIRED", "No refresh token available")
        payload = await self._post(
            self._token_url(),
            data={"grant_type": "refresh_token", "refresh_token": self._session.refresh_token},
        )
        self._session = self._session.refreshed(payload)
        log.debug("refreshed token for uid=%s", self._session.uid)
        return self._session

    async def sign_out(self) -> None:
        # REST sessions are stateless on the provider side; dropping the tokens is the sign-out
        if self._session:
            log.info("signed out uid=%s", self._session.uid)
        self._session = None


def _error_code(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return f"HTTP_{resp.status_code}"
    err = body.get("error") if isinstance(body, dict) else None
    if isinstance(err, dict) and err.get("message"):
        return str(err["message"])
    if isinstance(err, str):
        return err
    return f"HTTP_{resp.status_code}"
