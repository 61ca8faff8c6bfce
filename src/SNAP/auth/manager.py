# src/SNAP/auth/manager.py
from __future__ import annotations

import hmac
from enum import Enum
from typing import Callable, List, Optional

from pydantic import ValidationError

from SNAP.app_logger import get_logger, mask
from SNAP.core.config import Settings, settings as default_settings
from SNAP.exceptions import AuthError, IdentityProviderError
from SNAP.messaging import NoPushService, PushService
from SNAP.schemas import User, UserRole

from .errors import login_error, register_error
from .identity import IdentityProvider
from .local_session import LocalSessionStore
from .tokens import TokenSet

log = get_logger("auth")

LOCAL_USER_ID = "local-admin"
LOCAL_USER_NAME = "Administrador (Local)"
DEFAULT_USER_NAME = "Usuário"


class AuthState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED_MANAGED = "authenticated_managed"
    AUTHENTICATED_LOCAL = "authenticated_local"


AuthListener = Callable[[AuthState, Optional[User]], None]


def managed_user(session: TokenSet) -> User:
    email = session.email or ""
    return User(
        id=session.uid,
        username=email,
        role=UserRole.ADMIN,
        name=email.split("@")[0] if email else DEFAULT_USER_NAME,
    )


def local_user(username: str) -> User:
    return User(id=LOCAL_USER_ID, username=username, role=UserRole.ADMIN, name=LOCAL_USER_NAME)


class AuthSessionManager:
    """
    Decides who is signed in.

    Two sources of identity: the managed provider (email/password accounts)
    and the local override credential, which is checked before the provider
    and persisted in the local session file so it survives a restart.
    Listeners are called on every state transition.
    """

    def __init__(
        self,
        provider: IdentityProvider,
        local_store: LocalSessionStore,
        *,
        push: Optional[PushService] = None,
        cfg: Settings = default_settings,
    ) -> None:
        self._provider = provider
        self._local = local_store
        self._push = push or NoPushService()
        self._cfg = cfg
        self._state = AuthState.UNAUTHENTICATED
        self._user: Optional[User] = None
        self._listeners: List[AuthListener] = []
        self.last_error: Optional[AuthError] = None

    # ---- state ----
    @property
    def state(self) -> AuthState:
        return self._state

    @property
    def user(self) -> Optional[User]:
        return self._user

    @property
    def authenticated(self) -> bool:
        return self._state in (AuthState.AUTHENTICATED_MANAGED, AuthState.AUTHENTICATED_LOCAL)

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _transition(self, state: AuthState, user: Optional[User] = None) -> None:
        self._state = state
        self._user = user
        log.debug("auth state -> %s", state.value)
        for listener in list(self._listeners):
            try:
                listener(state, user)
            except Exception:
                log.exception("auth listener failed on %s", state.value)

    # ---- local override ----
    def _is_override(self, identifier: str, secret: str) -> bool:
        if not self._cfg.LOCAL_OVERRIDE_ENABLED:
            return False
        return identifier == self._cfg.LOCAL_OVERRIDE_USERNAME and hmac.compare_digest(
            secret.encode("utf-8"), self._cfg.LOCAL_OVERRIDE_SECRET.encode("utf-8")
        )

    def _enter_local(self, username: str) -> User:
        user = local_user(username)
        self._local.set_item(self._cfg.LOCAL_SESSION_KEY, user.model_dump_json(by_alias=True))
        log.warning("local override credential used; provider bypassed for '%s'", username)
        self._transition(AuthState.AUTHENTICATED_LOCAL, user)
        return user

    def _read_local(self) -> Optional[User]:
        raw = self._local.get_item(self._cfg.LOCAL_SESSION_KEY)
        if not raw:
            return None
        try:
            return User.model_validate_json(raw)
        except ValidationError as e:
            log.warning("discarding unreadable local session record: %s", e.errors()[0].get("msg"))
            self._local.remove_item(self._cfg.LOCAL_SESSION_KEY)
            return None

    async def _enter_managed(self, session: TokenSet) -> User:
        self._local.remove_item(self._cfg.LOCAL_SESSION_KEY)
        user = managed_user(session)
        self._transition(AuthState.AUTHENTICATED_MANAGED, user)
        await self._request_push_permission()
        return user

    async def _request_push_permission(self) -> None:
        try:
            token = await self._push.request_permission()
        except Exception:
            log.exception("push permission request failed")
            return
        if token:
            # not forwarded anywhere yet
            log.info("push token acquired: %s", mask(token))

    # ---- operations ----
    async def login(self, identifier: str, secret: str) -> User:
        self.last_error = None
        if self._is_override(identifier, secret):
            return self._enter_local(identifier)

        prior = (self._state, self._user)
        self._transition(AuthState.AUTHENTICATING, self._user)
        try:
            session = await self._provider.sign_in(identifier, secret)
        except IdentityProviderError as e:
            self.last_error = login_error(e)
            log.info("login failed for %s: %s", identifier, self.last_error.category)
            # a failed attempt leaves any existing session in place
            self._transition(*prior)
            raise self.last_error from e
        return await self._enter_managed(session)

    async def register(self, identifier: str, secret: str) -> User:
        self.last_error = None
        prior = (self._state, self._user)
        self._transition(AuthState.AUTHENTICATING, self._user)
        try:
            session = await self._provider.sign_up(identifier, secret)
        except IdentityProviderError as e:
            self.last_error = register_error(e)
            log.info("registration failed for %s: %s", identifier, self.last_error.category)
            self._transition(*prior)
            raise self.last_error from e
        return await self._enter_managed(session)

    async def logout(self) -> None:
        try:
            await self._provider.sign_out()
        except IdentityProviderError as e:
            log.warning("provider sign-out failed: %s", e)
        self._local.remove_item(self._cfg.LOCAL_SESSION_KEY)
        self._transition(AuthState.UNAUTHENTICATED)

    async def restore(self) -> AuthState:
        """Pick up an existing session at process start."""
        session = self._provider.current_session
        if session is not None:
            await self._enter_managed(session)
        else:
            user = self._read_local()
            if user is not None:
                log.warning("restored local override session for '%s'", user.username)
                self._transition(AuthState.AUTHENTICATED_LOCAL, user)
            else:
                self._transition(AuthState.UNAUTHENTICATED)
        return self._state
