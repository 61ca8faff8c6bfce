# src/SNAP/api/context.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from SNAP.app_logger import get_logger
from SNAP.auth import AuthSessionManager, AuthState, FirebaseIdentityProvider, IdentityProvider, LocalSessionStore
from SNAP.core.config import Settings
from SNAP.gateway import DomainGateway, EventDispatcher
from SNAP.messaging import NoPushService, NotificationCenter, PushService
from SNAP.schemas import User
from SNAP.store import DocumentStore, build_store
from SNAP.sync import RealtimeSync

log = get_logger("api.context")


@dataclass
class AppContext:
    """Everything one running app shares: store, sync, gateway, auth."""

    cfg: Settings
    store: DocumentStore
    sync: RealtimeSync
    gateway: DomainGateway
    dispatcher: EventDispatcher
    auth: AuthSessionManager
    notifications: NotificationCenter

    def _follow_auth(self, state: AuthState, _user: Optional[User]) -> None:
        # live data only while somebody is signed in
        if state in (AuthState.AUTHENTICATED_MANAGED, AuthState.AUTHENTICATED_LOCAL):
            self.sync.start()
        elif state == AuthState.UNAUTHENTICATED:
            self.sync.stop()

    async def start(self) -> AuthState:
        self.auth.subscribe(self._follow_auth)
        state = await self.auth.restore()
        log.info("session restored: %s", state.value)
        return state

    async def close(self) -> None:
        self.sync.stop()
        await self.gateway.drain()
        await self.store.close()


def build_context(
    cfg: Settings,
    *,
    store: Optional[DocumentStore] = None,
    provider: Optional[IdentityProvider] = None,
    push: Optional[PushService] = None,
) -> AppContext:
    if store is None:
        store = build_store(cfg)
    gateway = DomainGateway(store)
    dispatcher = EventDispatcher(
        gateway,
        school_name=cfg.SCHOOL_NAME,
        whatsapp_base_url=cfg.WHATSAPP_BASE_URL,
        country_code=cfg.WHATSAPP_COUNTRY_CODE,
        delay_bounds=cfg.dispatch_delay_bounds,
    )
    auth = AuthSessionManager(
        provider if provider is not None else FirebaseIdentityProvider.from_settings(cfg),
        LocalSessionStore(cfg.LOCAL_SESSION_PATH),
        push=push or NoPushService(),
        cfg=cfg,
    )
    return AppContext(
        cfg=cfg,
        store=store,
        sync=RealtimeSync(store),
        gateway=gateway,
        dispatcher=dispatcher,
        auth=auth,
        notifications=NotificationCenter(ttl=cfg.NOTIFICATION_TTL_SECONDS),
    )
