# src/SNAP/messaging/push.py
from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Callable, List, Mapping, Optional

from SNAP.app_logger import get_logger

log = get_logger("messaging.push")

MessageListener = Callable[[Optional[str]], None]


class PushService(ABC):
    """Push notification permission contract."""

    @abstractmethod
    async def request_permission(self) -> Optional[str]:
        """Ask for permission; return the device token when granted."""


class NoPushService(PushService):
    async def request_permission(self) -> Optional[str]:
        log.debug("push notifications not available; permission not requested")
        return None


class NotificationCenter:
    """
    Foreground message holder.

    A payload with a `notification` block becomes the text "title: body",
    which stays current until dismissed or until `ttl` seconds pass.
    """

    def __init__(self, ttl: float = 5.0) -> None:
        self.ttl = ttl
        self._current: Optional[str] = None
        self._expiry: Optional[asyncio.TimerHandle] = None
        self._listeners: List[MessageListener] = []

    @property
    def current(self) -> Optional[str]:
        return self._current

    def subscribe(self, listener: MessageListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _set(self, text: Optional[str]) -> None:
        self._current = text
        for listener in list(self._listeners):
            try:
                listener(text)
            except Exception:
                log.exception("notification listener failed")

    def _cancel_expiry(self) -> None:
        if self._expiry is not None:
            self._expiry.cancel()
            self._expiry = None

    def handle(self, payload: Mapping[str, Any]) -> Optional[str]:
        note = payload.get("notification") if payload else None
        if not note:
            log.debug("ignoring data-only push payload")
            return None
        text = f"{note.get('title', '')}: {note.get('body', '')}"
        log.info("foreground message: %s", text)
        self._cancel_expiry()
        self._set(text)
        if self.ttl > 0:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                loop = None
            if loop is not None:
                self._expiry = loop.call_later(self.ttl, self.dismiss)
        return text

    def dismiss(self) -> None:
        self._cancel_expiry()
        if self._current is not None:
            self._set(None)
