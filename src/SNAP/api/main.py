# src/SNAP/api/main.py
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from SNAP.app_logger import configure_json_logging, get_logger
from SNAP.auth import IdentityProvider
from SNAP.core.config import Settings, settings as default_settings
from SNAP.exceptions import SNAPError
from SNAP.messaging import PushService
from SNAP.store import DocumentStore

from .context import build_context
from .routers import auth, dashboard, events, expenses, health, records, students

log = get_logger("api")


def create_app(
    cfg: Optional[Settings] = None,
    *,
    store: Optional[DocumentStore] = None,
    provider: Optional[IdentityProvider] = None,
    push: Optional[PushService] = None,
) -> FastAPI:
    cfg = cfg or default_settings
    if cfg.LOG_JSON:
        configure_json_logging(cfg.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # ---------------- STARTUP ----------------
        ctx = build_context(cfg, store=store, provider=provider, push=push)
        app.state.ctx = ctx
        await ctx.start()
        log.info("[startup] %s %s store=%s", cfg.APP_NAME, cfg.APP_VERSION, cfg.STORE_BACKEND)
        try:
            yield
        finally:
            # ---------------- SHUTDOWN ----------------
            await ctx.close()
            log.info("[shutdown] store closed")

    app = FastAPI(title=cfg.APP_NAME, version=cfg.APP_VERSION, lifespan=lifespan)

    if cfg.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[str(o).rstrip("/") for o in cfg.cors_origins],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.exception_handler(SNAPError)
    async def snap_error_handler(request: Request, exc: SNAPError):
        log.error("%s %s -> %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=500, content={"detail": exc.to_dict()})

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(students.router)
    app.include_router(records.logs_router)
    app.include_router(records.appointments_router)
    app.include_router(records.goals_router)
    app.include_router(expenses.router)
    app.include_router(events.router)
    app.include_router(dashboard.router)
    return app
