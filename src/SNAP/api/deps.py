# src/SNAP/api/deps.py
from __future__ import annotations

from typing import Awaitable, Optional

from fastapi import Depends, HTTPException, Request, status

from SNAP.schemas import User

from .context import AppContext


def get_context(request: Request) -> AppContext:
    return request.app.state.ctx


def require_user(ctx: AppContext = Depends(get_context)) -> User:
    if not ctx.auth.authenticated or ctx.auth.user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return ctx.auth.user


async def created(write: Awaitable[Optional[str]], detail: str = "Write failed") -> dict:
    doc_id = await write
    if doc_id is None:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)
    return {"id": doc_id}


async def written(write: Awaitable[bool], detail: str = "Write failed") -> dict:
    if not await write:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)
    return {"ok": True}


async def confirmed_delete(write: Awaitable[bool], confirmed: bool, prompt: str) -> dict:
    ok = await write
    if not confirmed:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=prompt)
    if not ok:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Delete failed")
    return {"ok": True}
