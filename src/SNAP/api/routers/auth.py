# src/SNAP/api/routers/auth.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import AliasChoices, Field

from SNAP.app_logger import get_logger
from SNAP.exceptions import AuthError
from SNAP.schemas import APIModel, User

from ..context import AppContext
from ..deps import get_context

router = APIRouter(prefix="/auth", tags=["auth"])
log = get_logger("routers.auth")


class Credentials(APIModel):
    # the login form calls it email, the override credential is a username
    identifier: str = Field(validation_alias=AliasChoices("identifier", "email", "username"))
    password: str


class SessionOut(APIModel):
    state: str
    user: Optional[User] = None


def _session(ctx: AppContext) -> SessionOut:
    return SessionOut(state=ctx.auth.state.value, user=ctx.auth.user)


@router.post("/login", response_model=SessionOut)
async def login(body: Credentials, ctx: AppContext = Depends(get_context)):
    try:
        await ctx.auth.login(body.identifier, body.password)
    except AuthError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.user_message)
    return _session(ctx)


@router.post("/register", response_model=SessionOut)
async def register(body: Credentials, ctx: AppContext = Depends(get_context)):
    try:
        await ctx.auth.register(body.identifier, body.password)
    except AuthError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.user_message)
    return _session(ctx)


@router.post("/logout", response_model=SessionOut)
async def logout(ctx: AppContext = Depends(get_context)):
    await ctx.auth.logout()
    return _session(ctx)


@router.get("/me", response_model=SessionOut)
async def me(ctx: AppContext = Depends(get_context)):
    if not ctx.auth.authenticated:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return _session(ctx)
