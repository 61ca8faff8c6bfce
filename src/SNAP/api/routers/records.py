# src/SNAP/api/routers/records.py
"""Meal logs, appointments and weekly goals."""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from SNAP.schemas import Appointment, MealLog, WeeklyGoal

from ..context import AppContext
from ..deps import created, get_context, require_user, written

logs_router = APIRouter(prefix="/logs", tags=["logs"], dependencies=[Depends(require_user)])
appointments_router = APIRouter(prefix="/appointments", tags=["appointments"], dependencies=[Depends(require_user)])
goals_router = APIRouter(prefix="/goals", tags=["goals"], dependencies=[Depends(require_user)])


# ---- meal logs ----
@logs_router.get("", response_model=List[MealLog])
async def list_logs(ctx: AppContext = Depends(get_context)):
    return list(ctx.sync.logs.items)


@logs_router.post("", status_code=status.HTTP_201_CREATED)
async def create_log(body: MealLog, ctx: AppContext = Depends(get_context)):
    return await created(ctx.gateway.add_log(body))


# ---- appointments ----
@appointments_router.get("", response_model=List[Appointment])
async def list_appointments(ctx: AppContext = Depends(get_context)):
    return list(ctx.sync.appointments.items)


@appointments_router.post("", status_code=status.HTTP_201_CREATED)
async def create_appointment(body: Appointment, ctx: AppContext = Depends(get_context)):
    return await created(ctx.gateway.add_appointment(body))


@appointments_router.delete("/{appointment_id}")
async def delete_appointment(appointment_id: str, ctx: AppContext = Depends(get_context)):
    return await written(ctx.gateway.delete_appointment(appointment_id))


# ---- weekly goals ----
@goals_router.get("", response_model=List[WeeklyGoal])
async def list_goals(ctx: AppContext = Depends(get_context)):
    return list(ctx.sync.goals.items)


@goals_router.post("", status_code=status.HTTP_201_CREATED)
async def create_goal(body: WeeklyGoal, ctx: AppContext = Depends(get_context)):
    return await created(ctx.gateway.add_goal(body))


@goals_router.post("/{goal_id}/toggle")
async def toggle_goal(goal_id: str, ctx: AppContext = Depends(get_context)):
    goal = ctx.sync.goals.get(goal_id)
    if goal is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Goal not found")
    return await written(ctx.gateway.toggle_goal(goal_id, goal.completed))


@goals_router.delete("/{goal_id}")
async def delete_goal(goal_id: str, ctx: AppContext = Depends(get_context)):
    return await written(ctx.gateway.delete_goal(goal_id))
