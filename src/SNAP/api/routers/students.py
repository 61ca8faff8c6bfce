# src/SNAP/api/routers/students.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from SNAP.dashboard import filter_students, student_meal_history
from SNAP.gateway import ALERT_STUDENT_CREATE_FAILED, CONFIRM_DELETE_STUDENT
from SNAP.schemas import APIModel, MealLog, Student
from SNAP.services import StudentReport, generate_student_report

from ..context import AppContext
from ..deps import confirmed_delete, created, get_context, require_user, written

router = APIRouter(prefix="/students", tags=["students"], dependencies=[Depends(require_user)])


class MealHistoryOut(APIModel):
    logs: List[MealLog]
    consumption: List[int]


def _student_or_404(ctx: AppContext, student_id: str) -> Student:
    student = ctx.sync.students.get(student_id)
    if student is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")
    return student


@router.get("", response_model=List[Student])
async def list_students(q: str = "", ctx: AppContext = Depends(get_context)):
    return filter_students(ctx.sync.students.items, q)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_student(body: Student, ctx: AppContext = Depends(get_context)):
    return await created(ctx.gateway.add_student(body), ALERT_STUDENT_CREATE_FAILED)


@router.get("/{student_id}", response_model=Student)
async def get_student(student_id: str, ctx: AppContext = Depends(get_context)):
    return _student_or_404(ctx, student_id)


@router.put("/{student_id}")
async def update_student(student_id: str, body: Student, ctx: AppContext = Depends(get_context)):
    return await written(ctx.gateway.update_student(body.model_copy(update={"id": student_id})))


@router.delete("/{student_id}")
async def delete_student(student_id: str, confirm: bool = False, ctx: AppContext = Depends(get_context)):
    write = ctx.gateway.delete_student(student_id, confirm=lambda _prompt: confirm)
    return await confirmed_delete(write, confirm, CONFIRM_DELETE_STUDENT)


@router.get("/{student_id}/logs", response_model=MealHistoryOut)
async def student_logs(student_id: str, ctx: AppContext = Depends(get_context)):
    _student_or_404(ctx, student_id)
    logs, series = student_meal_history(ctx.sync.logs.items, student_id)
    return MealHistoryOut(logs=logs, consumption=series)


@router.post("/{student_id}/report", response_model=StudentReport)
async def student_report(student_id: str, ctx: AppContext = Depends(get_context)):
    student = _student_or_404(ctx, student_id)
    report = await generate_student_report(student, ctx.cfg)
    if report is None:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Report generation failed")
    return report
