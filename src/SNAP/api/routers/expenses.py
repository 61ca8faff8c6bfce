# src/SNAP/api/routers/expenses.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import Field

from SNAP.dashboard import filter_expenses
from SNAP.gateway import CONFIRM_DELETE_EXPENSE
from SNAP.schemas import Expense

from ..context import AppContext
from ..deps import confirmed_delete, created, get_context, require_user, written

router = APIRouter(prefix="/expenses", tags=["expenses"], dependencies=[Depends(require_user)])


class ExpenseIn(Expense):
    amount: float = Field(ge=0)


@router.get("", response_model=List[Expense])
async def list_expenses(
    month: Optional[str] = Query(default=None, pattern=r"^\d{4}-\d{2}$"),
    q: str = "",
    ctx: AppContext = Depends(get_context),
):
    return filter_expenses(ctx.sync.expenses.items, month, q)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_expense(body: ExpenseIn, ctx: AppContext = Depends(get_context)):
    return await created(ctx.gateway.add_expense(body))


@router.put("/{expense_id}")
async def update_expense(expense_id: str, body: ExpenseIn, ctx: AppContext = Depends(get_context)):
    return await written(ctx.gateway.update_expense(body.model_copy(update={"id": expense_id})))


@router.delete("/{expense_id}")
async def delete_expense(expense_id: str, confirm: bool = False, ctx: AppContext = Depends(get_context)):
    write = ctx.gateway.delete_expense(expense_id, confirm=lambda _prompt: confirm)
    return await confirmed_delete(write, confirm, CONFIRM_DELETE_EXPENSE)
