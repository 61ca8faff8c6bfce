from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Optional

from pydantic import Field

from .base import Entity, temp_id


class ExpenseCategory(str, Enum):
    FOOD = "Alimentação"
    SCHOOL_SUPPLIES = "Material Escolar"
    SALARIES = "Salários"
    MAINTENANCE = "Manutenção"
    UTILITIES = "Contas (Água/Luz/Net)"
    MARKETING = "Marketing"
    TAXES = "Impostos"
    OTHER = "Outros"


class PaymentMethod(str, Enum):
    PIX = "Pix"
    CASH = "Dinheiro"
    CREDIT_CARD = "Cartão Crédito"
    DEBIT_CARD = "Cartão Débito"
    BANK_SLIP = "Boleto"
    TRANSFER = "Transferência"


class Expense(Entity):
    id: str = Field(default_factory=temp_id)
    description: str
    category: ExpenseCategory = ExpenseCategory.OTHER
    amount: float  # refunds are stored as negative amounts
    date: dt.date
    payment_method: PaymentMethod = PaymentMethod.PIX
    supplier: str = ""
    notes: Optional[str] = None
    created_at: dt.datetime = Field(default_factory=lambda: dt.datetime.now(dt.timezone.utc))

    @property
    def month(self) -> str:
        """YYYY-MM bucket used by the monthly views."""
        return self.date.isoformat()[:7]
