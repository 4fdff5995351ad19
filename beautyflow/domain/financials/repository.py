"""Expense repository"""

from datetime import date
from typing import Optional

from ...storage import EXPENSES
from .schemas import Expense


def default_expenses(today: date) -> list[Expense]:
    """Starter expenses shown to the studio owner before anything was recorded"""
    first = today.replace(day=1).isoformat()
    fifth = today.replace(day=5).isoformat()
    return [
        Expense(id="exp-default-1", date=first, description="Aluguel do Studio", category="Aluguel", amount=1200),
        Expense(id="exp-default-2", date=fifth, description="Compra de Cílios e Adesivos", category="Material", amount=450),
        Expense(id="exp-default-3", date=fifth, description="Anúncio Instagram", category="Marketing", amount=150),
    ]


class ExpenseRepository:
    """Repository for expense collections"""

    @staticmethod
    def get_expenses(
        store, owner_id: int, with_defaults: bool = False, today: Optional[date] = None
    ) -> list[Expense]:
        raw = store.load(owner_id, EXPENSES)
        if raw is None:
            return default_expenses(today or date.today()) if with_defaults else []
        return [Expense.model_validate(e) for e in raw]

    @staticmethod
    def save_expenses(store, owner_id: int, expenses: list[Expense]) -> None:
        store.save(owner_id, EXPENSES, [e.model_dump(mode="json") for e in expenses])
