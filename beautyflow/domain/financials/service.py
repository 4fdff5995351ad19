"""
Financial aggregator - transaction ledger, period KPIs and the cash-flow chart,
plus expense CRUD.
"""

import logging
import uuid
from datetime import date
from typing import Optional

from fastapi import HTTPException

from ...shared.clock import MONTH_ABBREVIATIONS, month_label, parse_date, quarter_of
from ...shared.numbers import round_money, to_number
from ...state import AppState
from ...storage import CLIENTS, EXPENSES
from ..clients.repository import ClientRepository
from ..clients.schemas import Client
from ..scheduling.appointments import appointment_amount
from .repository import ExpenseRepository
from .schemas import (
    CashFlowPoint,
    Expense,
    ExpenseCreate,
    FinancialKpis,
    FinancialReport,
    ProcedureRevenue,
    Transaction,
)

logger = logging.getLogger(__name__)


# ============================================================================
# PURE AGGREGATION
# ============================================================================


def build_ledger(clients: list[Client], expenses: list[Expense]) -> list[Transaction]:
    """One Receita per appointment and one Despesa per expense, newest first"""
    transactions = []
    for client in clients:
        for appt in client.appointments:
            amount = appointment_amount(appt)
            name = appt.procedureName or appt.procedure
            transactions.append(
                Transaction(
                    id=appt.id,
                    date=appt.date,
                    description=name,
                    clientName=client.name,
                    type="Receita",
                    amount=amount,
                    profit=round_money(amount - to_number(appt.cost)),
                    status=appt.status,
                    category=name,
                )
            )
    for expense in expenses:
        transactions.append(
            Transaction(
                id=expense.id,
                date=expense.date,
                description=expense.description,
                type="Despesa",
                amount=-to_number(expense.amount),
                status="N/A",
                category=expense.category,
            )
        )
    transactions.sort(key=lambda t: parse_date(t.date) or date.min, reverse=True)
    return transactions


def in_period(day: Optional[date], period: str, today: date) -> bool:
    if period == "all":
        return True
    if day is None or day.year != today.year:
        return False
    if period == "month":
        return day.month == today.month
    if period == "quarter":
        return quarter_of(day) == quarter_of(today)
    return period == "year"


def filter_period(transactions: list[Transaction], period: str, today: date) -> list[Transaction]:
    return [t for t in transactions if in_period(parse_date(t.date), period, today)]


def compute_kpis(transactions: list[Transaction]) -> FinancialKpis:
    revenue = [t for t in transactions if t.type == "Receita"]
    total_revenue = sum(t.amount for t in revenue if t.status == "Pago")
    total_expenses = sum(abs(t.amount) for t in transactions if t.type == "Despesa")
    pending = sum(t.amount for t in revenue if t.status in ("Pendente", "Atrasado"))

    by_procedure: dict[str, float] = {}
    for t in revenue:
        label = t.category or t.description
        by_procedure[label] = by_procedure.get(label, 0) + t.amount

    return FinancialKpis(
        totalRevenue=round_money(total_revenue),
        totalExpenses=round_money(total_expenses),
        netProfit=round_money(total_revenue - total_expenses),
        ticketMedium=round_money(total_revenue / len(revenue)) if revenue else 0,
        pendingAmount=round_money(pending),
        revenueByProcedure=[
            ProcedureRevenue(name=name, value=round_money(value))
            for name, value in sorted(by_procedure.items(), key=lambda item: item[1], reverse=True)
        ],
    )


def bucket_label(day: date, period: str) -> str:
    if period == "month":
        return f"Dia {day.day}"
    if period in ("quarter", "year"):
        return month_label(day)
    return f"{month_label(day)} {day.year % 100:02d}"


def _month_rank(label: str) -> int:
    head = label.lower().split(" ")[0]
    return MONTH_ABBREVIATIONS.index(head) if head in MONTH_ABBREVIATIONS else -1


def cash_flow(transactions: list[Transaction], period: str) -> list[CashFlowPoint]:
    """
    Revenue / expense / profit per bucket.

    Buckets are ordered by month name only, so "all" mixes years
    ("jan 25" sorts next to "jan 24") and day buckets keep ledger order.
    """
    grouped: dict[str, dict[str, float]] = {}
    for t in transactions:
        day = parse_date(t.date)
        if day is None:
            continue
        bucket = grouped.setdefault(bucket_label(day, period), {"revenue": 0.0, "expense": 0.0})
        if t.type == "Receita":
            bucket["revenue"] += t.amount
        else:
            bucket["expense"] += abs(t.amount)

    return [
        CashFlowPoint(
            label=label,
            revenue=round_money(values["revenue"]),
            expense=round_money(values["expense"]),
            profit=round_money(values["revenue"] - values["expense"]),
        )
        for label, values in sorted(grouped.items(), key=lambda item: _month_rank(item[0]))
    ]


# ============================================================================
# SERVICE
# ============================================================================


class FinancialService:
    """Service layer for expenses and financial reports"""

    def __init__(self, state: AppState):
        self.state = state
        self.client_repo = ClientRepository()
        self.expense_repo = ExpenseRepository()

    def _own_expenses(self, today: Optional[date] = None) -> list[Expense]:
        return self.expense_repo.get_expenses(
            self.state.store, self.state.owner_id, with_defaults=self.state.is_boss, today=today
        )

    def get_expenses(self) -> list[Expense]:
        return sorted(self._own_expenses(), key=lambda e: e.date, reverse=True)

    def create_expense(self, data: ExpenseCreate) -> Expense:
        expenses = self._own_expenses()
        expense = Expense(id=f"exp-{uuid.uuid4().hex[:12]}", **data.model_dump())
        expenses.append(expense)
        self.expense_repo.save_expenses(self.state.store, self.state.owner_id, expenses)
        logger.info(f"✅ Expense '{expense.description}' ({expense.amount}) recorded for user {self.state.owner_id}")
        return expense

    def update_expense(self, expense_id: str, data: ExpenseCreate) -> Expense:
        expenses = self._own_expenses()
        for index, current in enumerate(expenses):
            if current.id == expense_id:
                expenses[index] = Expense(id=expense_id, **data.model_dump())
                self.expense_repo.save_expenses(self.state.store, self.state.owner_id, expenses)
                return expenses[index]
        raise HTTPException(status_code=404, detail="Expense not found")

    def delete_expense(self, expense_id: str) -> dict:
        expenses = self._own_expenses()
        remaining = [e for e in expenses if e.id != expense_id]
        if len(remaining) == len(expenses):
            raise HTTPException(status_code=404, detail="Expense not found")
        self.expense_repo.save_expenses(self.state.store, self.state.owner_id, remaining)
        logger.info(f"🗑️ Expense {expense_id} deleted for user {self.state.owner_id}")
        return {"message": "Expense deleted"}

    def _scope(self, today: date) -> tuple[list[Client], list[Expense]]:
        store = self.state.store
        client_owners = self.state.visible_owner_ids(CLIENTS)
        clients = [c for _, c in self.client_repo.get_visible_clients(store, client_owners)]
        expenses = []
        for owner_id in self.state.visible_owner_ids(EXPENSES):
            with_defaults = owner_id == self.state.owner_id and self.state.is_boss
            expenses.extend(
                self.expense_repo.get_expenses(store, owner_id, with_defaults=with_defaults, today=today)
            )
        return clients, expenses

    def get_report(self, period: str = "month", today: Optional[date] = None) -> FinancialReport:
        today = today or date.today()
        clients, expenses = self._scope(today)
        transactions = filter_period(build_ledger(clients, expenses), period, today)
        logger.debug(f"📊 Financial report ({period}) for user {self.state.owner_id}: {len(transactions)} transaction(s)")
        return FinancialReport(
            period=period,
            kpis=compute_kpis(transactions),
            transactions=transactions,
            cashFlow=cash_flow(transactions, period),
        )
