"""Financials router - expenses and period reports"""

from fastapi import APIRouter, Depends, Query

from ...state import AppState, get_app_state
from .schemas import Expense, ExpenseCreate, FinancialReport, Period
from .service import FinancialService

router = APIRouter(prefix="/financials", tags=["Financials"])


def get_financial_service(state: AppState = Depends(get_app_state)) -> FinancialService:
    """Dependency injection for FinancialService"""
    return FinancialService(state)


@router.get("", response_model=FinancialReport)
async def get_report(
    period: Period = Query("month"),
    service: FinancialService = Depends(get_financial_service),
):
    """Ledger, KPIs and cash-flow chart for the selected period"""
    return service.get_report(period)


@router.get("/expenses", response_model=list[Expense])
async def get_expenses(service: FinancialService = Depends(get_financial_service)):
    return service.get_expenses()


@router.post("/expenses", response_model=Expense, status_code=201)
async def create_expense(
    data: ExpenseCreate, service: FinancialService = Depends(get_financial_service)
):
    return service.create_expense(data)


@router.put("/expenses/{expense_id}", response_model=Expense)
async def update_expense(
    expense_id: str,
    data: ExpenseCreate,
    service: FinancialService = Depends(get_financial_service),
):
    return service.update_expense(expense_id, data)


@router.delete("/expenses/{expense_id}")
async def delete_expense(expense_id: str, service: FinancialService = Depends(get_financial_service)):
    return service.delete_expense(expense_id)
