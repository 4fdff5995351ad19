"""Financial schemas - expenses and the derived transaction ledger"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ...shared.clock import parse_date
from ...shared.numbers import to_number

ExpenseCategory = Literal["Material", "Aluguel", "Marketing", "Salários", "Impostos", "Outros"]
TransactionType = Literal["Receita", "Despesa"]
TransactionStatus = Literal["Pago", "Pendente", "Atrasado", "N/A"]
Period = Literal["month", "quarter", "year", "all"]


def _iso_date(v):
    parsed = parse_date(v)
    if parsed is None:
        raise ValueError("Date must use the YYYY-MM-DD format")
    return parsed.isoformat()


class Expense(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    date: str
    description: str = ""
    category: ExpenseCategory = "Outros"
    amount: float = 0

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, v):
        return to_number(v)


class ExpenseCreate(BaseModel):
    date: str
    description: str
    category: ExpenseCategory = "Outros"
    amount: float = 0

    @field_validator("date")
    @classmethod
    def validate_date(cls, v):
        return _iso_date(v)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        if not v or not v.strip():
            raise ValueError("Description is required")
        return v.strip()

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, v):
        return to_number(v)


class Transaction(BaseModel):
    """A ledger line derived from an appointment (Receita) or an expense (Despesa)"""

    id: str
    date: str
    description: str
    clientName: Optional[str] = None
    type: TransactionType
    amount: float  # negative for Despesa
    profit: Optional[float] = None  # Receita only
    status: TransactionStatus
    category: Optional[str] = None


class ProcedureRevenue(BaseModel):
    name: str
    value: float


class FinancialKpis(BaseModel):
    totalRevenue: float
    totalExpenses: float
    netProfit: float
    ticketMedium: float
    pendingAmount: float
    revenueByProcedure: list[ProcedureRevenue]


class CashFlowPoint(BaseModel):
    label: str
    revenue: float
    expense: float
    profit: float


class FinancialReport(BaseModel):
    period: Period
    kpis: FinancialKpis
    transactions: list[Transaction]
    cashFlow: list[CashFlowPoint]
