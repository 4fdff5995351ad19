"""Dashboard schemas"""

from typing import Optional

from pydantic import BaseModel


class DashboardStats(BaseModel):
    totalClients: int
    totalRevenue: float
    appointmentsToday: int
    recurrenceRate: float  # whole percent, 0-100
    monthlyRevenue: dict[str, float]  # "jan" -> revenue, in first-seen order


class ClientHighlight(BaseModel):
    """A client surfaced by one of the dashboard lists"""

    id: str
    name: str
    phone: str = ""
    birthDate: Optional[str] = None
    daysSinceLastVisit: Optional[int] = None
    daysUntilBirthday: Optional[int] = None


class ClientSummary(BaseModel):
    """Counts fed to the AI suggestion prompt"""

    totalClients: int
    inactiveClients: int
    upcomingBirthdays: int


class DashboardResponse(BaseModel):
    stats: DashboardStats
    inactiveClients: list[ClientHighlight]
    upcomingBirthdays: list[ClientHighlight]
    reengagementCandidates: list[ClientHighlight]
    birthdaysThisMonth: list[ClientHighlight]
