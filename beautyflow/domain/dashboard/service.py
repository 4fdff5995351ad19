"""
Dashboard aggregator.

Read-only statistics over a list of clients. The functions here are pure so
they can be computed for any scope; DashboardService picks the scope (own
clients, or every account's clients for the Boss).
"""

import logging
from datetime import date
from typing import Optional

from ... import config
from ...shared.clock import month_label, parse_date
from ...shared.numbers import round_money
from ...state import AppState
from ...storage import CLIENTS
from ..clients.repository import ClientRepository
from ..clients.schemas import Client
from ..clients.service import days_since_last_visit, days_until_birthday, has_birthday_this_month
from ..scheduling.appointments import appointment_amount
from .schemas import ClientHighlight, ClientSummary, DashboardResponse, DashboardStats

logger = logging.getLogger(__name__)

# Re-engagement only targets clients gone for less than a year
REENGAGEMENT_MAX_DAYS = 365


def compute_stats(clients: list[Client], today: date) -> DashboardStats:
    total_revenue = 0.0
    appointments_today = 0
    recurring = 0
    monthly: dict[str, float] = {}

    for client in clients:
        if len(client.appointments) > 1:
            recurring += 1
        for appt in client.appointments:
            day = parse_date(appt.date)
            if day == today:
                appointments_today += 1
            if appt.status != "Pago":
                continue
            amount = appointment_amount(appt)
            total_revenue += amount
            if day:
                label = month_label(day)
                monthly[label] = round_money(monthly.get(label, 0) + amount)

    rate = recurring / len(clients) * 100 if clients else 0
    return DashboardStats(
        totalClients=len(clients),
        totalRevenue=round_money(total_revenue),
        appointmentsToday=appointments_today,
        recurrenceRate=float(round(rate)),
        monthlyRevenue=monthly,
    )


def _highlight(client: Client, today: date) -> ClientHighlight:
    return ClientHighlight(
        id=client.id,
        name=client.name,
        phone=client.phone,
        birthDate=client.birthDate,
        daysSinceLastVisit=days_since_last_visit(client, today),
        daysUntilBirthday=days_until_birthday(client.birthDate, today),
    )


def is_inactive(client: Client, today: date, threshold: Optional[int] = None) -> bool:
    """No appointments at all, or the latest one is older than the threshold"""
    threshold = config.INACTIVITY_DAYS if threshold is None else threshold
    days = days_since_last_visit(client, today)
    return days is None or days > threshold


def has_upcoming_birthday(client: Client, today: date, window: Optional[int] = None) -> bool:
    window = config.BIRTHDAY_WINDOW_DAYS if window is None else window
    days = days_until_birthday(client.birthDate, today)
    return days is not None and 0 <= days <= window


def inactive_clients(clients: list[Client], today: date) -> list[ClientHighlight]:
    return [_highlight(c, today) for c in clients if is_inactive(c, today)]


def upcoming_birthdays(clients: list[Client], today: date) -> list[ClientHighlight]:
    found = [_highlight(c, today) for c in clients if has_upcoming_birthday(c, today)]
    return sorted(found, key=lambda h: h.daysUntilBirthday)


def reengagement_candidates(clients: list[Client], today: date) -> list[ClientHighlight]:
    """Clients who did visit, but not within the inactivity window (and not over a year ago)"""
    found = []
    for client in clients:
        days = days_since_last_visit(client, today)
        if days is not None and config.INACTIVITY_DAYS < days < REENGAGEMENT_MAX_DAYS:
            found.append(_highlight(client, today))
    return found


def birthdays_this_month(clients: list[Client], today: date) -> list[ClientHighlight]:
    return [_highlight(c, today) for c in clients if has_birthday_this_month(c, today)]


def client_summary(clients: list[Client], today: date) -> ClientSummary:
    return ClientSummary(
        totalClients=len(clients),
        inactiveClients=sum(1 for c in clients if is_inactive(c, today)),
        upcomingBirthdays=sum(1 for c in clients if has_upcoming_birthday(c, today)),
    )


class DashboardService:
    """Service layer for dashboard statistics"""

    def __init__(self, state: AppState):
        self.state = state
        self.repo = ClientRepository()

    def get_scope(self) -> list[Client]:
        owner_ids = self.state.visible_owner_ids(CLIENTS)
        return [c for _, c in self.repo.get_visible_clients(self.state.store, owner_ids)]

    def get_dashboard(self, today: Optional[date] = None) -> DashboardResponse:
        today = today or date.today()
        clients = self.get_scope()
        logger.debug(f"📊 Dashboard for user {self.state.owner_id}: {len(clients)} client(s)")
        return DashboardResponse(
            stats=compute_stats(clients, today),
            inactiveClients=inactive_clients(clients, today),
            upcomingBirthdays=upcoming_birthdays(clients, today),
            reengagementCandidates=reengagement_candidates(clients, today),
            birthdaysThisMonth=birthdays_this_month(clients, today),
        )

    def get_summary(self, today: Optional[date] = None) -> ClientSummary:
        return client_summary(self.get_scope(), today or date.today())
