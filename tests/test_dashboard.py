from datetime import date, timedelta

from beautyflow.domain.clients.schemas import Appointment, Client
from beautyflow.domain.clients.service import birthday_this_year, status_tier
from beautyflow.domain.dashboard.service import (
    birthdays_this_month,
    client_summary,
    compute_stats,
    inactive_clients,
    reengagement_candidates,
    upcoming_birthdays,
)

TODAY = date(2026, 10, 18)


def visit(days_ago, status="Pago", final_value=100, appt_id=None):
    day = TODAY - timedelta(days=days_ago)
    return Appointment(
        id=appt_id or f"appt-{days_ago}-{status}",
        date=day.isoformat(),
        status=status,
        value=final_value,
        finalValue=final_value,
    )


def person(client_id, appointments=(), birth_date=None):
    return Client(id=client_id, name=client_id.title(), appointments=list(appointments), birthDate=birth_date)


def test_two_clients_one_paid_visit_today():
    clients = [person("ana", [visit(0)]), person("bia")]
    stats = compute_stats(clients, TODAY)
    assert stats.totalClients == 2
    assert stats.totalRevenue == 100
    assert stats.appointmentsToday == 1
    assert stats.recurrenceRate == 0


def test_no_clients_gives_zero_rate():
    stats = compute_stats([], TODAY)
    assert stats.totalClients == 0
    assert stats.recurrenceRate == 0
    assert stats.monthlyRevenue == {}


def test_only_paid_appointments_count_as_revenue():
    clients = [person("ana", [visit(1, "Pago", 80), visit(2, "Pendente", 50), visit(3, "Atrasado", 40)])]
    stats = compute_stats(clients, TODAY)
    assert stats.totalRevenue == 80
    assert stats.recurrenceRate == 100


def test_revenue_falls_back_to_legacy_price():
    legacy = Appointment(id="old", date=TODAY.isoformat(), status="Pago", price=70)
    stats = compute_stats([person("ana", [legacy])], TODAY)
    assert stats.totalRevenue == 70


def test_fully_discounted_visit_adds_no_revenue():
    free = Appointment(id="free", date=TODAY.isoformat(), status="Pago", value=100, discount=100, finalValue=0)
    stats = compute_stats([person("ana", [free, visit(1, "Pago", 80)])], TODAY)
    assert stats.totalRevenue == 80


def test_monthly_revenue_keeps_first_seen_order():
    september = Appointment(id="a", date="2026-09-10", status="Pago", finalValue=50)
    march = Appointment(id="b", date="2026-03-02", status="Pago", finalValue=30)
    october = Appointment(id="c", date="2026-10-01", status="Pago", finalValue=20)
    more_september = Appointment(id="d", date="2026-09-20", status="Pago", finalValue=5)
    stats = compute_stats([person("ana", [september, march, october, more_september])], TODAY)
    assert list(stats.monthlyRevenue) == ["set", "mar", "out"]
    assert stats.monthlyRevenue["set"] == 55


def test_recurrence_rate_is_a_whole_percentage():
    clients = [person("a", [visit(1, appt_id="1"), visit(2, appt_id="2")]), person("b"), person("c")]
    assert compute_stats(clients, TODAY).recurrenceRate == 33


def test_inactive_means_no_visits_or_older_than_sixty_days():
    clients = [
        person("never"),
        person("recent", [visit(10)]),
        person("edge", [visit(60)]),
        person("gone", [visit(61)]),
    ]
    assert [h.id for h in inactive_clients(clients, TODAY)] == ["never", "gone"]


def test_reengagement_skips_never_seen_and_year_old_clients():
    clients = [
        person("never"),
        person("recent", [visit(30)]),
        person("lapsed", [visit(100)]),
        person("lost", [visit(400)]),
    ]
    found = reengagement_candidates(clients, TODAY)
    assert [h.id for h in found] == ["lapsed"]
    assert found[0].daysSinceLastVisit == 100


def test_upcoming_birthdays_within_thirty_days():
    clients = [
        person("today", birth_date="1990-10-18"),
        person("soon", birth_date="1995-11-05"),
        person("limit", birth_date="1988-11-17"),
        person("late", birth_date="1988-11-18"),
        person("past", birth_date="1990-10-17"),
        person("unknown"),
    ]
    found = upcoming_birthdays(clients, TODAY)
    assert [h.id for h in found] == ["today", "soon", "limit"]
    assert [h.daysUntilBirthday for h in found] == [0, 18, 30]


def test_leap_day_birthday_moves_to_march_first():
    assert birthday_this_year("2000-02-29", date(2027, 1, 10)) == date(2027, 3, 1)
    assert birthday_this_year("2000-02-29", date(2028, 1, 10)) == date(2028, 2, 29)


def test_birthdays_this_month():
    clients = [person("a", birth_date="1990-10-02"), person("b", birth_date="1990-09-30")]
    assert [h.id for h in birthdays_this_month(clients, TODAY)] == ["a"]


def test_summary_counts():
    clients = [person("a", [visit(5)], "1990-10-25"), person("b"), person("c", [visit(90)])]
    summary = client_summary(clients, TODAY)
    assert summary.totalClients == 3
    assert summary.inactiveClients == 2
    assert summary.upcomingBirthdays == 1


def test_status_tiers():
    assert status_tier(person("a"), TODAY) == "Novo"
    assert status_tier(person("b", [visit(30)]), TODAY) == "Recente"
    assert status_tier(person("c", [visit(90)]), TODAY) == "Ativo"
    assert status_tier(person("d", [visit(91)]), TODAY) == "Inativo"


# ============================================================================
# HTTP
# ============================================================================


def test_boss_dashboard_covers_every_account(client, boss_headers, staff_headers):
    created = client.post("/clients", json={"name": "Cliente da Camila"}, headers=staff_headers)
    assert created.status_code == 201

    boss_view = client.get("/dashboard", headers=boss_headers).json()
    staff_view = client.get("/dashboard", headers=staff_headers).json()

    # Four sample clients belong to the BOSS; the staff member has one
    assert boss_view["stats"]["totalClients"] == 5
    assert staff_view["stats"]["totalClients"] == 1
    assert boss_view["stats"]["totalRevenue"] == 500
    assert [c["name"] for c in staff_view["inactiveClients"]] == ["Cliente da Camila"]


def test_dashboard_requires_login(client):
    assert client.get("/dashboard").status_code in (401, 403)
