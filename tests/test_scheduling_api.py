import pytest

DAY = "2030-05-10"


@pytest.fixture
def lash_client(client, staff_headers):
    client.post(
        "/procedures",
        json={
            "name": "Lash Lifting",
            "category": "Cílios",
            "defaultPrice": 150,
            "defaultCost": 20,
            "defaultDuration": 60,
            "defaultPostProcedureInstructions": "Não molhar por 24h",
        },
        headers=staff_headers,
    )
    response = client.post("/clients", json={"name": "Joana Dias"}, headers=staff_headers)
    return response.json()["id"]


def book(client, headers, client_id, start, **fields):
    payload = {"clientId": client_id, "date": DAY, "startTime": start, "procedureName": "Lash Lifting"}
    payload.update(fields)
    return client.post("/scheduling/appointments", json=payload, headers=headers)


def test_booking_copies_catalog_defaults(client, staff_headers, lash_client):
    response = book(client, staff_headers, lash_client, "09:00")
    assert response.status_code == 201, response.text
    body = response.json()
    assert body["clientId"] == lash_client

    appt = body["appointment"]
    assert appt["id"].startswith("appt-")
    assert appt["category"] == "Cílios"
    assert appt["value"] == 150
    assert appt["finalValue"] == 150
    assert appt["cost"] == 20
    assert appt["duration"] == 60
    assert appt["endTime"] == "10:00"
    assert appt["postProcedureInstructions"] == "Não molhar por 24h"
    assert [s["name"] for s in appt["procedureSteps"]] == ["Higienização", "Aplicação", "Finalização"]
    assert appt["status"] == "Pendente"

    stored = client.get(f"/clients/{lash_client}", headers=staff_headers).json()
    assert [a["id"] for a in stored["appointments"]] == [appt["id"]]


def test_explicit_fields_override_the_template(client, staff_headers, lash_client):
    response = book(client, staff_headers, lash_client, "14:00", discount=30, duration=90)
    appt = response.json()["appointment"]
    assert appt["value"] == 150
    assert appt["finalValue"] == 120
    assert appt["endTime"] == "15:30"


def test_unknown_procedure_name_books_without_defaults(client, staff_headers, lash_client):
    response = book(client, staff_headers, lash_client, "11:00", procedureName="Microagulhamento", value=300)
    appt = response.json()["appointment"]
    assert appt["finalValue"] == 300
    assert appt["procedureSteps"] == []
    assert appt["procedure"] == "Microagulhamento"


def test_booking_requires_client_procedure_and_start(client, staff_headers, lash_client):
    assert book(client, staff_headers, lash_client, "09:00", procedureName=" ").status_code == 400
    assert book(client, staff_headers, "", "09:00").status_code == 400
    assert book(client, staff_headers, lash_client, "").status_code == 400
    assert book(client, staff_headers, "client-missing", "09:00").status_code == 404
    no_date = client.post(
        "/scheduling/appointments",
        json={"clientId": lash_client, "startTime": "09:00", "procedureName": "Lash Lifting"},
        headers=staff_headers,
    )
    assert no_date.status_code == 422


def test_overlapping_booking_is_rejected(client, staff_headers, lash_client):
    assert book(client, staff_headers, lash_client, "09:00").status_code == 201
    conflict = book(client, staff_headers, lash_client, "09:30")
    assert conflict.status_code == 409
    assert conflict.json()["detail"] == "Time slot not available"
    assert book(client, staff_headers, lash_client, "08:00").status_code == 201
    assert book(client, staff_headers, lash_client, "10:00").status_code == 201


def test_booking_past_closing_time_is_rejected(client, staff_headers, lash_client):
    assert book(client, staff_headers, lash_client, "17:30").status_code == 409


def test_availability_endpoint(client, staff_headers, lash_client):
    book(client, staff_headers, lash_client, "09:00")
    response = client.get(
        "/scheduling/availability", params={"date": DAY, "duration": 60}, headers=staff_headers
    )
    assert response.status_code == 200
    body = response.json()
    assert body["duration"] == 60
    assert body["slots"][:2] == ["08:00", "10:00"]
    assert body["slots"][-1] == "17:00"

    default = client.get("/scheduling/availability", params={"date": DAY}, headers=staff_headers).json()
    assert default["duration"] == 30
    assert "09:30" not in default["slots"]

    bad = client.get("/scheduling/availability", params={"date": "10/05/2030"}, headers=staff_headers)
    assert bad.status_code == 400


def test_boss_availability_includes_staff_bookings(client, staff_headers, boss_headers, lash_client):
    book(client, staff_headers, lash_client, "09:00")
    slots = client.get("/scheduling/availability", params={"date": DAY}, headers=boss_headers).json()["slots"]
    assert "09:00" not in slots
    mine = client.get("/scheduling/availability", params={"date": DAY}, headers=staff_headers).json()["slots"]
    assert "09:00" not in mine


def test_calendar_groups_by_day(client, staff_headers, lash_client):
    book(client, staff_headers, lash_client, "15:00")
    book(client, staff_headers, lash_client, "08:00")
    book(client, staff_headers, lash_client, "10:00", date="2030-05-02")
    book(client, staff_headers, lash_client, "10:00", date="2030-06-01")

    calendar = client.get("/scheduling/calendar", params={"month": "2030-05"}, headers=staff_headers).json()
    assert list(calendar) == ["2030-05-02", DAY]
    assert [e["appointment"]["startTime"] for e in calendar[DAY]] == ["08:00", "15:00"]
    assert calendar[DAY][0]["clientName"] == "Joana Dias"

    assert client.get("/scheduling/calendar", params={"month": "2030-5"}, headers=staff_headers).status_code == 400


def test_editing_recomputes_derived_fields(client, staff_headers, lash_client):
    appt = book(client, staff_headers, lash_client, "09:00").json()["appointment"]
    url = f"/clients/{lash_client}/appointments/{appt['id']}"

    response = client.put(url, json={"value": "200", "discount": 25, "duration": 90, "status": "Pago"}, headers=staff_headers)
    assert response.status_code == 200, response.text
    edited = response.json()
    assert edited["finalValue"] == 175
    assert edited["endTime"] == "10:30"
    assert edited["status"] == "Pago"
    assert edited["price"] == 200
    assert edited["category"] == "Cílios"

    assert client.put(url, json={"startTime": "9h"}, headers=staff_headers).status_code == 422
    missing = client.put(f"/clients/{lash_client}/appointments/nope", json={}, headers=staff_headers)
    assert missing.status_code == 404


def test_materials_endpoints_keep_cost_in_sync(client, staff_headers, lash_client):
    appt = book(client, staff_headers, lash_client, "09:00").json()["appointment"]
    base = f"/clients/{lash_client}/appointments/{appt['id']}/materials"

    added = client.post(base, json={"name": "Cola", "cost": 12}, headers=staff_headers)
    assert added.status_code == 201
    material_id = added.json()["materials"][0]["id"]
    assert added.json()["cost"] == 12

    client.post(base, json={"name": "Fios", "cost": "3,5"}, headers=staff_headers)
    edited = client.put(f"{base}/{material_id}", json={"name": "Cola Premium", "cost": 20}, headers=staff_headers)
    assert edited.json()["cost"] == 23.5

    removed = client.delete(f"{base}/{material_id}", headers=staff_headers)
    assert removed.json()["cost"] == 3.5
    assert [m["name"] for m in removed.json()["materials"]] == ["Fios"]

    assert client.delete(f"{base}/{material_id}", headers=staff_headers).status_code == 404
    assert client.put(f"{base}/unknown", json={"name": "x"}, headers=staff_headers).status_code == 404


def test_clearing_materials_on_edit_zeroes_the_cost(client, staff_headers, lash_client):
    appt = book(client, staff_headers, lash_client, "09:00").json()["appointment"]
    url = f"/clients/{lash_client}/appointments/{appt['id']}"
    client.post(f"{url}/materials", json={"name": "Cola", "cost": 40}, headers=staff_headers)

    response = client.put(url, json={"materials": []}, headers=staff_headers)
    assert response.status_code == 200, response.text
    assert response.json()["materials"] == []
    assert response.json()["cost"] == 0


def test_resending_the_same_materials_keeps_the_template_cost(client, staff_headers, lash_client):
    appt = book(client, staff_headers, lash_client, "09:00", materials=[]).json()["appointment"]
    assert appt["cost"] == 20
    url = f"/clients/{lash_client}/appointments/{appt['id']}"
    edited = client.put(url, json={"materials": [], "generalNotes": "Cliente pontual"}, headers=staff_headers)
    assert edited.json()["cost"] == 20


def test_zero_duration_edit_ends_at_the_start(client, staff_headers, lash_client):
    appt = book(client, staff_headers, lash_client, "09:00").json()["appointment"]
    url = f"/clients/{lash_client}/appointments/{appt['id']}"
    edited = client.put(url, json={"duration": 0, "startTime": "11:00"}, headers=staff_headers)
    assert edited.json()["endTime"] == "11:00"


def test_apply_procedure_reseeds_the_record(client, staff_headers, lash_client):
    appt = book(client, staff_headers, lash_client, "09:00", procedureName="Avaliação").json()["appointment"]
    henna = client.post(
        "/procedures",
        json={"name": "Henna", "category": "Sobrancelhas", "defaultPrice": 70, "defaultDuration": 30},
        headers=staff_headers,
    ).json()

    url = f"/clients/{lash_client}/appointments/{appt['id']}/procedure"
    response = client.post(f"{url}/{henna['id']}", headers=staff_headers)
    assert response.status_code == 200
    reseeded = response.json()
    assert reseeded["procedureName"] == "Henna"
    assert reseeded["finalValue"] == 70
    assert reseeded["endTime"] == "09:30"
    assert len(reseeded["procedureSteps"]) == 3

    assert client.post(f"{url}/proc-missing", headers=staff_headers).status_code == 404


def test_delete_appointment(client, staff_headers, lash_client):
    appt = book(client, staff_headers, lash_client, "09:00").json()["appointment"]
    url = f"/clients/{lash_client}/appointments/{appt['id']}"
    assert client.delete(url, headers=staff_headers).status_code == 200
    assert client.get(f"/clients/{lash_client}", headers=staff_headers).json()["appointments"] == []
    assert client.delete(url, headers=staff_headers).status_code == 404
