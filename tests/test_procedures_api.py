from beautyflow.domain.procedures.repository import ProcedureRepository
from beautyflow.storage import PROCEDURES


def new_procedure(client, headers, **fields):
    payload = {
        "name": "Lash Lifting",
        "category": "Cílios",
        "defaultPrice": 150,
        "defaultCost": "20,50",
        "defaultDuration": "60",
    }
    payload.update(fields)
    response = client.post("/procedures", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_and_list_procedures(client, staff_headers):
    created = new_procedure(client, staff_headers)
    assert created["id"].startswith("proc-")
    assert created["defaultCost"] == 20.5
    assert created["defaultDuration"] == 60
    assert created["isActive"] is True

    listed = client.get("/procedures", headers=staff_headers).json()
    assert [p["id"] for p in listed] == [created["id"]]
    assert client.get(f"/procedures/{created['id']}", headers=staff_headers).json()["name"] == "Lash Lifting"


def test_name_is_required(client, staff_headers):
    response = client.post("/procedures", json={"name": "   "}, headers=staff_headers)
    assert response.status_code == 422


def test_toggle_and_active_filter(client, staff_headers):
    lifting = new_procedure(client, staff_headers)
    henna = new_procedure(client, staff_headers, name="Henna", defaultPrice=70)

    response = client.patch(
        f"/procedures/{henna['id']}/active", json={"isActive": False}, headers=staff_headers
    )
    assert response.status_code == 200
    assert response.json()["isActive"] is False

    active = client.get("/procedures", params={"activeOnly": True}, headers=staff_headers).json()
    assert [p["id"] for p in active] == [lifting["id"]]
    assert len(client.get("/procedures", headers=staff_headers).json()) == 2


def test_replace_and_delete(client, staff_headers):
    created = new_procedure(client, staff_headers)
    replaced = client.put(
        f"/procedures/{created['id']}",
        json={"name": "Lash Lifting Premium", "defaultPrice": 190, "defaultDuration": 75},
        headers=staff_headers,
    )
    assert replaced.status_code == 200
    assert replaced.json()["id"] == created["id"]
    assert replaced.json()["defaultPrice"] == 190
    assert replaced.json()["category"] == "Geral"

    assert client.delete(f"/procedures/{created['id']}", headers=staff_headers).status_code == 200
    assert client.get(f"/procedures/{created['id']}", headers=staff_headers).status_code == 404
    assert client.delete(f"/procedures/{created['id']}", headers=staff_headers).status_code == 404


def test_catalogs_are_per_user(client, staff_headers, boss_headers):
    new_procedure(client, staff_headers)
    assert client.get("/procedures", headers=boss_headers).json() == []


def test_older_records_get_defaults(memory_store):
    memory_store.save(3, PROCEDURES, [{"id": "p1", "name": "Henna", "defaultPrice": "70", "category": None}])
    [procedure] = ProcedureRepository.get_procedures(memory_store, 3)
    assert procedure.category == "Geral"
    assert procedure.isActive is True
    assert procedure.defaultPrice == 70
    assert procedure.technicalDescription == ""


def test_first_name_match_wins(memory_store):
    memory_store.save(
        3,
        PROCEDURES,
        [{"id": "a", "name": "Henna"}, {"id": "b", "name": "Henna"}],
    )
    procedures = ProcedureRepository.get_procedures(memory_store, 3)
    assert ProcedureRepository.find_by_name(procedures, "Henna").id == "a"
    assert ProcedureRepository.find_by_name(procedures, "Lifting") is None
