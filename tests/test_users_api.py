from beautyflow.auth import hash_password, verify_password
from beautyflow.models import User
from beautyflow.storage import CLIENTS, PROCEDURES, SqlCollectionStore


def test_register_and_login(client, db_session):
    response = client.post("/auth/register", json={"username": "Maria", "password": "segredo"})
    assert response.status_code == 201
    user = response.json()
    assert user["username"] == "maria"
    assert user["userType"] == "Cliente"
    assert user["isBoss"] is False
    assert user["profile"]["fullName"] == "Maria"

    login = client.post("/auth/login", json={"username": "MARIA", "password": "segredo"})
    assert login.status_code == 200
    assert login.json()["user"]["id"] == user["id"]


def test_passwords_are_stored_as_bcrypt_hashes(client, db_session):
    client.post("/auth/register", json={"username": "Beatriz", "password": "cilios123"})
    stored = db_session.query(User).filter(User.username == "beatriz").one()
    assert stored.password_hash.startswith("$2b$")
    assert "cilios123" not in stored.password_hash
    assert verify_password("cilios123", stored.password_hash) is True
    assert verify_password("cilios124", stored.password_hash) is False


def test_unreadable_hash_fails_verification():
    assert verify_password("segredo", "not-a-hash") is False
    assert verify_password("segredo", hash_password("segredo")) is True


def test_usernames_are_unique_ignoring_case(client, seeded):
    response = client.post("/auth/register", json={"username": "Ana_Lima", "password": "x"})
    assert response.status_code == 409


def test_wrong_password_is_rejected(client, seeded):
    response = client.post("/auth/login", json={"username": "BOSS", "password": "errada"})
    assert response.status_code == 401
    unknown = client.post("/auth/login", json={"username": "ninguem", "password": "x"})
    assert unknown.status_code == 401


def test_blank_credentials_are_rejected(client):
    response = client.post("/auth/register", json={"username": " ", "password": "x"})
    assert response.status_code == 422


def test_me_and_logout(client, staff_headers):
    me = client.get("/users/me", headers=staff_headers)
    assert me.status_code == 200
    assert me.json()["username"] == "camila_rocha"
    assert me.json()["profile"]["role"] == "Lash Designer"

    assert client.post("/auth/logout", headers=staff_headers).status_code == 200
    assert client.get("/users/me", headers=staff_headers).status_code == 401


def test_missing_or_bad_token(client, seeded):
    assert client.get("/users/me", headers={"Authorization": "Bearer nope"}).status_code == 401


def test_update_own_profile(client, staff_headers):
    response = client.patch(
        "/users/me",
        json={"profile": {"bio": "Especialista em volume russo", "city": "Curitiba"}},
        headers=staff_headers,
    )
    assert response.status_code == 200
    profile = response.json()["profile"]
    assert profile["bio"] == "Especialista em volume russo"
    assert profile["fullName"] == "Camila Rocha"

    forbidden = client.patch("/users/me", json={"userType": "Administrador"}, headers=staff_headers)
    assert forbidden.status_code == 403


def test_admin_lists_and_manages_users(client, boss_headers):
    users = client.get("/users", headers=boss_headers).json()
    assert [u["username"] for u in users] == ["boss", "ana_lima", "camila_rocha", "patricia_oliveira"]
    assert users[0]["isBoss"] is True

    created = client.post(
        "/users",
        json={"username": "Nova_Secretaria", "password": "abc", "userType": "Secretaria"},
        headers=boss_headers,
    )
    assert created.status_code == 201
    new_user = created.json()
    assert new_user["username"] == "nova_secretaria"
    assert new_user["profile"]["fullName"] == "Nova_Secretaria"

    promoted = client.patch(
        f"/users/{new_user['id']}", json={"userType": "Administrador"}, headers=boss_headers
    )
    assert promoted.json()["userType"] == "Administrador"

    duplicate = client.patch(
        f"/users/{new_user['id']}", json={"username": "CAMILA_ROCHA"}, headers=boss_headers
    )
    assert duplicate.status_code == 409


def test_non_admins_cannot_manage_users(client, staff_headers):
    assert client.get("/users", headers=staff_headers).status_code == 403
    response = client.post("/users", json={"username": "x", "password": "y"}, headers=staff_headers)
    assert response.status_code == 403
    assert client.delete("/users/1", headers=staff_headers).status_code == 403


def test_deleting_a_user_drops_their_collections(client, boss_headers, staff_headers, db_session):
    client.post("/clients", json={"name": "Joana"}, headers=staff_headers)
    client.post("/procedures", json={"name": "Henna"}, headers=staff_headers)
    staff_id = client.get("/users/me", headers=staff_headers).json()["id"]

    store = SqlCollectionStore(db_session)
    assert staff_id in store.owners(CLIENTS)

    assert client.delete(f"/users/{staff_id}", headers=boss_headers).status_code == 200
    assert store.load(staff_id, CLIENTS) is None
    assert store.load(staff_id, PROCEDURES) is None
    assert staff_id not in store.owners(CLIENTS)
    assert client.delete(f"/users/{staff_id}", headers=boss_headers).status_code == 404


def test_boss_cannot_be_deleted(client, boss_headers):
    boss_id = client.get("/users/me", headers=boss_headers).json()["id"]
    assert client.delete(f"/users/{boss_id}", headers=boss_headers).status_code == 400


def test_editable_texts(client, boss_headers, staff_headers):
    assert client.get("/texts", headers=staff_headers).json() == {}

    response = client.put("/texts/welcomeTitle", json={"value": "Bem-vinda!"}, headers=boss_headers)
    assert response.status_code == 200
    assert response.json() == {"welcomeTitle": "Bem-vinda!"}
    assert client.get("/texts", headers=staff_headers).json() == {"welcomeTitle": "Bem-vinda!"}

    assert client.put("/texts/welcomeTitle", json={"value": "Oi"}, headers=staff_headers).status_code == 403
    assert client.put("/texts/welcomeTitle", json={"value": "  "}, headers=boss_headers).status_code == 422
