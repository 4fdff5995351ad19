import os

# Settings must be in place before beautyflow.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_DEFAULT_DATA"] = "false"
os.environ["BOSS_PASSWORD"] = "teste"
os.environ["SEED_STAFF_PASSWORD"] = "123"
os.environ["REDIS_URL"] = ""
os.environ["GEMINI_API_KEY"] = ""
os.environ["DB_LOG_SLOW_QUERIES"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from beautyflow.database import Base, get_db  # noqa: E402
from beautyflow.domain.marketing import usage_limiter  # noqa: E402
from beautyflow.main import app  # noqa: E402
from beautyflow.seed import init_default_data  # noqa: E402
from beautyflow.storage import MemoryCollectionStore  # noqa: E402


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def seeded(db_session):
    init_default_data(db_session)
    return db_session


def login(client, username, password):
    response = client.post("/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def boss_headers(client, seeded):
    return login(client, "BOSS", "teste")


@pytest.fixture
def staff_headers(client, seeded):
    return login(client, "camila_rocha", "123")


@pytest.fixture
def memory_store():
    return MemoryCollectionStore()


@pytest.fixture(autouse=True)
def reset_usage_counters():
    usage_limiter.memory_counters.clear()
    yield
    usage_limiter.memory_counters.clear()


@pytest.fixture
def login_as(client):
    def _login(username, password):
        return login(client, username, password)

    return _login
