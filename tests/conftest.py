import pytest
from fastapi.testclient import TestClient
from app.core.config import Settings
from app.core.database import Database
from app.core.security import get_password_hash
from app.models.user import User, UserRole, SubRole
from main import create_app

TEST_PASSWORD = "testpass123"


@pytest.fixture
def settings():
    return Settings(
        DATABASE_URL="sqlite://",
        SECRET_KEY="test-secret-key",
        ENVIRONMENT="testing",
        CEO_EMAIL="",
        CEO_PASSWORD="",
    )


@pytest.fixture
def database(settings):
    """In-memory database; tables are created before each test and dropped after."""
    database = Database(settings.DATABASE_URL)
    database.create_all()
    yield database
    database.drop_all()
    database.dispose()


@pytest.fixture
def db(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def client(settings, database):
    app = create_app(settings, database)
    return TestClient(app)


def make_user(db, name, email, role=UserRole.EMPLOYEE, sub_role=None):
    user = User(
        name=name,
        email=email,
        hashed_password=get_password_hash(TEST_PASSWORD),
        role=role.value,
        sub_role=sub_role.value if sub_role else None
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def ceo(db):
    return make_user(db, "Chief Exec", "ceo@test.com", role=UserRole.CEO)


@pytest.fixture
def developer(db):
    return make_user(db, "Dev One", "dev1@test.com", sub_role=SubRole.DEVELOPER)


@pytest.fixture
def second_developer(db):
    return make_user(db, "Dev Two", "dev2@test.com", sub_role=SubRole.DEVELOPER)


@pytest.fixture
def designer(db):
    return make_user(db, "Designer One", "design1@test.com", sub_role=SubRole.DESIGNER)


def login(client, email):
    response = client.post("/api/auth/login", json={"email": email, "password": TEST_PASSWORD})
    assert response.status_code == 200
    token = response.json()["token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def ceo_headers(client, ceo):
    return login(client, ceo.email)


@pytest.fixture
def dev_headers(client, developer):
    return login(client, developer.email)
