from app.core.config import Settings
from app.core.security import create_access_token, decode_access_token
from app.models.user import User, UserRole
from app.services.user_service import user_service

TEST_PASSWORD = "testpass123"


def test_login_returns_token_and_user(client, developer):
    response = client.post("/api/auth/login", json={"email": "DEV1@test.com ", "password": TEST_PASSWORD})
    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["user"]["email"] == "dev1@test.com"
    assert data["user"]["sub_role"] == "Developer"


def test_login_wrong_password(client, developer):
    response = client.post("/api/auth/login", json={"email": "dev1@test.com", "password": "nope"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid credentials"


def test_token_claims(settings, developer):
    token = create_access_token(settings, developer.id, developer.role, developer.sub_role)
    claims = decode_access_token(settings, token)
    assert claims["sub"] == str(developer.id)
    assert claims["role"] == "Employee"
    assert claims["sub_role"] == "Developer"


def test_missing_and_invalid_tokens(client):
    assert client.get("/api/tasks/my-tasks").status_code == 401
    response = client.get("/api/tasks/my-tasks", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_employee_cannot_add_employee(client, dev_headers):
    response = client.post(
        "/api/auth/add",
        json={"name": "New Hire", "email": "new@test.com", "password": "secret1"},
        headers=dev_headers
    )
    assert response.status_code == 403


def test_ceo_manages_employees(client, ceo_headers):
    response = client.post(
        "/api/auth/add",
        json={"name": "New Hire", "email": "New@Test.com", "password": "secret1", "sub_role": "SEO"},
        headers=ceo_headers
    )
    assert response.status_code == 201
    employee = response.json()
    assert employee["email"] == "new@test.com"
    assert employee["role"] == "Employee"

    duplicate = client.post(
        "/api/auth/add",
        json={"name": "Other", "email": "new@test.com", "password": "secret1"},
        headers=ceo_headers
    )
    assert duplicate.status_code == 400
    assert duplicate.json()["detail"] == "Email already exists"

    response = client.put(
        f"/api/auth/employee/{employee['id']}",
        json={"name": "Renamed Hire", "sub_role": "Marketing"},
        headers=ceo_headers
    )
    assert response.status_code == 200
    assert response.json()["sub_role"] == "Marketing"

    response = client.get("/api/auth/employees", headers=ceo_headers)
    assert response.json()["count"] == 1

    response = client.delete(f"/api/auth/employee/{employee['id']}", headers=ceo_headers)
    assert response.status_code == 200
    assert client.get(f"/api/auth/employee/{employee['id']}", headers=ceo_headers).status_code == 404


def test_short_password_rejected(client, ceo_headers, developer):
    response = client.put(
        f"/api/auth/employee/{developer.id}/change-password",
        json={"new_password": "123"},
        headers=ceo_headers
    )
    assert response.status_code == 400


def test_password_change_allows_new_login(client, ceo_headers, developer):
    response = client.put(
        f"/api/auth/employee/{developer.id}/change-password",
        json={"new_password": "brandnew"},
        headers=ceo_headers
    )
    assert response.status_code == 200
    response = client.post("/api/auth/login", json={"email": "dev1@test.com", "password": "brandnew"})
    assert response.status_code == 200


def test_department_stats(client, ceo_headers, developer, second_developer, designer):
    response = client.get("/api/auth/department-stats", headers=ceo_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["total_employees"] == 3
    first = data["departments"][0]
    assert first["name"] == "Developer"
    assert first["count"] == 2
    assert first["percentage"] == 67


def test_seed_ceo_is_idempotent(db):
    settings = Settings(DATABASE_URL="sqlite://", CEO_EMAIL="Boss@Test.com", CEO_PASSWORD="bosspass")
    first = user_service.seed_ceo(db, settings)
    second = user_service.seed_ceo(db, settings)
    assert first.id == second.id
    assert first.email == "boss@test.com"
    assert db.query(User).filter(User.role == UserRole.CEO.value).count() == 1


def test_seed_ceo_skipped_without_credentials(db, settings):
    assert user_service.seed_ceo(db, settings) is None


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"
