from src.api import config
from src.api.security import create_access_token, create_refresh_token
from tests.conftest import PASSWORD, bearer, login, signup


def test_signup_creates_rider(client):
    user = signup(client, "Asha@Example.com", "Asha")
    assert user["email"] == "asha@example.com"
    assert user["role"] == "rider"


def test_signup_duplicate_email_conflicts(client):
    signup(client, "dup@example.com")
    resp = client.post("/auth/signup", json={"name": "Again", "email": "DUP@example.com", "password": PASSWORD})
    assert resp.status_code == 409
    assert resp.json()["error"] == "Conflict"


def test_signup_invalid_payload_is_400(client):
    resp = client.post("/auth/signup", json={"name": "X", "email": "not-an-email", "password": "short"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "ValidationError"


def test_login_returns_access_token_and_scoped_refresh_cookie(client):
    signup(client, "cookie@example.com")
    resp = client.post("/auth/login", json={"email": "cookie@example.com", "password": PASSWORD})
    assert resp.status_code == 200
    assert resp.json()["access_token"]

    name_value, *attrs = [part.strip().lower() for part in resp.headers["set-cookie"].split(";")]
    assert name_value.startswith("refreshtoken=")
    assert "httponly" in attrs
    assert "path=/auth/refresh" in attrs
    assert "secure" not in attrs


def test_refresh_cookie_is_secure_in_production(client, monkeypatch):
    monkeypatch.setattr(config, "DEPLOY_ENV", "production")
    signup(client, "prod@example.com")
    resp = client.post("/auth/login", json={"email": "prod@example.com", "password": PASSWORD})
    attrs = [part.strip().lower() for part in resp.headers["set-cookie"].split(";")[1:]]
    assert "secure" in attrs


def test_login_wrong_password_is_401(client):
    signup(client, "wrong@example.com")
    resp = client.post("/auth/login", json={"email": "wrong@example.com", "password": "nope-nope"})
    assert resp.status_code == 401
    assert resp.json() == {"error": "Unauthorized", "message": "Invalid email or password."}


def test_refresh_uses_cookie_from_login(client):
    signup(client, "refresh@example.com")
    login(client, "refresh@example.com")

    resp = client.post("/auth/refresh")
    assert resp.status_code == 200
    new_token = resp.json()["access_token"]
    assert client.get("/rider/getMyProfile", headers=bearer(new_token)).status_code == 200


def test_refresh_without_cookie_is_401(client):
    resp = client.post("/auth/refresh")
    assert resp.status_code == 401
    assert resp.json()["error"] == "Unauthorized"


def test_refresh_rejects_access_token_in_cookie(client):
    user = signup(client, "swap@example.com")
    client.cookies.set("refreshToken", create_access_token(subject=user["id"], role="rider"))
    assert client.post("/auth/refresh").status_code == 401


def test_refresh_token_is_not_a_bearer_credential(client):
    user = signup(client, "bearer@example.com")
    refresh = create_refresh_token(subject=user["id"], role="rider")
    resp = client.get("/rider/getMyProfile", headers=bearer(refresh))
    assert resp.status_code == 401


def test_protected_endpoint_requires_token(client):
    resp = client.get("/rider/getMyProfile")
    assert resp.status_code == 401
    assert resp.headers["www-authenticate"] == "Bearer"


def test_role_guard_rejects_wrong_role(client, rider, driver):
    _, rider_token = rider
    _, driver_token = driver
    assert client.get("/driver/getMyProfile", headers=bearer(rider_token)).status_code == 403
    resp = client.post("/rider/requestRide", json={}, headers=bearer(driver_token))
    assert resp.status_code == 403
    assert resp.json()["error"] == "Forbidden"


def test_onboard_driver_requires_admin(client, rider):
    user, rider_token = rider
    resp = client.post(
        f"/auth/onboardDriver/{user['id']}",
        json={"license_number": "DL-1", "vehicle_number": "CG04ZZ0001"},
        headers=bearer(rider_token),
    )
    assert resp.status_code == 403


def test_onboard_driver_upgrades_role(client, admin_token, rider):
    user, rider_token = rider
    resp = client.post(
        f"/auth/onboardDriver/{user['id']}",
        json={"license_number": "DL-1", "vehicle_number": "CG04ZZ0001", "vehicle_type": "Hatchback"},
        headers=bearer(admin_token),
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["id"] == user["id"]
    assert body["vehicle_type"] == "Hatchback"
    assert body["is_available"] is True

    # Role is read from the database, so the old token now reaches driver routes.
    assert client.get("/driver/getMyProfile", headers=bearer(rider_token)).status_code == 200
    assert client.get("/rider/getMyProfile", headers=bearer(rider_token)).status_code == 403

    again = client.post(
        f"/auth/onboardDriver/{user['id']}",
        json={"license_number": "DL-1", "vehicle_number": "CG04ZZ0001"},
        headers=bearer(admin_token),
    )
    assert again.status_code == 409


def test_onboard_unknown_user_is_404(client, admin_token):
    resp = client.post(
        "/auth/onboardDriver/00000000-0000-0000-0000-000000000000",
        json={"license_number": "DL-1", "vehicle_number": "CG04ZZ0001"},
        headers=bearer(admin_token),
    )
    assert resp.status_code == 404
    assert resp.json()["error"] == "NotFound"
