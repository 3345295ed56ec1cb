from tests.conftest import ACCOUNT_PASSWORD

AUTH_URL = "/api/v1/auth"


def test_login_and_me(client, service_account):
    response = client.post(f"{AUTH_URL}/login", json={"email": service_account.email, "password": ACCOUNT_PASSWORD})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["account"]["role"] == "service"

    me = client.get(f"{AUTH_URL}/me", headers={"Authorization": f"Bearer {data['token']}"})
    assert me.status_code == 200
    assert me.json()["data"]["email"] == service_account.email


def test_login_with_wrong_password(client, service_account):
    response = client.post(f"{AUTH_URL}/login", json={"email": service_account.email, "password": "wrong-password"})
    assert response.status_code == 401


def test_inactive_account_cannot_login(client, inactive_account):
    response = client.post(f"{AUTH_URL}/login", json={"email": inactive_account.email, "password": ACCOUNT_PASSWORD})
    assert response.status_code == 403


def test_refresh_token(client, service_account):
    tokens = client.post(
        f"{AUTH_URL}/login",
        json={"email": service_account.email, "password": ACCOUNT_PASSWORD},
    ).json()["data"]

    response = client.post(f"{AUTH_URL}/refresh-token", json={"refreshToken": tokens["refreshToken"]})
    assert response.status_code == 200
    assert response.json()["data"]["token"]

    rejected = client.post(f"{AUTH_URL}/refresh-token", json={"refreshToken": tokens["token"]})
    assert rejected.status_code == 401


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"
