"""Shared request helpers for the API tests."""

API = "/api/v1"


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register_user(client, name: str, email: str, password: str = "secret123") -> dict:
    response = client.post(
        f"{API}/auth/register",
        json={"name": name, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text
    data = response.json()
    data["headers"] = auth_headers(data["token"])
    return data
