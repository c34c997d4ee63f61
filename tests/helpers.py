import uuid
from fastapi.testclient import TestClient

from recipeshare.core.security import decode_access_token

API = "/api"


def unique_handle(prefix="cook"):
    return f"{prefix}{uuid.uuid4().hex[:10]}"


def register_user(client: TestClient, handle=None, email=None, password="password1", name="Test Cook"):
    handle = handle or unique_handle()
    email = email or f"{handle}@example.com"
    response = client.post(
        f"{API}/auth/register",
        json={
            "handle": handle,
            "name": name,
            "email": email,
            "password": password,
            "confirmPassword": password,
        },
    )
    assert response.status_code == 201, response.text
    return {"handle": handle, "email": email, "password": password, "name": name}


def login(client: TestClient, email, password="password1"):
    response = client.post(f"{API}/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["access_token"]


def get_auth_headers(client: TestClient, **kwargs):
    """
    Registers a fresh user and returns (headers, user_id).
    """
    user = register_user(client, **kwargs)
    token = login(client, user["email"], user["password"])
    user_id = decode_access_token(token)["sub"]
    return {"Authorization": f"Bearer {token}"}, user_id


def recipe_payload(title="Pasta Carbonara", **overrides):
    data = {
        "title": title,
        "description": "A classic Italian pasta dish.",
        "ingredients": ["200g spaghetti", "100g pancetta", "2 large eggs", "50g pecorino cheese"],
        "instructions": ["Boil the pasta.", "Combine everything and season."],
        "category": "Dinner",
    }
    data.update(overrides)
    return data


def create_recipe(client: TestClient, headers, **overrides):
    response = client.post(f"{API}/recipes", json=recipe_payload(**overrides), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()
