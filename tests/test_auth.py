from fastapi.testclient import TestClient
from recipeshare import crud, models
from recipeshare.core.security import decode_access_token
from tests.helpers import API, login, register_user, unique_handle


def test_register_and_login_flow(client: TestClient, db):
    handle = unique_handle("cooklover")
    response = client.post(
        f"{API}/auth/register",
        json={
            "handle": handle,
            "name": "Cook Lover",
            "email": f"{handle}@example.com",
            "password": "password1",
            "confirmPassword": "password1",
        },
    )
    assert response.status_code == 201
    assert response.json()["message"] == "User registered successfully"

    # Password is stored hashed
    user = crud.get_user_by_email(db, email=f"{handle}@example.com")
    assert user is not None
    assert user.hashed_password != "password1"

    login_res = client.post(
        f"{API}/auth/login", json={"email": f"{handle}@example.com", "password": "password1"}
    )
    assert login_res.status_code == 200
    body = login_res.json()
    assert body["token_type"] == "bearer"

    claims = decode_access_token(body["access_token"])
    assert claims["sub"] == str(user.id)
    assert claims["handle"] == handle
    assert claims["email"] == f"{handle}@example.com"


def test_register_missing_fields(client: TestClient, db):
    users_before = db.query(models.User).count()

    response = client.post(f"{API}/auth/register", json={})

    assert response.status_code == 400
    errors = response.json()["errors"]
    # Display name is optional on registration
    assert len(errors) == 4
    assert [e["field"] for e in errors] == ["handle", "email", "password", "confirmPassword"]
    assert errors[0]["msg"] == "Handle is required"
    assert errors[3]["msg"] == "Confirm password is required"
    assert db.query(models.User).count() == users_before


def test_register_reports_every_invalid_field(client: TestClient, db):
    users_before = db.query(models.User).count()
    response = client.post(
        f"{API}/auth/register",
        json={
            "handle": "   ",
            "name": "Someone",
            "email": "invalid-email",
            "password": "pass",
            "confirmPassword": "pass",
        },
    )
    assert response.status_code == 400
    fields = [e["field"] for e in response.json()["errors"]]
    assert fields == ["handle", "email", "password"]
    messages = {e["field"]: e["msg"] for e in response.json()["errors"]}
    assert messages["password"] == "Password must be at least 8 characters long"
    assert db.query(models.User).count() == users_before


def test_register_reports_short_password_and_mismatch_together(client: TestClient, db):
    handle = unique_handle()
    response = client.post(
        f"{API}/auth/register",
        json={
            "handle": handle,
            "email": "not-an-email",
            "password": "short",
            "confirmPassword": "different",
        },
    )
    assert response.status_code == 400
    assert response.json()["errors"][1:] == [
        {"field": "password", "msg": "Password must be at least 8 characters long"},
        {"field": "confirmPassword", "msg": "Passwords do not match"},
    ]
    assert response.json()["errors"][0]["field"] == "email"
    assert crud.get_user_by_handle(db, handle=handle) is None


def test_register_without_name_defaults_to_handle(client: TestClient, db):
    handle = unique_handle("cooklover")
    response = client.post(
        f"{API}/auth/register",
        json={
            "handle": handle,
            "email": f"{handle}@b.com",
            "password": "password1",
            "confirmPassword": "password1",
        },
    )
    assert response.status_code == 201

    user = crud.get_user_by_email(db, email=f"{handle}@b.com")
    assert user.name == handle
    assert login(client, f"{handle}@b.com")


def test_register_handle_without_slug_characters(client: TestClient, db):
    users_before = db.query(models.User).count()
    for handle in ("!!!", "???", "日本語"):
        response = client.post(
            f"{API}/auth/register",
            json={
                "handle": handle,
                "name": "No Slug",
                "email": f"{unique_handle()}@example.com",
                "password": "password1",
                "confirmPassword": "password1",
            },
        )
        assert response.status_code == 400
        assert response.json()["errors"] == [{"field": "handle", "msg": "Handle is required"}]
    assert db.query(models.User).count() == users_before


def test_register_password_mismatch(client: TestClient, db):
    handle = unique_handle()
    response = client.post(
        f"{API}/auth/register",
        json={
            "handle": handle,
            "name": "Mismatch",
            "email": f"{handle}@example.com",
            "password": "password1",
            "confirmPassword": "password2",
        },
    )
    assert response.status_code == 400
    errors = response.json()["errors"]
    assert errors == [{"field": "confirmPassword", "msg": "Passwords do not match"}]
    assert crud.get_user_by_email(db, email=f"{handle}@example.com") is None


def test_register_duplicate_email(client: TestClient):
    user = register_user(client)
    response = client.post(
        f"{API}/auth/register",
        json={
            "handle": unique_handle(),
            "name": "Copycat",
            "email": user["email"].upper(),
            "password": "password1",
            "confirmPassword": "password1",
        },
    )
    assert response.status_code == 409
    assert response.json()["error"] == "Email already in use"


def test_register_duplicate_handle_after_slugify(client: TestClient, db):
    base = unique_handle("chef")
    register_user(client, handle=base)

    # Spacing and case differ, but the slug is the same
    spaced = f"{base[:4].upper()} {base[4:]}"
    response = client.post(
        f"{API}/auth/register",
        json={
            "handle": spaced,
            "name": "Copycat",
            "email": f"other-{base}@example.com",
            "password": "password1",
            "confirmPassword": "password1",
        },
    )
    assert response.status_code == 409
    assert response.json()["error"] == "Handle already in use"
    assert crud.get_user_by_email(db, email=f"other-{base}@example.com") is None


def test_handle_is_stored_slugified(client: TestClient, db):
    suffix = unique_handle("")
    register_user(client, handle=f"Cook Lover {suffix}", email=f"slug-{suffix}@example.com")
    user = crud.get_user_by_email(db, email=f"slug-{suffix}@example.com")
    assert user.handle == f"cooklover{suffix}"


def test_slugify_handle():
    assert crud.slugify_handle("Cook Lover 2295") == "cooklover2295"
    assert crud.slugify_handle("Crème_Brûlée-Fan") == "creme_brulee-fan"
    assert crud.slugify_handle("  @chef!  ") == "chef"


def test_login_unknown_email(client: TestClient):
    response = client.post(
        f"{API}/auth/login", json={"email": "nobody-here@example.com", "password": "password1"}
    )
    assert response.status_code == 404
    assert response.json()["error"] == "User not found"


def test_login_wrong_password(client: TestClient):
    user = register_user(client)
    response = client.post(
        f"{API}/auth/login", json={"email": user["email"], "password": "wrong-password"}
    )
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid password"


def test_login_validation(client: TestClient):
    response = client.post(f"{API}/auth/login", json={"email": "", "password": ""})
    assert response.status_code == 400
    fields = [e["field"] for e in response.json()["errors"]]
    assert fields == ["email", "password"]


def test_login_email_is_case_insensitive(client: TestClient, db):
    handle = unique_handle()
    mixed_case_email = f"{handle.upper()}@Example.com"
    register_user(client, handle=handle, email=mixed_case_email)

    user = crud.get_user_by_email(db, email=mixed_case_email)
    assert user.email == mixed_case_email.lower()

    assert login(client, mixed_case_email.lower())
    assert login(client, mixed_case_email)
