from fastapi.testclient import TestClient

from recipeshare import models
from recipeshare.initial_data import clear_db
from tests.helpers import API, create_recipe, get_auth_headers


def test_clear_db_removes_everything(client: TestClient, db):
    headers, _ = get_auth_headers(client)
    fan_headers, _ = get_auth_headers(client)
    recipe = create_recipe(client, headers)
    client.post(f"{API}/recipes/{recipe['id']}/like", headers=fan_headers)
    client.post(f"{API}/recipes/{recipe['id']}/favorite", headers=fan_headers)
    client.post(f"{API}/recipes/{recipe['id']}/comments", json={"text": "Nice"}, headers=fan_headers)

    clear_db(db)

    assert db.query(models.User).count() == 0
    assert db.query(models.Recipe).count() == 0
    assert db.query(models.Comment).count() == 0
    assert db.query(models.recipe_likes).count() == 0
    assert db.query(models.recipe_favorites).count() == 0
