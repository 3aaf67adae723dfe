"""HTTP tests for the user endpoints."""

import pytest

pytestmark = pytest.mark.integration

USER = {
    "email": "ada@example.com",
    "username": "ada",
    "password": "s3cret-pass",
    "first_name": "Ada",
    "last_name": "Lovelace",
}


@pytest.fixture
def created_user(app_client):
    response = app_client.post("/api/users/", json=USER)
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestUserApi:
    def test_create_hides_password(self, created_user):
        assert created_user["email"] == "ada@example.com"
        assert created_user["is_active"] is True
        assert "password" not in created_user

    @pytest.mark.parametrize(
        "overrides", [{"username": "someone-else"}, {"email": "someone@example.com"}]
    )
    def test_duplicate_is_409(self, app_client, created_user, overrides):
        response = app_client.post("/api/users/", json={**USER, **overrides})

        assert response.status_code == 409
        assert response.json()["success"] is False

    def test_multibyte_password_over_byte_limit_is_422(self, app_client):
        response = app_client.post("/api/users/", json={**USER, "password": "é" * 72})

        assert response.status_code == 422
        assert response.json()["success"] is False

    def test_update_with_oversized_password_is_422(self, app_client, created_user):
        response = app_client.put(
            f"/api/users/{created_user['id']}", json={"password": "é" * 72}
        )

        assert response.status_code == 422

    def test_invalid_email(self, app_client):
        response = app_client.post("/api/users/", json={**USER, "email": "nope"})

        assert response.status_code == 422

    def test_list(self, app_client, created_user):
        body = app_client.get("/api/users/").json()

        assert [u["username"] for u in body["data"]] == ["ada"]
        assert body["pagination"]["total"] == 1

    def test_search_by_email_and_username(self, app_client, created_user):
        by_email = app_client.get("/api/users/search/email", params={"email": "ada@example.com"})
        by_username = app_client.get("/api/users/search/username", params={"username": "ada"})

        assert by_email.json()["data"]["id"] == created_user["id"]
        assert by_username.json()["data"]["id"] == created_user["id"]
        assert app_client.get(
            "/api/users/search/email", params={"email": "x@example.com"}
        ).status_code == 404

    def test_get_update(self, app_client, created_user):
        user_id = created_user["id"]

        response = app_client.put(f"/api/users/{user_id}", json={"first_name": "Augusta"})

        assert response.status_code == 200
        assert app_client.get(f"/api/users/{user_id}").json()["data"]["first_name"] == "Augusta"

    def test_soft_then_hard_delete(self, app_client, created_user):
        user_id = created_user["id"]

        assert app_client.delete(f"/api/users/{user_id}").status_code == 200
        assert app_client.get(f"/api/users/{user_id}").json()["data"]["is_active"] is False

        assert app_client.delete(f"/api/users/{user_id}/hard").status_code == 200
        assert app_client.get(f"/api/users/{user_id}").status_code == 404
