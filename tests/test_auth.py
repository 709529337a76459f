from .conftest import register_and_login


class TestRegister:
    def test_register_stores_full_name_in_metadata(self, client):
        response = client.post(
            "/api/v1/auth/register",
            json={"email": "ada@example.com", "password": "pw", "full_name": "  Ada Lovelace "},
        )
        assert response.status_code == 201
        body = response.json()
        assert body["email"] == "ada@example.com"
        assert body["user_metadata"] == {"full_name": "Ada Lovelace"}
        assert "password_hash" not in body

    def test_duplicate_email_rejected(self, client):
        register_and_login(client)
        response = client.post(
            "/api/v1/auth/register",
            json={"email": "ada@example.com", "password": "other", "full_name": "Someone"},
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Email already registered"

    def test_full_name_cannot_be_an_email(self, client):
        response = client.post(
            "/api/v1/auth/register",
            json={"email": "ada@example.com", "password": "pw", "full_name": "ada@example.com"},
        )
        assert response.status_code == 400


class TestLogin:
    def test_wrong_password(self, client):
        register_and_login(client)
        response = client.post("/api/v1/auth/login", json={"email": "ada@example.com", "password": "nope"})
        assert response.status_code == 401

    def test_me_requires_token(self, client):
        assert client.get("/api/v1/auth/me").status_code == 401

    def test_me_rejects_garbage_token(self, client):
        response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_me_returns_current_user(self, client, auth_headers):
        response = client.get("/api/v1/auth/me", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["user_metadata"]["full_name"] == "Ada Lovelace"


class TestProfileUpdate:
    def test_merges_metadata(self, client, auth_headers):
        response = client.put(
            "/api/v1/auth/me",
            json={"avatar_url": "http://testserver/a.png"},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["user_metadata"] == {
            "full_name": "Ada Lovelace",
            "avatar_url": "http://testserver/a.png",
        }

        response = client.put("/api/v1/auth/me", json={"full_name": "Ada King"}, headers=auth_headers)
        assert response.json()["user_metadata"] == {
            "full_name": "Ada King",
            "avatar_url": "http://testserver/a.png",
        }

    def test_blank_full_name_rejected(self, client, auth_headers):
        response = client.put("/api/v1/auth/me", json={"full_name": "   "}, headers=auth_headers)
        assert response.status_code == 422
