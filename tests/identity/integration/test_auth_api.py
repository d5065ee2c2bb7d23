"""Integration tests for signup, login, logout and password reset endpoints."""


def _signup(client, email="jane@example.com", password="secret123", confirm=None):
    return client.post(
        "/signup", json={"email": email, "password": password, "confirm_password": confirm or password}
    )


class TestSignupLogin:
    def test_signup_then_login_sets_session(self, client):
        assert _signup(client).status_code == 201
        response = client.post("/login", json={"email": "jane@example.com", "password": "secret123"})
        assert response.status_code == 200
        assert response.json()["email"] == "jane@example.com"
        assert client.get("/cart").status_code == 200

    def test_signup_validation_errors(self, client):
        response = _signup(client, email="bad", password="short", confirm="other")
        assert response.status_code == 422
        assert set(response.json()["errors"]) == {"email", "password", "confirm_password"}

    def test_duplicate_signup(self, client):
        _signup(client)
        response = _signup(client)
        assert response.status_code == 422
        assert response.json()["errors"]["email"] == "Email already taken"

    def test_bad_credentials_are_401(self, client):
        _signup(client)
        response = client.post("/login", json={"email": "jane@example.com", "password": "wrongpass1"})
        assert response.status_code == 401

    def test_logout_clears_session(self, make_client):
        client = make_client("jane@example.com")
        assert client.post("/logout").status_code == 200
        assert client.get("/cart").status_code == 401


class TestPasswordResetEndpoints:
    def test_reset_flow(self, client, mailer, stores):
        _signup(client)
        assert client.post("/reset", json={"email": "jane@example.com"}).status_code == 200

        token = stores.users.find_by_email("jane@example.com").reset_token
        response = client.get(f"/reset/{token}")
        assert response.status_code == 200
        user_id = response.json()["user_id"]

        response = client.post("/new-password", json={"user_id": user_id, "token": token, "password": "newsecret9"})
        assert response.status_code == 200
        response = client.post("/login", json={"email": "jane@example.com", "password": "newsecret9"})
        assert response.status_code == 200

    def test_reset_unknown_email_is_404(self, client):
        assert client.post("/reset", json={"email": "nobody@example.com"}).status_code == 404

    def test_invalid_token_is_404(self, client):
        assert client.get("/reset/not-a-token").status_code == 404


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
