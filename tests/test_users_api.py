from todo_api.services.token_service import get_token_service


def test_create_user_returns_token(client):
    response = client.post("/api/users", json={"email": "dora@example.com"})

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "User created successfully"
    assert body["data"]["email"] == "dora@example.com"
    payload = get_token_service().verify_token(body["token"])
    assert payload.user_id == body["data"]["id"]


def test_duplicate_user_conflicts(client, user):
    response = client.post("/api/users", json={"email": "ANA@example.com"})

    assert response.status_code == 409
    assert response.json() == {"success": False, "message": "User already exists"}


def test_invalid_email_is_a_validation_error(client):
    response = client.post("/api/users", json={"email": "not-an-email"})

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "email"


def test_login_unknown_user_is_not_an_error(client):
    response = client.post("/api/users/login", json={"email": "ghost@example.com"})

    assert response.status_code == 200
    assert response.json() == {"success": True, "exists": False, "message": "User not found"}


def test_login_known_user(client, user):
    response = client.post("/api/users/login", json={"email": "Ana@Example.com"})

    body = response.json()
    assert body["exists"] is True
    assert body["data"]["id"] == user.id
    assert get_token_service().verify_token(body["token"]).email == user.email


def test_get_by_email_does_not_issue_token(client, user):
    body = client.post("/api/users/get-by-email", json={"email": user.email}).json()

    assert body["exists"] is True
    assert "token" not in body


def test_check_user_exists(client, user):
    assert client.post("/api/users/check", json={"email": user.email}).json() == {
        "success": True,
        "exists": True,
        "message": "User exists",
    }
    assert client.post("/api/users/check", json={"email": "ghost@example.com"}).json()["exists"] is False


def test_health_endpoints(client):
    health = client.get("/health").json()
    assert health["status"] == "OK"
    assert health["endpoints"]["docs"] == "/api-docs"

    assert client.get("/api/health").json()["success"] is True
    assert client.get("/api-docs.json").status_code == 200


def test_create_user_with_trailing_slash(client):
    response = client.post("/api/users/", json={"email": "eli@example.com"}, follow_redirects=False)

    assert response.status_code == 201
    assert response.json()["data"]["email"] == "eli@example.com"
