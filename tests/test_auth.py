from jose import jwt

from todo_api.config import get_settings
from todo_api.errors import TokenVerificationError
from todo_api.main import app
from todo_api.services.token_service import get_token_service


def message(response):
    return response.json()["message"]


def test_missing_header_is_rejected(client):
    response = client.get("/api/tasks")

    assert response.status_code == 401
    assert message(response) == "No authorization token provided"
    assert response.headers["www-authenticate"] == "Bearer"
    assert response.json()["success"] is False


def test_wrong_scheme_is_a_format_error(client, user):
    token = get_token_service().issue_token(user.id, user.email)
    for header in (f"Token {token}", f"bearer {token}", "Bearer", f"Bearer {token} extra"):
        response = client.get("/api/tasks", headers={"Authorization": header})
        assert response.status_code == 401
        assert message(response) == "Invalid token format. Expected: Bearer <token>"


def test_expired_token(client, user):
    token = get_token_service().issue_token(user.id, user.email, expires_minutes=-1)
    response = client.get("/api/tasks", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert message(response) == "Token expired. Please login again."


def test_tampered_token(client, user):
    forged = jwt.encode({"sub": user.id}, "not-the-secret", algorithm="HS256")
    response = client.get("/api/tasks", headers={"Authorization": f"Bearer {forged}"})

    assert response.status_code == 401
    assert message(response) == "Invalid authentication token"


def test_valid_token_is_accepted(client, auth_headers):
    response = client.get("/api/tasks", headers=auth_headers)
    assert response.status_code == 200


def test_token_from_login_authenticates(client, user):
    login = client.post("/api/users/login", json={"email": user.email})
    token = login.json()["token"]

    response = client.get("/api/tasks", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200


def test_optional_auth_on_root(client, user, auth_headers):
    assert client.get("/").json()["authenticated_as"] is None
    assert client.get("/", headers={"Authorization": "Bearer junk"}).json()["authenticated_as"] is None
    assert client.get("/", headers=auth_headers).json()["authenticated_as"] == user.id


def test_tokens_use_configured_secret(user):
    token = get_token_service().issue_token(user.id, user.email)
    claims = jwt.decode(token, get_settings().jwt_secret, algorithms=["HS256"])
    assert claims["sub"] == user.id
    assert claims["email"] == user.email


class UnverifiableTokens:
    def verify_token(self, token):
        raise TokenVerificationError()


def test_unclassified_verification_failure(client):
    app.dependency_overrides[get_token_service] = UnverifiableTokens
    try:
        response = client.get("/api/tasks", headers={"Authorization": "Bearer anything"})
    finally:
        del app.dependency_overrides[get_token_service]

    assert response.status_code == 401
    assert message(response) == "Authentication failed"
    assert response.headers["www-authenticate"] == "Bearer"
