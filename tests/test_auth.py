"""
Tests for signup/login against a mocked identity provider, and role lookup.
"""
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from conftest import CUSTOMER_UID, OWNER_UID
from thriftfinder.core.exceptions import BadRequest, EmailAlreadyExists, InvalidCredentials
from thriftfinder.model import User
from thriftfinder.schema.auth import UserLogin, UserRegister
from thriftfinder.service.auth_service import AuthService


def client_error(code: str, message: str = "boom") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, "Operation")


@pytest.fixture
def cognito():
    cognito = MagicMock()
    cognito.admin_create_user.return_value = {"username": "new@example.com", "uid": "sub-123"}
    cognito.initiate_auth.return_value = {
        "id_token": "id-token",
        "access_token": "access-token",
        "refresh_token": "refresh-token",
        "expires_in": 3600,
        "token_type": "Bearer",
    }
    return cognito


@pytest.mark.unit
class TestAuthService:

    def test_register_creates_local_user(self, seeded, cognito):
        data = UserRegister(name="Lerato", email="new@example.com", password="Secret123!", role="storeOwner")
        result = AuthService(seeded, cognito=cognito).register_user(data)
        assert result.uid == "sub-123"
        assert result.message == "User created successfully"
        user = seeded.get(User, "sub-123")
        assert user.role == "storeOwner"
        assert user.display_name == "Lerato"

    def test_register_rejects_admin_role(self, seeded, cognito):
        data = UserRegister(name="Eve", email="eve@example.com", password="Secret123!", role="admin")
        with pytest.raises(BadRequest):
            AuthService(seeded, cognito=cognito).register_user(data)
        cognito.admin_create_user.assert_not_called()

    def test_register_duplicate_email(self, seeded, cognito):
        data = UserRegister(name="Sipho", email="shopper@example.com", password="x", role="customer")
        with pytest.raises(EmailAlreadyExists):
            AuthService(seeded, cognito=cognito).register_user(data)

    def test_register_provider_conflict(self, seeded, cognito):
        cognito.admin_create_user.side_effect = client_error("UsernameExistsException")
        data = UserRegister(name="Lerato", email="new@example.com", password="x", role="customer")
        with pytest.raises(EmailAlreadyExists):
            AuthService(seeded, cognito=cognito).register_user(data)

    def test_login_creates_session(self, seeded, cognito):
        with patch("thriftfinder.service.auth_service.create_session") as create_session:
            result = AuthService(seeded, cognito=cognito).login(
                UserLogin(email="shopper@example.com", password="pw")
            )
        assert result.access_token == "id-token"
        assert result.user.uid == CUSTOMER_UID
        token, session = create_session.call_args.args
        assert token == "id-token"
        assert session["uid"] == CUSTOMER_UID
        assert session["role"] == "customer"

    def test_login_bad_password(self, seeded, cognito):
        cognito.initiate_auth.side_effect = client_error("NotAuthorizedException")
        with pytest.raises(InvalidCredentials):
            AuthService(seeded, cognito=cognito).login(UserLogin(email="shopper@example.com", password="x"))


@pytest.mark.integration
class TestRoleEndpoints:

    def test_get_role(self, client, login_as):
        login_as(CUSTOMER_UID)
        response = client.post("/api/auth/getRole", json={"uid": OWNER_UID})
        assert response.status_code == 200
        assert response.json() == {"role": "storeOwner"}

    def test_get_role_unknown_user(self, client, login_as):
        login_as(CUSTOMER_UID)
        assert client.post("/api/auth/getRole", json={"uid": "ghost"}).status_code == 404
        assert client.post("/api/auth/getRole", json={}).status_code == 404

    def test_own_role(self, client, login_as):
        login_as(OWNER_UID, role="storeOwner")
        assert client.get("/api/auth/user").json() == {"role": "storeOwner"}

    def test_get_role_requires_session(self, client):
        assert client.post("/api/auth/getRole", json={"uid": OWNER_UID}).status_code == 401
