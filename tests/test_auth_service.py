"""Tests for AuthService."""

import time

import pytest

from src.services.auth_service import ADMIN_ROLE, AuthService
from src.utils.errors import AuthenticationError, AuthorizationError, ConfigurationError


class TestAuthService:
    @pytest.fixture
    def auth_service(self):
        return AuthService(admin_password="s3nha-forte", jwt_secret="test-secret", expires_in_seconds=3600)

    def test_login_returns_admin_token(self, auth_service):
        result = auth_service.login("s3nha-forte")

        assert result.role == ADMIN_ROLE
        assert result.expires_in == 3600
        claims = auth_service.verify(result.token)
        assert claims["role"] == ADMIN_ROLE
        assert claims["exp"] - claims["iat"] == 3600
        assert "loginAt" in claims

    def test_wrong_password(self, auth_service):
        with pytest.raises(AuthenticationError):
            auth_service.login("errada")

    @pytest.mark.parametrize("password, secret", [("", "test-secret"), ("s3nha-forte", "")])
    def test_missing_configuration(self, password, secret):
        with pytest.raises(ConfigurationError):
            AuthService(admin_password=password, jwt_secret=secret).login("s3nha-forte")

    def test_require_admin_without_token(self, auth_service):
        with pytest.raises(AuthenticationError):
            auth_service.require_admin(None)

    def test_tampered_token(self, auth_service):
        token = auth_service.login("s3nha-forte").token
        with pytest.raises(AuthorizationError):
            auth_service.require_admin(token[:-2] + ("aa" if not token.endswith("aa") else "bb"))

    def test_token_signed_with_other_secret(self, auth_service):
        other = AuthService("s3nha-forte", "another-secret")
        with pytest.raises(AuthorizationError):
            auth_service.require_admin(other.login("s3nha-forte").token)

    def test_expired_token(self, auth_service):
        now = int(time.time())
        token = auth_service.generate_token({"role": ADMIN_ROLE})
        expired = AuthService("s3nha-forte", "test-secret", expires_in_seconds=-60).generate_token({"role": ADMIN_ROLE})

        assert auth_service.require_admin(token)["iat"] >= now
        with pytest.raises(AuthorizationError):
            auth_service.require_admin(expired)

    def test_non_admin_role(self, auth_service):
        token = auth_service.generate_token({"role": "viewer"})
        with pytest.raises(AuthorizationError, match="administrators"):
            auth_service.require_admin(token)
