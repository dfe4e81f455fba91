"""Shared-secret admin authentication with JWT sessions."""

import hmac
import logging
import time
from datetime import datetime, timezone
from typing import Any

from authlib.jose import JoseError, JsonWebToken

from src.schemas import TokenOut
from src.utils.errors import AuthenticationError, AuthorizationError, ConfigurationError

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"
JWT_ALGORITHM = "HS256"

_jwt = JsonWebToken([JWT_ALGORITHM])


class AuthService:
    def __init__(self, admin_password: str, jwt_secret: str, expires_in_seconds: int = 7 * 24 * 3600):
        self.admin_password = admin_password
        self.jwt_secret = jwt_secret
        self.expires_in_seconds = expires_in_seconds

    def login(self, password: str) -> TokenOut:
        """Exchange the admin password for a signed token."""
        if not self.admin_password or not self.jwt_secret:
            logger.error("ADMIN_PASSWORD or JWT_SECRET is not configured")
            raise ConfigurationError("Server configuration error", error="Invalid configuration")

        if not hmac.compare_digest(password.encode("utf-8"), self.admin_password.encode("utf-8")):
            logger.warning("Rejected admin login with a wrong password")
            raise AuthenticationError("The password is incorrect", error="Invalid password")

        token = self.generate_token({"role": ADMIN_ROLE, "loginAt": datetime.now(timezone.utc).isoformat()})
        logger.info("Admin login succeeded")
        return TokenOut(token=token, role=ADMIN_ROLE, expires_in=self.expires_in_seconds)

    def generate_token(self, claims: dict[str, Any]) -> str:
        now = int(time.time())
        payload = {**claims, "iat": now, "exp": now + self.expires_in_seconds}
        header = {"alg": JWT_ALGORITHM, "typ": "JWT"}
        token = _jwt.encode(header, payload, self.jwt_secret)
        # authlib returns bytes
        return token.decode() if isinstance(token, bytes) else token

    def verify(self, token: str) -> dict[str, Any]:
        """Decode and validate a token, returning its claims."""
        if not self.jwt_secret:
            raise ConfigurationError("Server configuration error", error="Invalid configuration")
        try:
            claims = _jwt.decode(token, self.jwt_secret)
            claims.validate()
        except (JoseError, ValueError) as e:
            logger.info(f"Rejected token: {e}")
            raise AuthorizationError("The token is invalid or has expired", error="Invalid token") from e
        return dict(claims)

    def require_admin(self, token: str | None) -> dict[str, Any]:
        if not token:
            raise AuthenticationError("Please log in to access this resource", error="Access token required")
        claims = self.verify(token)
        if claims.get("role") != ADMIN_ROLE:
            raise AuthorizationError("Only administrators can access this resource")
        return claims
