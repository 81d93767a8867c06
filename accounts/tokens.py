"""
Bearer token signing and verification with authlib.
"""

import time
import uuid
from datetime import datetime, timezone
from typing import Iterable

import structlog
from authlib.jose import JoseError, jwt

from accounts.models import TokenClaims

logger = structlog.get_logger(__name__)


class InvalidTokenError(Exception):
    """The token is malformed, badly signed, expired or meant for someone else."""


class TokenService:
    """Mints and verifies HMAC-signed JWTs for one issuer/audience pair."""

    def __init__(
        self,
        secret: str,
        issuer: str,
        audience: str,
        lifetime_minutes: int = 60,
        algorithm: str = "HS256",
    ):
        self.secret = secret
        self.issuer = issuer
        self.audience = audience
        self.lifetime_minutes = lifetime_minutes
        self.algorithm = algorithm

    @classmethod
    def from_config(cls, config) -> "TokenService":
        """Build the service from a ``BookstoreConfig``."""
        return cls(
            secret=config.jwt_secret,
            issuer=config.jwt_issuer,
            audience=config.jwt_audience,
            lifetime_minutes=config.token_lifetime_minutes,
            algorithm=config.jwt_algorithm,
        )

    def issue_token(self, username: str, roles: Iterable[str], expires_in_seconds: int = None) -> str:
        """
        Generate a signed token for a user.

        Args:
            username: Subject (sub) claim
            roles: Every role assigned to the user
            expires_in_seconds: Override the configured lifetime

        Returns:
            Compact JWT string
        """
        now = int(time.time())
        lifetime = self.lifetime_minutes * 60 if expires_in_seconds is None else expires_in_seconds

        payload = {
            "iss": self.issuer,
            "aud": self.audience,
            "sub": username,
            "jti": uuid.uuid4().hex,
            "iat": now,
            "exp": now + lifetime,
            "roles": list(roles),
        }
        header = {"alg": self.algorithm, "typ": "JWT"}

        token = jwt.encode(header, payload, self.secret)
        return token.decode("utf-8") if isinstance(token, bytes) else token

    def verify_token(self, token: str) -> TokenClaims:
        """
        Verify signature, issuer, audience and expiry.

        Args:
            token: Compact JWT string

        Returns:
            Verified claims

        Raises:
            InvalidTokenError: If any check fails
        """
        claims_options = {
            "iss": {"essential": True, "value": self.issuer},
            "aud": {"essential": True, "value": self.audience},
            "sub": {"essential": True},
            "exp": {"essential": True},
        }
        try:
            claims = jwt.decode(token, self.secret, claims_options=claims_options)
            claims.validate()
        except (JoseError, ValueError) as e:
            logger.info("Token rejected", reason=str(e))
            raise InvalidTokenError(str(e)) from e

        if claims.header.get("alg") != self.algorithm:
            raise InvalidTokenError(f"Unexpected signing algorithm: {claims.header.get('alg')}")

        roles = claims.get("roles") or []
        if isinstance(roles, str):
            roles = [roles]

        return TokenClaims(
            subject=claims["sub"],
            roles=list(roles),
            token_id=claims.get("jti"),
            expires_at=datetime.fromtimestamp(int(claims["exp"]), tz=timezone.utc),
        )
