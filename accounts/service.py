"""
Token issuance for username/password logins.
"""

import structlog

from accounts.store import UserStore
from accounts.tokens import TokenService

logger = structlog.get_logger(__name__)


class InvalidCredentialsError(Exception):
    """Unknown username or wrong password; the two cases are not distinguished."""


class AuthService:
    """Verifies credentials against the identity store and mints tokens."""

    def __init__(self, user_store: UserStore, token_service: TokenService):
        self.user_store = user_store
        self.token_service = token_service

    async def login(self, username: str, password: str) -> str:
        """
        Exchange credentials for a signed bearer token.

        Args:
            username: Login name
            password: Clear-text password

        Returns:
            Token carrying the username and every role of the user

        Raises:
            InvalidCredentialsError: If the user is unknown or the password is wrong
        """
        user = await self.user_store.find_by_username(username)
        if user is None or not self.user_store.verify_password(user, password):
            logger.warning("Login failed", username=username)
            raise InvalidCredentialsError()

        logger.info("Login succeeded", username=username, roles=user.roles)
        return self.token_service.issue_token(user.username, user.roles)
