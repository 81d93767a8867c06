"""
Identity store backed by the users table.
Passwords are stored as bcrypt hashes and never leave this module in clear text.
"""

from typing import Iterable, Optional

import bcrypt
import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from accounts.models import ADMIN_ROLE, KNOWN_ROLES, User
from accounts.schema import UserRow

logger = structlog.get_logger(__name__)


class UserExistsError(Exception):
    """A user with the same username is already registered."""


def hash_password(password: str) -> str:
    """Hash a password with a fresh bcrypt salt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    """Compare a clear-text password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash or over-long password
        return False


class UserStore:
    """Reads and writes user accounts through one session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_username(self, username: str) -> Optional[User]:
        """
        Look up a user by exact username.

        Args:
            username: Login name

        Returns:
            User if found, None otherwise
        """
        row = await self.session.scalar(select(UserRow).where(UserRow.username == username))
        if row is None:
            return None
        return User.model_validate(row)

    @staticmethod
    def verify_password(user: User, password: str) -> bool:
        return check_password(password, user.password_hash)

    async def create_user(
        self,
        username: str,
        password: str,
        roles: Iterable[str] = (),
        email: Optional[str] = None,
        first_name: str = "",
        last_name: str = "",
    ) -> User:
        """
        Register a user and commit.

        Raises:
            UserExistsError: If the username is taken
            ValueError: If a role is not one of the known roles
        """
        roles = list(dict.fromkeys(roles))
        unknown = [role for role in roles if role not in KNOWN_ROLES]
        if unknown:
            raise ValueError(f"Unknown roles: {', '.join(unknown)}")

        row = UserRow(
            username=username,
            email=email,
            first_name=first_name,
            last_name=last_name,
            password_hash=hash_password(password),
            roles=roles,
        )
        self.session.add(row)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise UserExistsError(f"User '{username}' already exists") from e

        logger.info("User created", username=username, roles=roles)
        return User.model_validate(row)

    async def count_users(self) -> int:
        return await self.session.scalar(select(func.count()).select_from(UserRow)) or 0

    async def ensure_admin(self, username: str, password: str, email: Optional[str] = None) -> bool:
        """
        Create the administrator account unless it already exists.

        Returns:
            True if the account was created
        """
        if await self.find_by_username(username) is not None:
            logger.info("Admin user already present", username=username)
            return False

        await self.create_user(
            username=username,
            password=password,
            roles=[ADMIN_ROLE],
            email=email,
            first_name="Admin",
            last_name="User",
        )
        return True
