"""
Pydantic models for user accounts and verified token claims.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


ADMIN_ROLE = "Admin"
USER_ROLE = "User"
KNOWN_ROLES = (ADMIN_ROLE, USER_ROLE)


class User(BaseModel):
    """A user record as read from the identity store."""
    id: Optional[int] = None
    username: str = Field(..., min_length=1)
    email: Optional[str] = None
    first_name: str = ""
    last_name: str = ""
    password_hash: str = Field(..., repr=False)
    roles: List[str] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class TokenClaims(BaseModel):
    """Claims extracted from a verified bearer token."""
    subject: str
    roles: List[str] = Field(default_factory=list)
    token_id: Optional[str] = None
    expires_at: Optional[datetime] = None

    model_config = ConfigDict(frozen=True)
