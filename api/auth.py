"""
Authentication and role-based authorization for the FastAPI API.
"""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from accounts.models import ADMIN_ROLE, TokenClaims
from accounts.service import AuthService, InvalidCredentialsError
from accounts.tokens import InvalidTokenError, TokenService
from api.deps import get_auth_service, get_token_service
from api.models import ErrorDetails, LoginRequest, LoginResponse

logger = structlog.get_logger(__name__)

# Security scheme; missing headers are reported as 401 below, not 403
security = HTTPBearer(auto_error=False)

INVALID_CREDENTIALS_MESSAGE = "Invalid username or password"

router = APIRouter(prefix="/api/Auth", tags=["Auth"])


def has_role(claims: TokenClaims, role: str) -> bool:
    """
    Check a verified claim set for a role.

    Args:
        claims: Claims from a verified token
        role: Required role name (exact match)

    Returns:
        True if the role is among the claims
    """
    return role in claims.roles


async def get_current_claims(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    token_service: TokenService = Depends(get_token_service),
) -> TokenClaims:
    """
    Verify the bearer token of the request.

    Raises:
        HTTPException: 401 if the token is missing or invalid
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        claims = token_service.verify_token(credentials.credentials)
    except InvalidTokenError:
        logger.warning("Invalid bearer token", path=request.url.path)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": 'Bearer error="invalid_token"'},
        )

    return claims


def require_role(role: str):
    """Create a dependency that requires a role on the verified token."""

    async def dep(claims: TokenClaims = Depends(get_current_claims)) -> TokenClaims:
        if not has_role(claims, role):
            logger.warning("Missing required role", subject=claims.subject, role=role)
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
        return claims

    return dep


require_admin = require_role(ADMIN_ROLE)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={401: {"model": ErrorDetails}},
)
async def login(
    credentials: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    """Exchange a username and password for a bearer token."""
    try:
        token = await auth_service.login(credentials.username, credentials.password)
    except InvalidCredentialsError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_CREDENTIALS_MESSAGE,
        )

    return LoginResponse(token=token)
