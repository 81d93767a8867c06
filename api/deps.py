"""FastAPI dependency providers."""

from typing import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from accounts.service import AuthService
from accounts.store import UserStore
from accounts.tokens import TokenService
from api.config import APIConfig
from catalog.repository import BookRepository
from catalog.service import BookService
from utilities.database import DatabaseManager


def get_api_config(request: Request) -> APIConfig:
    return request.app.state.api_config


def get_db_manager(request: Request) -> DatabaseManager:
    return request.app.state.db_manager


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


async def get_session(db_manager: DatabaseManager = Depends(get_db_manager)) -> AsyncIterator[AsyncSession]:
    """One session per request, closed when the response is done."""
    async with db_manager.session() as session:
        yield session


def get_book_repository(session: AsyncSession = Depends(get_session)) -> BookRepository:
    return BookRepository(session)


def get_book_service(repository: BookRepository = Depends(get_book_repository)) -> BookService:
    return BookService(repository)


def get_user_store(session: AsyncSession = Depends(get_session)) -> UserStore:
    return UserStore(session)


def get_auth_service(
    user_store: UserStore = Depends(get_user_store),
    token_service: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(user_store, token_service)
