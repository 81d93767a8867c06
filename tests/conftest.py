"""
Pytest configuration and shared fixtures.
"""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from accounts.models import ADMIN_ROLE, USER_ROLE
from accounts.tokens import TokenService
from api.config import APIConfig
from api.main import create_app
from utilities.config import BookstoreConfig
from utilities.database import DatabaseManager


TEST_JWT_SECRET = "test-signing-secret-with-at-least-32-bytes"
ADMIN_PASSWORD = "Admin123!"

SEED_BOOKS_CSV = """title,author,isbn,publishedDate,price,quantity
Initial Test Book,Initial Author,1234567890123,1920-01-01,15.99,10
Second Test Book,Second Author,1234567890987,2001-01-01,14.99,9
Third Test Book,Second Author,1234567890456,2022-01-01,13.99,8
Fourth Test Book,Third Author Filter Test,1234561230123,2023-01-01,11.99,5
Fifth Test Book,Fourth Author,0987654321123,2019-05-01,10.99,4
First Filtered Test Book,Fourth Author,1237654321123,2018-04-01,21.99,3
Second Filtered Test Book,Fourth Author,7897654561123,2017-07-01,22.99,2
"""


def sqlite_url(path) -> str:
    return f"sqlite+aiosqlite:///{path}"


@pytest.fixture
def books_csv(tmp_path):
    """Seven seed books as a CSV file."""
    path = tmp_path / "books.csv"
    path.write_text(SEED_BOOKS_CSV, encoding="utf-8")
    return path


@pytest.fixture
def test_config(tmp_path, books_csv):
    """Production configuration over a throwaway SQLite file."""
    return BookstoreConfig(
        database_url=sqlite_url(tmp_path / "api.db"),
        jwt_secret=TEST_JWT_SECRET,
        admin_password=ADMIN_PASSWORD,
        seed_books_csv=str(books_csv),
        environment="Production",
        log_format="console",
    )


@pytest.fixture
def api_config():
    return APIConfig()


@pytest.fixture
def app(test_config, api_config):
    return create_app(test_config, api_config)


@pytest.fixture
def client(app):
    """Test client addressed to localhost; the lifespan seeds the database."""
    with TestClient(app, base_url="http://localhost") as client:
        yield client


@pytest.fixture
def token_service(test_config):
    return TokenService.from_config(test_config)


@pytest.fixture
def admin_headers(token_service):
    token = token_service.issue_token("admin", [ADMIN_ROLE])
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers(token_service):
    token = token_service.issue_token("reader", [USER_ROLE])
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def db_manager(tmp_path):
    """Database manager with an empty schema."""
    manager = DatabaseManager(sqlite_url(tmp_path / "unit.db"))
    await manager.init_database()
    yield manager
    await manager.close()


@pytest_asyncio.fixture
async def session(db_manager):
    async with db_manager.session() as session:
        yield session
