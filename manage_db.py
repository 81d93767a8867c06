#!/usr/bin/env python3
"""
Database Management Utility

This script provides utilities to manage the bookstore database:
- Create the schema
- Seed the admin account and the books CSV
- Create a user with roles
- Show catalog statistics
"""

import asyncio
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from accounts.models import USER_ROLE
from accounts.store import UserExistsError, UserStore
from api.main import seed_database
from catalog.repository import BookRepository
from utilities.config import BookstoreConfig
from utilities.database import DatabaseManager
from utilities.logger import setup_logging


async def init_schema(config: BookstoreConfig, drop_existing: bool = False):
    """Create all tables."""
    print("\n🛠️  INITIALIZING SCHEMA")
    print("=" * 80)

    db_manager = DatabaseManager(config.database_url, echo=config.database_echo)
    try:
        await db_manager.init_database(drop_existing=drop_existing)
        print(f"✅ Schema ready at {config.database_url}")
    finally:
        await db_manager.close()


async def seed(config: BookstoreConfig):
    """Create the admin account and import the books CSV."""
    print("\n🌱 SEEDING DATABASE")
    print("=" * 80)

    db_manager = DatabaseManager(config.database_url, echo=config.database_echo)
    try:
        await db_manager.init_database()
        await seed_database(db_manager, config)

        async with db_manager.session() as session:
            book_count = await BookRepository(session).count_books()
        print(f"✅ Admin user: {config.admin_username}")
        print(f"📚 Books in catalog: {book_count}")
    finally:
        await db_manager.close()


async def create_user(config: BookstoreConfig, username: str, password: str, roles):
    """Create a user with the given roles."""
    print(f"\n👤 CREATING USER {username}")
    print("=" * 80)

    db_manager = DatabaseManager(config.database_url, echo=config.database_echo)
    try:
        await db_manager.init_database()
        async with db_manager.session() as session:
            user = await UserStore(session).create_user(username, password, roles=roles)
        print(f"✅ Created {user.username} with roles: {', '.join(user.roles) or '-'}")
    except UserExistsError as e:
        print(f"❌ {e}")
        sys.exit(1)
    except ValueError as e:
        print(f"❌ Invalid user: {e}")
        sys.exit(1)
    finally:
        await db_manager.close()


async def show_statistics(config: BookstoreConfig):
    """Show book and user counts."""
    print("\n📊 DATABASE STATISTICS")
    print("=" * 80)

    db_manager = DatabaseManager(config.database_url, echo=config.database_echo)
    try:
        if not await db_manager.verify_connection():
            print("❌ Database is not reachable")
            sys.exit(1)

        async with db_manager.session() as session:
            book_count = await BookRepository(session).count_books()
            user_count = await UserStore(session).count_users()

        print(f"📚 Total Books: {book_count}")
        print(f"👥 Total Users: {user_count}")
    finally:
        await db_manager.close()


async def main():
    """Main function."""
    if len(sys.argv) < 2:
        print("Usage: python manage_db.py [init|seed|create-user|stats] [args]")
        print()
        print("Commands:")
        print("  init         - Create the schema (--drop to recreate it)")
        print("  seed         - Create the admin user and import the books CSV")
        print("  create-user  - Create a user: <username> <password> [role ...]")
        print("  stats        - Show book and user counts")
        print()
        print("Examples:")
        print("  python manage_db.py init --drop")
        print("  python manage_db.py create-user alice 'S3cret!' User")
        print("  python manage_db.py stats")
        sys.exit(1)

    command = sys.argv[1].lower()
    config = BookstoreConfig()

    # Setup logging
    setup_logging(
        log_level=config.log_level,
        log_format=config.log_format,
        log_file=config.get_log_file_path(),
        debug=config.is_development()
    )

    if command == "init":
        await init_schema(config, drop_existing="--drop" in sys.argv[2:])
    elif command == "seed":
        await seed(config)
    elif command == "create-user":
        if len(sys.argv) < 4:
            print("❌ Error: username and password required")
            print("Usage: python manage_db.py create-user <username> <password> [role ...]")
            sys.exit(1)
        roles = sys.argv[4:] or [USER_ROLE]
        await create_user(config, sys.argv[2], sys.argv[3], roles)
    elif command == "stats":
        await show_statistics(config)
    else:
        print(f"❌ Unknown command: {command}")
        print("Available commands: init, seed, create-user, stats")
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
