#!/usr/bin/env python3
"""
Script to run the Bookstore API server.
"""

import uvicorn
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from api.config import APIConfig
from utilities.config import BookstoreConfig
from utilities.logger import setup_logging


def main():
    """Run the API server."""
    config = BookstoreConfig()
    api_config = APIConfig()

    setup_logging(
        log_level=config.log_level,
        log_format=config.log_format,
        log_file=config.get_log_file_path(),
        debug=config.is_development()
    )

    print("🚀 Starting Bookstore API Server")
    print(f"📡 Host: {api_config.host}")
    print(f"🔌 Port: {api_config.port}")
    print(f"🌐 Environment: {config.environment}")
    print(f"📚 Database: {config.database_url}")
    print("=" * 50)

    uvicorn.run(
        "api.main:create_app",
        factory=True,
        host=api_config.host,
        port=api_config.port,
        reload=api_config.reload,
        log_level=config.log_level.lower(),
        access_log=True
    )


if __name__ == "__main__":
    main()
