"""Script to create database tables from SQLAlchemy models."""

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from docvault.infrastructure.config.settings import get_settings  # noqa: E402
from docvault.infrastructure.database.session import create_tables, engine  # noqa: E402
from docvault.infrastructure.logging import get_logger  # noqa: E402

logger = get_logger(__name__)


async def main() -> None:
    """Create database tables."""
    settings = get_settings()
    logger.info(f"Creating database tables on {settings.DATABASE_NAME} ({settings.ENVIRONMENT.value})...")

    try:
        await create_tables()
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Error creating database tables: {str(e)}", exc_info=True)
        sys.exit(1)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
